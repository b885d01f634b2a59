"""
Core Phase Calendar Components
==============================

Main exports for cycle generation and phase queries.
"""

from core.parameters import (
    CycleParameters,
    QueryParameters,
    CalendarConfig
)

from core.combinations import enumerate_combinations
from core.cycle_generator import CycleGenerator, add_years
from core.phase_query import (
    PhaseQueryEngine,
    partition_tracks,
    count_phases,
    merge_counts,
    normalize_counts
)
from core.phase_calendar import PhaseCalendar
from core.input_validation import InvalidInputError

__all__ = [
    # Parameters
    'CycleParameters',
    'QueryParameters',
    'CalendarConfig',
    # Generation
    'enumerate_combinations',
    'CycleGenerator',
    'add_years',
    # Queries
    'PhaseQueryEngine',
    'partition_tracks',
    'count_phases',
    'merge_counts',
    'normalize_counts',
    # Session
    'PhaseCalendar',
    'InvalidInputError',
]
