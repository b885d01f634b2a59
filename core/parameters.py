"""
Configuration & Parameters for the Phase Calendar
=================================================

All configuration dataclasses for cycle generation and querying:
- CycleParameters: anchor date, candidate durations per phase, horizon
- QueryParameters: fork-join sharding of the probability query
- CalendarConfig: Master configuration container with presets

Configuration is immutable after construction and passed explicitly into
the generator and query engine.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Tuple

from models.data_models import PHASE_ORDER, PhaseDefinition

# Upper bounds for user-supplied horizons
MAX_HORIZON_YEARS = 10
MAX_HORIZON_DAYS = MAX_HORIZON_YEARS * 366


def _default_phase_durations() -> Dict[str, Tuple[int, ...]]:
    return {
        'Menstruatie': (4, 5, 6),
        'Piek': (4, 5, 6),
        'Ovulatie': (7,),
        'Luteaal': (11,),
    }


@dataclass(frozen=True)
class CycleParameters:
    """Anchor date and candidate durations for each of the four phases"""

    anchor_date: date = date(2024, 3, 22)
    phase_durations: Dict[str, Tuple[int, ...]] = field(default_factory=_default_phase_durations)
    horizon_years: int = 1

    def __post_init__(self):
        """Validate cycle parameters"""

        assert isinstance(self.anchor_date, date), \
            f"Anchor date must be a date: {self.anchor_date!r}"

        for name, durations in self.phase_durations.items():
            assert name in PHASE_ORDER, f"Unknown phase: {name}"
            assert all(isinstance(d, int) and d >= 1 for d in durations), \
                f"Phase {name}: durations must be integers >= 1, got {durations}"

        missing = [name for name in PHASE_ORDER if name not in self.phase_durations]
        assert not missing, f"Missing duration options for phases: {missing}"

    def phase_definitions(self) -> List[PhaseDefinition]:
        """Definitions in fixed cycle order, durations ascending"""
        return [
            PhaseDefinition(name=name, durations=tuple(sorted(set(self.phase_durations[name]))))
            for name in PHASE_ORDER
        ]

    @property
    def ordered_durations(self) -> Dict[str, Tuple[int, ...]]:
        return {d.name: d.durations for d in self.phase_definitions()}


@dataclass(frozen=True)
class QueryParameters:
    """
    Fork-join settings for the probability query.

    shard_count is independent of the track count; shards beyond the
    number of tracks are simply empty.
    """

    shard_count: int = 10
    max_workers: Optional[int] = None  # Defaults to shard_count

    def __post_init__(self):
        assert self.shard_count >= 1, f"Shard count must be >= 1: {self.shard_count}"
        assert self.max_workers is None or self.max_workers >= 1, \
            f"Max workers must be >= 1: {self.max_workers}"

    @property
    def worker_count(self) -> int:
        return self.max_workers or self.shard_count


@dataclass(frozen=True)
class CalendarConfig:
    """Master configuration container"""
    cycle_params: CycleParameters
    query_params: QueryParameters

    @classmethod
    def default_config(cls):
        return cls(
            cycle_params=CycleParameters(),
            query_params=QueryParameters(),
        )

    @classmethod
    def regular_config(cls):
        """
        A single fixed 29-day cycle: 5-6-7-11.
        Every query is deterministic (0% or 100%).
        """
        return cls(
            cycle_params=CycleParameters(
                phase_durations={
                    'Menstruatie': (5,),
                    'Piek': (6,),
                    'Ovulatie': (7,),
                    'Luteaal': (11,),
                },
            ),
            query_params=QueryParameters(),
        )

    @classmethod
    def irregular_config(cls):
        """
        Wide duration ranges for irregular cycles (23-37 days).
        5 x 5 x 3 x 5 = 375 combinations.
        """
        return cls(
            cycle_params=CycleParameters(
                phase_durations={
                    'Menstruatie': (3, 4, 5, 6, 7),
                    'Piek': (4, 5, 6, 7, 8),
                    'Ovulatie': (6, 7, 8),
                    'Luteaal': (10, 11, 12, 13, 14),
                },
            ),
            query_params=QueryParameters(shard_count=16),
        )

    @classmethod
    def from_preset(cls, name: str):
        presets = {
            'default': cls.default_config,
            'regular': cls.regular_config,
            'irregular': cls.irregular_config,
        }
        if name not in presets:
            raise ValueError(f"Unknown config preset: {name!r} (choose from {sorted(presets)})")
        return presets[name]()
