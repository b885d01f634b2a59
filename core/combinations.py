"""
Duration Combination Enumerator
===============================

Cartesian product of one candidate duration per phase.
"""

from itertools import product
from typing import Iterable, List, Mapping
import logging

logger = logging.getLogger(__name__)

from models.data_models import DurationCombination


def enumerate_combinations(phase_durations: Mapping[str, Iterable[int]]) -> List[DurationCombination]:
    """
    Enumerate every duration combination.

    Phases are taken in the mapping's order; each phase's candidate
    durations are de-duplicated and iterated ascending, with the last
    phase varying fastest. An empty candidate set for any phase yields
    no combinations.

    Args:
        phase_durations: phase name -> candidate durations (days)

    Returns:
        Combinations in a reproducible order
    """
    phases = tuple(phase_durations)
    if not phases:
        return []

    options = []
    for name in phases:
        durations = sorted(set(phase_durations[name]))
        for duration in durations:
            if not isinstance(duration, int) or duration < 1:
                raise ValueError(f"Phase {name}: invalid duration {duration!r}")
        if not durations:
            logger.warning(f"Phase {name} has no candidate durations - no combinations")
            return []
        options.append(durations)

    combinations = [
        DurationCombination(phases=phases, durations=tuple(choice))
        for choice in product(*options)
    ]
    logger.debug(f"Enumerated {len(combinations)} combinations over {len(phases)} phases")
    return combinations
