"""
Cycle Generator
===============

Lays phase intervals end-to-end from an anchor date.

Two duration-consumption modes share one generator:
- Repeated combination: one fixed duration per phase, repeated until the
  anchor + N years horizon is reached
- Rotating durations: each phase walks its own duration list, one entry
  per round, until a total day count is consumed

Both modes emit the interval that crosses the horizon in full.
"""

from datetime import date, timedelta
from typing import List, Optional, Sequence, Tuple
import logging

logger = logging.getLogger(__name__)

from models.data_models import (
    CycleSet, CycleTrack, DurationCombination, PhaseInterval
)
from core.parameters import CycleParameters
from core.combinations import enumerate_combinations


def add_years(day: date, years: int) -> date:
    """Calendar year offset; 29 February rolls forward to 1 March"""
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        return date(day.year + years, 3, 1)


def _make_interval(phase: str, start: date, duration: int) -> PhaseInterval:
    if duration < 1:
        raise ValueError(f"Phase {phase}: duration must be >= 1, got {duration}")
    return PhaseInterval(phase=phase, start=start, end=start + timedelta(days=duration - 1))


class CycleGenerator:
    """Generates cycle tracks and cycle sets from CycleParameters"""

    def __init__(self, params: CycleParameters = None):
        self.params = params or CycleParameters()

    # ------------------------------------------------------------------
    # Mode A - combination repeated
    # ------------------------------------------------------------------

    def generate_repeated(
        self,
        anchor: date,
        combination: DurationCombination,
        horizon_years: int
    ) -> List[PhaseInterval]:
        """
        Repeat one combination back-to-back from ``anchor``.

        A new cycle starts while the running date is before
        anchor + horizon_years; the cycle that crosses the horizon is
        emitted in full.
        """
        if horizon_years <= 0:
            logger.warning(f"Non-positive horizon ({horizon_years} years) - no intervals generated")
            return []
        if not combination.durations:
            return []

        horizon_end = add_years(anchor, horizon_years)
        intervals = []
        current = anchor

        while current < horizon_end:
            for phase, duration in combination:
                interval = _make_interval(phase, current, duration)
                intervals.append(interval)
                current = interval.end + timedelta(days=1)

        return intervals

    # ------------------------------------------------------------------
    # Mode B - rotating duration lists
    # ------------------------------------------------------------------

    def generate_rotating(
        self,
        anchor: date,
        phases: Sequence[Tuple[str, Sequence[int]]],
        total_days: int
    ) -> List[PhaseInterval]:
        """
        Round-robin over the phases; in round ``r`` every phase uses
        ``durations[r % len(durations)]`` from its own list.

        Stops as soon as the consumed day count reaches ``total_days``,
        which may be in the middle of a round.
        """
        if total_days <= 0:
            logger.warning(f"Non-positive day count ({total_days}) - no intervals generated")
            return []
        if not phases:
            return []
        empty = [name for name, durations in phases if not durations]
        if empty:
            logger.warning(f"Phases without durations: {empty} - no intervals generated")
            return []

        intervals = []
        current = anchor
        consumed = 0
        repetition = 0

        while consumed < total_days:
            for phase, durations in phases:
                duration = durations[repetition % len(durations)]
                interval = _make_interval(phase, current, duration)
                intervals.append(interval)
                current = interval.end + timedelta(days=1)
                consumed += duration
                if consumed >= total_days:
                    break
            repetition += 1

        return intervals

    # ------------------------------------------------------------------
    # Tracks & cycle sets
    # ------------------------------------------------------------------

    def build_track(
        self,
        combination: DurationCombination,
        horizon_years: Optional[int] = None,
        anchor: Optional[date] = None
    ) -> CycleTrack:
        anchor = anchor or self.params.anchor_date
        years = self.params.horizon_years if horizon_years is None else horizon_years
        return CycleTrack(
            intervals=self.generate_repeated(anchor, combination, years),
            combination=combination,
        )

    def build_rotating_track(
        self,
        total_days: int,
        anchor: Optional[date] = None
    ) -> CycleTrack:
        """One track where each phase rotates through its configured durations"""
        anchor = anchor or self.params.anchor_date
        schedule = list(self.params.ordered_durations.items())
        return CycleTrack(intervals=self.generate_rotating(anchor, schedule, total_days))

    def build_cycle_set(self, horizon_years: Optional[int] = None) -> CycleSet:
        """
        One repeated-combination track per enumerated combination.

        An empty duration set or a non-positive horizon gives an empty set.
        """
        years = self.params.horizon_years if horizon_years is None else horizon_years
        anchor = self.params.anchor_date
        cycle_set = CycleSet(anchor_date=anchor, horizon_years=years)

        if years <= 0:
            logger.warning(f"Non-positive horizon ({years} years) - empty cycle set")
            return cycle_set

        empty = [d.name for d in self.params.phase_definitions() if d.is_empty]
        if empty:
            logger.warning(f"Phases without durations: {empty} - empty cycle set")
            return cycle_set

        cycle_set.combinations = enumerate_combinations(self.params.ordered_durations)
        for combination in cycle_set.combinations:
            cycle_set.tracks.append(self.build_track(combination, years, anchor))

        logger.info(
            f"Built cycle set from {anchor.isoformat()}: {years} year(s), "
            f"{len(cycle_set.combinations)} combinations, {cycle_set.interval_count} intervals"
        )
        return cycle_set

    def build_rotating_cycle_set(self, total_days: int) -> CycleSet:
        """
        Cycle set holding a single rotating-schedule track of ``total_days``.

        A non-positive day count gives an empty set.
        """
        anchor = self.params.anchor_date
        cycle_set = CycleSet(anchor_date=anchor, horizon_years=0, horizon_days=total_days)

        track = self.build_rotating_track(total_days, anchor)
        if track.intervals:
            cycle_set.tracks.append(track)

        logger.info(
            f"Built rotating cycle set from {anchor.isoformat()}: {total_days} day(s), "
            f"{cycle_set.interval_count} intervals"
        )
        return cycle_set
