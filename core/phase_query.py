"""
Phase Query Engine
==================

Answers questions against a generated cycle set:
- Point query: which phase covers a date
- Probability query: share of each phase on a date across all tracks
- Month-day query: per-day share of tracks in a given phase
- Best day per month for a phase
- Raw interval listing up to a date

The probability query is a fork-join: tracks are partitioned into shards,
each shard is counted independently in a worker thread, and the shard
counts are summed in shard order before a single normalisation.
"""

from calendar import monthrange
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta
from typing import Dict, Iterable, Iterator, List, Optional, Sequence
import logging

import numpy as np

logger = logging.getLogger(__name__)

from models.data_models import (
    BestDay, CycleTrack, MonthDayProbability, PhaseInterval, PHASE_ORDER
)
from core.parameters import QueryParameters


# ============================================================================
# FORK-JOIN HELPERS
# ============================================================================

def partition_tracks(tracks: Sequence[CycleTrack], shard_count: int) -> List[List[CycleTrack]]:
    """
    Split tracks into exactly ``shard_count`` contiguous slices whose sizes
    differ by at most one. Surplus shards are empty.
    """
    if shard_count < 1:
        raise ValueError(f"Shard count must be >= 1, got {shard_count}")

    tracks = list(tracks)
    base, extra = divmod(len(tracks), shard_count)
    shards = []
    start = 0
    for index in range(shard_count):
        size = base + (1 if index < extra else 0)
        shards.append(tracks[start:start + size])
        start += size
    return shards


def count_phases(shard: Iterable[CycleTrack], target_date: date) -> Counter:
    """Count, per phase name, the intervals in ``shard`` containing the date"""
    counts = Counter()
    for track in shard:
        for interval in track:
            if interval.contains(target_date):
                counts[interval.phase] += 1
    return counts


def merge_counts(shard_counts: Iterable[Counter]) -> Counter:
    merged = Counter()
    for counts in shard_counts:
        merged.update(counts)
    return merged


def normalize_counts(counts: Counter) -> Dict[str, float]:
    """Percentages summing to 100; empty when nothing was counted"""
    total = sum(counts.values())
    if total == 0:
        return {}

    ordered = [name for name in PHASE_ORDER if name in counts]
    ordered += sorted(name for name in counts if name not in PHASE_ORDER)
    return {name: counts[name] / total * 100 for name in ordered}


# ============================================================================
# QUERY ENGINE
# ============================================================================

class PhaseQueryEngine:
    """Read-only queries over a collection of cycle tracks"""

    def __init__(self, params: QueryParameters = None):
        self.params = params or QueryParameters()

    # ------------------------------------------------------------------
    # Point queries
    # ------------------------------------------------------------------

    def point_query(self, tracks: Iterable[CycleTrack], target_date: date) -> Optional[str]:
        """Phase of the first interval (over all tracks) containing the date"""
        for track in tracks:
            for interval in track:
                if interval.contains(target_date):
                    return interval.phase
        return None

    def point_query_per_track(self, tracks: Iterable[CycleTrack], target_date: date) -> List[Optional[str]]:
        """One hit (or None) per track, in track order"""
        return [track.phase_at(target_date) for track in tracks]

    # ------------------------------------------------------------------
    # Probability query (fork-join)
    # ------------------------------------------------------------------

    def probability_query(
        self,
        tracks: Sequence[CycleTrack],
        target_date: date,
        shard_count: Optional[int] = None
    ) -> Dict[str, float]:
        """
        Percentage of matching intervals per phase on ``target_date``.

        Returns an empty mapping when no interval contains the date.
        """
        if shard_count is None:
            shard_count = self.params.shard_count
        shards = partition_tracks(tracks, shard_count)
        logger.debug(f"Probability query {target_date}: shard sizes {[len(s) for s in shards]}")

        workers = max(1, min(self.params.worker_count, shard_count))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(count_phases, shard, target_date) for shard in shards]
            shard_counts = [future.result() for future in futures]

        merged = merge_counts(shard_counts)
        if not merged:
            logger.debug(f"No phase covers {target_date} in {len(tracks)} tracks")
        return normalize_counts(merged)

    # ------------------------------------------------------------------
    # Month / year queries
    # ------------------------------------------------------------------

    def month_day_query(
        self,
        tracks: Sequence[CycleTrack],
        month: int,
        year: int,
        target_phase: str
    ) -> Dict[date, float]:
        """
        For each day of the month, the percentage of tracks in which
        ``target_phase`` covers that day. Days without a match are omitted.
        Keys are in ascending date order.
        """
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be 1-12, got {month}")

        track_count = len(tracks)
        if track_count == 0:
            return {}

        days_in_month = monthrange(year, month)[1]
        first = date(year, month, 1)
        last = date(year, month, days_in_month)
        counts = np.zeros(days_in_month, dtype=np.int64)

        for track in tracks:
            for interval in track:
                if interval.phase != target_phase or not interval.overlaps(first, last):
                    continue
                lo = (max(interval.start, first) - first).days
                hi = (min(interval.end, last) - first).days
                counts[lo:hi + 1] += 1

        percentages = counts / track_count * 100
        return {
            first + timedelta(days=int(offset)): float(percentages[offset])
            for offset in np.flatnonzero(counts)
        }

    def month_day_probabilities(
        self,
        tracks: Sequence[CycleTrack],
        month: int,
        year: int,
        target_phase: str
    ) -> List[MonthDayProbability]:
        days = self.month_day_query(tracks, month, year, target_phase)
        return [MonthDayProbability(day=day, probability=pct) for day, pct in days.items()]

    def best_day_in_month(
        self,
        tracks: Sequence[CycleTrack],
        month: int,
        year: int,
        target_phase: str
    ) -> Optional[BestDay]:
        """Strictly highest percentage; ties go to the earliest day"""
        best = None
        for day, probability in self.month_day_query(tracks, month, year, target_phase).items():
            if best is None or probability > best.probability:
                best = BestDay(phase=target_phase, day=day, probability=probability)
        return best

    def best_day_per_month(
        self,
        tracks: Sequence[CycleTrack],
        year: int,
        target_phase: str
    ) -> Dict[int, date]:
        """Month (1-12) -> best day; months without matches are omitted"""
        return {
            month: best.day
            for month, best in self.best_days_detail(tracks, year, target_phase).items()
        }

    def best_days_detail(
        self,
        tracks: Sequence[CycleTrack],
        year: int,
        target_phase: str
    ) -> Dict[int, BestDay]:
        results = {}
        for month in range(1, 13):
            best = self.best_day_in_month(tracks, month, year, target_phase)
            if best is not None:
                results[month] = best
        return results

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def range_listing(self, tracks: Iterable[CycleTrack], until_date: date) -> Iterator[PhaseInterval]:
        """
        Every interval starting before ``until_date``, in generation order.
        Each call re-scans the tracks.
        """
        for track in tracks:
            for interval in track:
                if interval.start < until_date:
                    yield interval
