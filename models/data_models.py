"""
data_models.py - Core Data Structures
======================================

Data models for cycle phases, duration combinations, generated phase
intervals and the tracks/cycle sets built from them.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterator, List, Optional, Tuple
from enum import Enum


# ============================================================================
# ENUMS
# ============================================================================

class Phase(Enum):
    """The four fixed phases of a cycle, in cycle order"""
    MENSTRUATIE = "Menstruatie"
    PIEK = "Piek"
    OVULATIE = "Ovulatie"
    LUTEAAL = "Luteaal"

    @classmethod
    def names(cls) -> List[str]:
        return [phase.value for phase in cls]

    @classmethod
    def from_name(cls, name: str) -> 'Phase':
        """Case-insensitive lookup; raises ValueError for unknown names"""
        wanted = name.strip().lower()
        for phase in cls:
            if phase.value.lower() == wanted:
                return phase
        raise ValueError(f"Unknown phase: {name!r}")


PHASE_ORDER: Tuple[str, ...] = tuple(Phase.names())


# ============================================================================
# CONFIGURED STRUCTURES
# ============================================================================

@dataclass(frozen=True)
class PhaseDefinition:
    """A phase and its candidate durations (days)"""
    name: str
    durations: Tuple[int, ...]

    def __post_init__(self):
        for duration in self.durations:
            if not isinstance(duration, int) or duration < 1:
                raise ValueError(
                    f"Phase {self.name}: durations must be integers >= 1, got {duration!r}"
                )

    @property
    def is_empty(self) -> bool:
        return len(self.durations) == 0


@dataclass(frozen=True)
class DurationCombination:
    """
    One realisation of a full cycle: exactly one duration per phase,
    in phase-definition order.
    """
    phases: Tuple[str, ...]
    durations: Tuple[int, ...]

    def __post_init__(self):
        if len(self.phases) != len(self.durations):
            raise ValueError(
                f"Combination needs one duration per phase "
                f"({len(self.phases)} phases, {len(self.durations)} durations)"
            )

    @property
    def cycle_length(self) -> int:
        return sum(self.durations)

    def as_dict(self) -> Dict[str, int]:
        return dict(zip(self.phases, self.durations))

    def __iter__(self) -> Iterator[Tuple[str, int]]:
        return iter(zip(self.phases, self.durations))

    def label(self) -> str:
        """e.g. 'Menstruatie(5)-Piek(6)-Ovulatie(7)-Luteaal(11)'"""
        return "-".join(f"{name}({days})" for name, days in self)


# ============================================================================
# GENERATED STRUCTURES
# ============================================================================

@dataclass(frozen=True)
class PhaseInterval:
    """One phase instance: inclusive start and end date"""
    phase: str
    start: date
    end: date

    @property
    def duration_days(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        """Inclusive on both ends"""
        return day == self.start or day == self.end or self.start < day < self.end

    def overlaps(self, first: date, last: date) -> bool:
        return self.start <= last and self.end >= first

    def to_dict(self) -> Dict[str, str]:
        return {
            'phase': self.phase,
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
        }


@dataclass
class CycleTrack:
    """
    Contiguous sequence of phase intervals spanning a horizon.

    Built either from one repeated combination (``combination`` set) or
    from a rotating duration schedule (``combination`` is None).
    """
    intervals: List[PhaseInterval] = field(default_factory=list)
    combination: Optional[DurationCombination] = None

    def __iter__(self) -> Iterator[PhaseInterval]:
        return iter(self.intervals)

    def __len__(self) -> int:
        return len(self.intervals)

    @property
    def start(self) -> Optional[date]:
        return self.intervals[0].start if self.intervals else None

    @property
    def end(self) -> Optional[date]:
        return self.intervals[-1].end if self.intervals else None

    @property
    def total_days(self) -> int:
        return sum(interval.duration_days for interval in self.intervals)

    def is_contiguous(self) -> bool:
        return all(
            current.end + timedelta(days=1) == following.start
            for current, following in zip(self.intervals, self.intervals[1:])
        )

    def phase_at(self, day: date) -> Optional[str]:
        for interval in self.intervals:
            if interval.contains(day):
                return interval.phase
        return None


@dataclass
class CycleSet:
    """
    All tracks generated for one horizon from one anchor date.

    Repeated-combination sets carry horizon_years; a rotating schedule set
    carries horizon_days and holds a single track.
    """
    anchor_date: date
    horizon_years: int
    tracks: List[CycleTrack] = field(default_factory=list)
    combinations: List[DurationCombination] = field(default_factory=list)
    horizon_days: Optional[int] = None

    def __iter__(self) -> Iterator[CycleTrack]:
        return iter(self.tracks)

    def __len__(self) -> int:
        return len(self.tracks)

    @property
    def is_empty(self) -> bool:
        return not self.tracks

    @property
    def interval_count(self) -> int:
        return sum(len(track) for track in self.tracks)


# ============================================================================
# QUERY RESULTS
# ============================================================================

@dataclass(frozen=True)
class MonthDayProbability:
    """Share of tracks in which a phase covers one calendar day"""
    day: date
    probability: float  # 0-100


@dataclass(frozen=True)
class BestDay:
    """Highest-probability day of a month for one phase"""
    phase: str
    day: date
    probability: float  # 0-100
