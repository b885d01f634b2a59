"""
Phase Calendar
==============

Session object tying configuration, cycle set and queries together.

The cycle set is built once per horizon and held in memory; changing the
horizon rebuilds it from scratch. A horizon is either a number of years
(one repeated-combination track per combination) or a number of days
(a single rotating-schedule track).
"""

from datetime import date
from typing import Dict, Iterator, List, Optional
import logging

logger = logging.getLogger(__name__)

from models.data_models import BestDay, CycleSet, MonthDayProbability, PhaseInterval
from core.parameters import CalendarConfig
from core.cycle_generator import CycleGenerator, add_years
from core.phase_query import PhaseQueryEngine


class PhaseCalendar:
    """
    Cycle phase calendar for one configuration.

    Usage:
        calendar = PhaseCalendar(CalendarConfig.default_config())
        calendar.set_horizon(2)
        calendar.probabilities(date(2024, 5, 1))

        calendar.set_horizon_days(90)   # rotating schedule instead
    """

    def __init__(
        self,
        config: CalendarConfig = None,
        horizon_years: Optional[int] = None,
        horizon_days: Optional[int] = None
    ):
        self.config = config or CalendarConfig.default_config()
        self.generator = CycleGenerator(self.config.cycle_params)
        self.engine = PhaseQueryEngine(self.config.query_params)
        self._cycle_set: Optional[CycleSet] = None
        self._horizon_years = (
            self.config.cycle_params.horizon_years if horizon_years is None else horizon_years
        )
        self._horizon_days = horizon_days

    @property
    def anchor_date(self) -> date:
        return self.config.cycle_params.anchor_date

    @property
    def horizon_years(self) -> int:
        return self._horizon_years

    @property
    def horizon_days(self) -> Optional[int]:
        """Day count of the rotating schedule; None in years mode"""
        return self._horizon_days

    @property
    def cycle_set(self) -> CycleSet:
        if self._cycle_set is None:
            if self._horizon_days is not None:
                self._cycle_set = self.generator.build_rotating_cycle_set(self._horizon_days)
            else:
                self._cycle_set = self.generator.build_cycle_set(self._horizon_years)
        return self._cycle_set

    def set_horizon(self, horizon_years: int) -> CycleSet:
        """Rebuild the cycle set when the horizon changes"""
        if (horizon_years != self._horizon_years or self._horizon_days is not None
                or self._cycle_set is None):
            logger.info(f"Horizon {self._horizon_years} -> {horizon_years} year(s), rebuilding cycle set")
            self._horizon_years = horizon_years
            self._horizon_days = None
            self._cycle_set = None
        return self.cycle_set

    def set_horizon_days(self, horizon_days: int) -> CycleSet:
        """Switch to a rotating schedule of ``horizon_days`` days"""
        if horizon_days != self._horizon_days or self._cycle_set is None:
            logger.info(f"Rotating horizon -> {horizon_days} day(s), rebuilding cycle set")
            self._horizon_days = horizon_days
            self._cycle_set = None
        return self.cycle_set

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def phase_at(self, target_date: date) -> Optional[str]:
        return self.engine.point_query(self.cycle_set.tracks, target_date)

    def probabilities(self, target_date: date) -> Dict[str, float]:
        return self.engine.probability_query(self.cycle_set.tracks, target_date)

    def month_days(self, month: int, year: int, phase: str) -> List[MonthDayProbability]:
        return self.engine.month_day_probabilities(self.cycle_set.tracks, month, year, phase)

    def best_day_in_month(self, month: int, year: int, phase: str) -> Optional[BestDay]:
        return self.engine.best_day_in_month(self.cycle_set.tracks, month, year, phase)

    def best_days(self, year: int, phase: str) -> Dict[int, date]:
        return self.engine.best_day_per_month(self.cycle_set.tracks, year, phase)

    def list_intervals(self, years: int) -> Iterator[PhaseInterval]:
        """Intervals starting within ``years`` years of the anchor date"""
        return self.engine.range_listing(self.cycle_set.tracks, add_years(self.anchor_date, years))
