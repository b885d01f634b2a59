"""
Tests for the cycle generator (repeated-combination and rotating modes).

Run: python -m pytest tests/test_cycle_generator.py -v
"""

from datetime import date, timedelta

import pytest

from core.cycle_generator import CycleGenerator, add_years
from core.parameters import CycleParameters
from models.data_models import DurationCombination, PHASE_ORDER


# ── Helpers ──────────────────────────────────────────────────────────────

ANCHOR = date(2024, 3, 22)


def _combo(*durations):
    return DurationCombination(phases=PHASE_ORDER, durations=durations)


def _assert_contiguous(intervals):
    for current, following in zip(intervals, intervals[1:]):
        assert current.end + timedelta(days=1) == following.start


# ============================================================================
# Mode A - combination repeated
# ============================================================================

class TestRepeatedCombination:

    def test_first_cycle_dates(self):
        intervals = CycleGenerator().generate_repeated(ANCHOR, _combo(5, 6, 7, 11), 1)

        assert [(i.phase, i.start, i.end) for i in intervals[:5]] == [
            ('Menstruatie', date(2024, 3, 22), date(2024, 3, 26)),
            ('Piek', date(2024, 3, 27), date(2024, 4, 1)),
            ('Ovulatie', date(2024, 4, 2), date(2024, 4, 8)),
            ('Luteaal', date(2024, 4, 9), date(2024, 4, 19)),
            ('Menstruatie', date(2024, 4, 20), date(2024, 4, 24)),
        ]

    def test_cycles_until_horizon(self):
        intervals = CycleGenerator().generate_repeated(ANCHOR, _combo(5, 6, 7, 11), 1)

        # 12 x 29 = 348 < 365 <= 13 x 29: thirteen cycles, the last crossing the horizon
        assert len(intervals) == 13 * 4
        assert intervals[-4].start == date(2025, 3, 5)
        assert intervals[-1].end == date(2025, 4, 2)

    def test_contiguous_and_exact_durations(self):
        combo = _combo(4, 6, 7, 11)
        intervals = CycleGenerator().generate_repeated(ANCHOR, combo, 2)

        _assert_contiguous(intervals)
        for interval in intervals:
            assert interval.duration_days == combo.as_dict()[interval.phase]

    @pytest.mark.parametrize('years', [0, -1])
    def test_non_positive_horizon_is_empty(self, years):
        assert CycleGenerator().generate_repeated(ANCHOR, _combo(5, 6, 7, 11), years) == []

    def test_invalid_duration_rejected(self):
        combo = DurationCombination(phases=('A', 'B'), durations=(3, 0))

        with pytest.raises(ValueError):
            CycleGenerator().generate_repeated(ANCHOR, combo, 1)

    def test_deterministic(self):
        generator = CycleGenerator()
        combo = _combo(6, 4, 7, 11)

        assert generator.generate_repeated(ANCHOR, combo, 1) == generator.generate_repeated(ANCHOR, combo, 1)


# ============================================================================
# Mode B - rotating duration lists
# ============================================================================

class TestRotatingDurations:

    PHASES = [
        ('Menstruatie', [5, 4]),
        ('Piek', [6]),
        ('Ovulatie', [7]),
        ('Luteaal', [11, 12]),
    ]

    def test_rounds_rotate_each_list_independently(self):
        intervals = CycleGenerator().generate_rotating(ANCHOR, self.PHASES, 60)

        assert [i.duration_days for i in intervals] == [5, 6, 7, 11, 4, 6, 7, 12, 5]
        _assert_contiguous(intervals)

    def test_boundary_interval_emitted_in_full(self):
        intervals = CycleGenerator().generate_rotating(ANCHOR, self.PHASES, 60)

        last = intervals[-1]
        assert last.phase == 'Menstruatie'
        assert last.start == ANCHOR + timedelta(days=58)
        assert last.duration_days == 5

    def test_stops_exactly_on_round_boundary(self):
        intervals = CycleGenerator().generate_rotating(ANCHOR, self.PHASES, 29)

        assert [i.phase for i in intervals] == list(PHASE_ORDER)

    def test_stops_mid_round(self):
        intervals = CycleGenerator().generate_rotating(ANCHOR, self.PHASES, 1)

        assert len(intervals) == 1
        assert intervals[0].end == date(2024, 3, 26)

    @pytest.mark.parametrize('total_days', [0, -10])
    def test_non_positive_day_count_is_empty(self, total_days):
        assert CycleGenerator().generate_rotating(ANCHOR, self.PHASES, total_days) == []

    def test_phase_without_durations_is_empty(self):
        phases = [('Menstruatie', [5]), ('Piek', [])]

        assert CycleGenerator().generate_rotating(ANCHOR, phases, 100) == []

    def test_rotating_track_uses_configured_durations(self):
        generator = CycleGenerator(CycleParameters())
        track = generator.build_rotating_track(90)

        assert track.combination is None
        assert track.is_contiguous()
        # Menstruatie and Piek rotate through 4, 5, 6
        assert [i.duration_days for i in track.intervals[:8]] == [4, 4, 7, 11, 5, 5, 7, 11]
        assert track.total_days >= 90


# ============================================================================
# Cycle sets
# ============================================================================

class TestCycleSet:

    def test_one_track_per_combination(self, default_cycle_set):
        assert len(default_cycle_set) == 9
        assert default_cycle_set.anchor_date == ANCHOR
        for track, combo in zip(default_cycle_set, default_cycle_set.combinations):
            assert track.combination == combo
            assert track.start == ANCHOR
            assert track.is_contiguous()

    def test_interval_spans_match_combination(self, default_cycle_set):
        for track in default_cycle_set:
            durations = track.combination.as_dict()
            for interval in track:
                assert (interval.end - interval.start).days + 1 == durations[interval.phase]

    def test_empty_duration_set_gives_empty_cycle_set(self, caplog):
        params = CycleParameters(phase_durations={
            'Menstruatie': (5,), 'Piek': (6,), 'Ovulatie': (), 'Luteaal': (11,),
        })

        cycle_set = CycleGenerator(params).build_cycle_set(1)

        assert cycle_set.is_empty
        assert cycle_set.combinations == []
        assert "Phases without durations: ['Ovulatie']" in caplog.text

    def test_zero_horizon_gives_empty_cycle_set(self):
        assert CycleGenerator().build_cycle_set(0).is_empty


class TestRotatingCycleSet:

    def test_single_rotating_track(self):
        cycle_set = CycleGenerator(CycleParameters()).build_rotating_cycle_set(90)

        assert len(cycle_set) == 1
        assert cycle_set.horizon_days == 90
        assert cycle_set.combinations == []
        track = cycle_set.tracks[0]
        assert track.start == ANCHOR
        assert track.is_contiguous()
        assert track.phase_at(date(2024, 4, 21)) == 'Menstruatie'

    @pytest.mark.parametrize('total_days', [0, -3])
    def test_non_positive_day_count_gives_empty_set(self, total_days):
        cycle_set = CycleGenerator().build_rotating_cycle_set(total_days)

        assert cycle_set.is_empty
        assert cycle_set.horizon_days == total_days


class TestAddYears:

    def test_plain_date(self):
        assert add_years(date(2024, 3, 22), 1) == date(2025, 3, 22)

    def test_leap_day_rolls_to_march(self):
        assert add_years(date(2024, 2, 29), 1) == date(2025, 3, 1)
        assert add_years(date(2024, 2, 29), 4) == date(2028, 2, 29)
