"""
Tests for the interactive CLI formatting and menu loop.

Run: python -m pytest tests/test_phase_calendar_cli.py -v
"""

from datetime import date

from core import CalendarConfig, PhaseCalendar
from models.data_models import BestDay, PhaseInterval
from phase_calendar_cli import (
    build_calendar, format_best_day, format_best_days, format_intervals, format_probabilities,
    run_menu
)


def _feed(monkeypatch, answers):
    answers = iter(answers)
    monkeypatch.setattr('builtins.input', lambda _prompt='': next(answers))


class TestFormatting:

    def test_probabilities_two_decimals(self):
        text = format_probabilities(date(2024, 3, 26), {'Menstruatie': 200 / 3, 'Piek': 100 / 3})

        assert text.splitlines() == [
            'Probabilities for 26 03 2024:',
            'Menstruatie: 66.67%',
            'Piek: 33.33%',
        ]

    def test_no_probabilities(self):
        assert 'No phase found' in format_probabilities(date(2020, 1, 1), {})

    def test_best_day(self):
        best = BestDay(phase='Piek', day=date(2024, 4, 1), probability=100.0)

        assert format_best_day('Piek', 4, 2024, best) == (
            'The best day for phase Piek in April 2024 is 01 04 2024 with a probability of 100.00%'
        )
        assert format_best_day('Piek', 2, 2024, None) == 'No days found for phase Piek in February 2024'

    def test_best_days_sorted_by_month(self):
        text = format_best_days('Ovulatie', 2024, {5: date(2024, 5, 1), 4: date(2024, 4, 2)})

        assert text.splitlines()[1:] == ['April: 02 04 2024', 'May: 01 05 2024']

    def test_intervals(self):
        text = format_intervals([PhaseInterval('Piek', date(2024, 3, 27), date(2024, 4, 1))])

        assert text.splitlines()[1] == 'Phase: Piek, Start: 27 03 2024, End: 01 04 2024'


class TestMenu:

    def test_probability_option(self, regular_config, monkeypatch, capsys):
        _feed(monkeypatch, ['1', '24 03 2024', '0'])

        run_menu(PhaseCalendar(regular_config))

        assert 'Menstruatie: 100.00%' in capsys.readouterr().out

    def test_invalid_input_reported(self, regular_config, monkeypatch, capsys):
        _feed(monkeypatch, ['1', '2024-03-24', '9', 'q'])

        run_menu(PhaseCalendar(regular_config))

        out = capsys.readouterr().out
        assert 'dd mm yyyy' in out
        assert 'Invalid option.' in out

    def test_phase_prompt_retries(self, regular_config, monkeypatch, capsys):
        _feed(monkeypatch, ['2', '04 2024', 'Follicular', 'ovulatie', '0'])

        run_menu(PhaseCalendar(regular_config))

        out = capsys.readouterr().out
        assert 'Unknown phase' in out
        assert 'is 02 04 2024 with a probability of 100.00%' in out

    def test_listing_option(self, regular_config, monkeypatch, capsys):
        _feed(monkeypatch, ['4', '1', '0'])

        run_menu(PhaseCalendar(regular_config))

        assert 'Phase: Menstruatie, Start: 22 03 2024, End: 26 03 2024' in capsys.readouterr().out

    def test_year_zero_reported(self, regular_config, monkeypatch, capsys):
        _feed(monkeypatch, ['3', '0000', 'Piek', '0'])

        run_menu(PhaseCalendar(regular_config))

        out = capsys.readouterr().out
        assert 'Year must be between 1 and 9999' in out
        assert 'Invalid option.' in out

    def test_listing_years_capped(self, regular_config, monkeypatch, capsys):
        _feed(monkeypatch, ['4', '9000', '0'])

        run_menu(PhaseCalendar(regular_config))

        assert 'must be at most 10' in capsys.readouterr().out


class TestBuildCalendar:

    def test_years_prompt_retries(self, regular_config, monkeypatch, capsys):
        _feed(monkeypatch, ['9000', '1'])

        calendar = build_calendar(regular_config)

        assert 'must be at most 10' in capsys.readouterr().out
        assert calendar.horizon_years == 1
        assert len(calendar.cycle_set) == 1

    def test_rotating_prompt(self, monkeypatch, capsys):
        _feed(monkeypatch, ['90'])

        calendar = build_calendar(CalendarConfig.default_config(), rotating=True)

        assert calendar.horizon_days == 90
        assert len(calendar.cycle_set) == 1
        assert calendar.phase_at(date(2024, 4, 21)) == 'Menstruatie'
        assert '✓ 1 tracks calculated' in capsys.readouterr().out
