#!/usr/bin/env python3
"""
Interactive Phase Calendar - Command Line Interface
===================================================

Menu-driven queries against the cycle phase calendar:
1. Phase probability for a specific date
2. Best day for a phase in a specific month
3. Best days for a phase in each month of a year
4. Calculated cycles for a number of years
5. Year heatmap for a phase (PNG)

Usage:
    python phase_calendar_cli.py [--preset default|regular|irregular] [--rotating]
"""

from calendar import month_name
from datetime import date
from typing import Dict, Iterable, Optional
import argparse
import logging

from core import CalendarConfig, PhaseCalendar
from core.input_validation import (
    InvalidInputError, parse_date, parse_day_count, parse_horizon, parse_month_year,
    parse_phase, parse_year
)
from models.data_models import BestDay, Phase, PhaseInterval

DATE_FORMAT = "%d %m %Y"


# ============================================================================
# FORMATTING
# ============================================================================

def format_probabilities(target_date: date, probabilities: Dict[str, float]) -> str:
    lines = [f"Probabilities for {target_date.strftime(DATE_FORMAT)}:"]
    if not probabilities:
        lines.append("  No phase found for this date (outside the calculated horizon)")
    for phase, probability in probabilities.items():
        lines.append(f"{phase}: {probability:.2f}%")
    return "\n".join(lines)


def format_best_day(phase: str, month: int, year: int, best: Optional[BestDay]) -> str:
    if best is None:
        return f"No days found for phase {phase} in {month_name[month]} {year}"
    return (
        f"The best day for phase {phase} in {month_name[month]} {year} is "
        f"{best.day.strftime(DATE_FORMAT)} with a probability of {best.probability:.2f}%"
    )


def format_best_days(phase: str, year: int, best_days: Dict[int, date]) -> str:
    lines = [f"Best start days for phase {phase} in {year}:"]
    for month in sorted(best_days):
        lines.append(f"{month_name[month]}: {best_days[month].strftime(DATE_FORMAT)}")
    return "\n".join(lines)


def format_intervals(intervals: Iterable[PhaseInterval]) -> str:
    lines = ["Calculated cycles:"]
    for interval in intervals:
        lines.append(
            f"Phase: {interval.phase}, Start: {interval.start.strftime(DATE_FORMAT)}, "
            f"End: {interval.end.strftime(DATE_FORMAT)}"
        )
    return "\n".join(lines)


# ============================================================================
# PROMPTS
# ============================================================================

def prompt(parser, message):
    """Ask until the parser accepts the answer"""
    while True:
        try:
            return parser(input(message))
        except InvalidInputError as e:
            print(f"❌ {e}")


def prompt_phase():
    return prompt(parse_phase, f"Enter phase ({', '.join(Phase.names())}): ")


# ============================================================================
# MENU
# ============================================================================

def run_menu(calendar: PhaseCalendar):
    while True:
        print()
        print("Choose an option:")
        print("1. Phase probability for a specific date")
        print("2. Phase days for a specific month")
        print("3. Best start days for a phase in each month of a given year")
        print("4. Show calculated cycles for a specific number of years")
        print("5. Save a year heatmap for a phase")
        print("0. Quit")
        option = input("> ").strip()

        try:
            if option == "1":
                target_date = parse_date(input("Enter date (dd mm yyyy): "))
                print(format_probabilities(target_date, calendar.probabilities(target_date)))

            elif option == "2":
                month, year = parse_month_year(input("Enter month and year (mm yyyy): "))
                phase = prompt_phase()
                best = calendar.best_day_in_month(month, year, phase)
                print(format_best_day(phase, month, year, best))

            elif option == "3":
                year = parse_year(input("Enter year (yyyy): "))
                phase = prompt_phase()
                print(format_best_days(phase, year, calendar.best_days(year, phase)))

            elif option == "4":
                years = parse_horizon(input("Enter the number of years to show: "))
                print(format_intervals(calendar.list_intervals(years)))

            elif option == "5":
                from visualization.phase_heatmap import PhaseHeatmap

                year = parse_year(input("Enter year (yyyy): "))
                phase = prompt_phase()
                path = f"heatmap_{phase.lower()}_{year}.png"
                PhaseHeatmap().plot_year(calendar, year, phase, save_path=path)

            elif option in ("0", "q"):
                return

            else:
                print("Invalid option.")

        except InvalidInputError as e:
            print(f"❌ {e}")


def build_calendar(config: CalendarConfig, rotating: bool = False) -> PhaseCalendar:
    """Ask for the horizon and build the calendar's cycle set"""
    if rotating:
        days = prompt(parse_day_count, "Enter the number of days to calculate: ")
        calendar = PhaseCalendar(config, horizon_days=days)
    else:
        horizon = prompt(parse_horizon, "Enter the number of years to calculate: ")
        calendar = PhaseCalendar(config, horizon_years=horizon)
    print(f"✓ {len(calendar.cycle_set)} tracks calculated")
    return calendar


def main():
    parser = argparse.ArgumentParser(description="Cycle phase calendar")
    parser.add_argument('--preset', default='default', choices=['default', 'regular', 'irregular'])
    parser.add_argument('--rotating', action='store_true',
                        help='single track rotating through each phase\'s durations, sized in days')
    parser.add_argument('--verbose', '-v', action='store_true')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    print("=" * 70)
    print("Cycle Phase Calendar")
    print("=" * 70)

    config = CalendarConfig.from_preset(args.preset)
    print(f"Anchor date: {config.cycle_params.anchor_date.strftime(DATE_FORMAT)}")

    calendar = build_calendar(config, rotating=args.rotating)
    run_menu(calendar)


if __name__ == "__main__":
    main()
