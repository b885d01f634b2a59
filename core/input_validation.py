"""
Input Validation
================

Parses user-supplied text into the values the calendar queries take.
Everything malformed raises InvalidInputError before it reaches a query.

Formats:
    date        dd mm yyyy (years 1-9999)
    month/year  mm yyyy
    year        yyyy
"""

from datetime import date, datetime
from typing import Tuple

from models.data_models import Phase
from core.parameters import MAX_HORIZON_DAYS, MAX_HORIZON_YEARS


class InvalidInputError(ValueError):
    """Malformed date, month, year, phase or horizon"""


def _split(text: str, parts: int, fmt: str):
    fields = text.split()
    if len(fields) != parts:
        raise InvalidInputError(f"Invalid format: {text!r}. Please use {fmt}.")
    return fields


def parse_date(text: str) -> date:
    """'22 03 2024' -> date(2024, 3, 22)"""
    fields = _split(text, 3, "dd mm yyyy")
    try:
        return datetime.strptime(" ".join(fields), "%d %m %Y").date()
    except ValueError as e:
        raise InvalidInputError(f"Invalid date: {text!r}. Please use dd mm yyyy.") from e


def parse_month_year(text: str) -> Tuple[int, int]:
    """'04 2024' -> (4, 2024)"""
    fields = _split(text, 2, "mm yyyy")
    try:
        parsed = datetime.strptime(" ".join(fields), "%m %Y")
    except ValueError as e:
        raise InvalidInputError(f"Invalid month/year: {text!r}. Please use mm yyyy.") from e
    return parsed.month, _check_year(parsed.year)


def _check_year(year: int) -> int:
    if not date.min.year <= year <= date.max.year:
        raise InvalidInputError(
            f"Year must be between {date.min.year} and {date.max.year}, got {year}"
        )
    return year


def parse_year(text: str) -> int:
    fields = _split(text, 1, "yyyy")
    if len(fields[0]) != 4 or not fields[0].isdigit():
        raise InvalidInputError(f"Invalid year: {text!r}. Please use yyyy.")
    return _check_year(int(fields[0]))


def parse_phase(text: str) -> str:
    """Case-insensitive; returns the canonical phase name"""
    try:
        return Phase.from_name(text).value
    except ValueError as e:
        raise InvalidInputError(
            f"Unknown phase: {text.strip()!r}. Choose from {', '.join(Phase.names())}."
        ) from e


def _parse_count(text: str, unit: str, maximum: int) -> int:
    try:
        value = int(text.strip())
    except ValueError as e:
        raise InvalidInputError(f"Invalid number of {unit}: {text!r}") from e
    if value < 0:
        raise InvalidInputError(f"Number of {unit} must not be negative: {value}")
    if value > maximum:
        raise InvalidInputError(f"Number of {unit} must be at most {maximum}: {value}")
    return value


def parse_horizon(text: str) -> int:
    """Number of years, 0 to MAX_HORIZON_YEARS"""
    return _parse_count(text, "years", MAX_HORIZON_YEARS)


def parse_day_count(text: str) -> int:
    """Number of days for a rotating schedule, 0 to MAX_HORIZON_DAYS"""
    return _parse_count(text, "days", MAX_HORIZON_DAYS)
