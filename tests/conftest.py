"""Shared pytest setup: headless plotting and common calendars."""

import matplotlib

matplotlib.use("Agg")

import pytest

from core import CalendarConfig, CycleGenerator


@pytest.fixture
def regular_config():
    """Single 5-6-7-11 combination anchored on 22 03 2024"""
    return CalendarConfig.regular_config()


@pytest.fixture
def default_cycle_set():
    """Nine tracks (Menstruatie 4-6 x Piek 4-6), one year"""
    return CycleGenerator(CalendarConfig.default_config().cycle_params).build_cycle_set(1)
