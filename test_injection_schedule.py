"""
Tests for injection schedule date arithmetic
"""

from datetime import datetime, timedelta

import pytest

from errors import InvalidInputError
from frequency import DosingFrequency, FrequencyKind
from injection_schedule import (
    next_injection_date, recurring_dates, cycle_injection_count,
    cycle_end_date, cycle_schedule, is_injection_due, is_injection_overdue,
    injection_status, check_cycle_length, MAX_CYCLE_WEEKS,
)

START = datetime(2026, 3, 2, 8, 0)


def test_next_injection_date():
    assert next_injection_date(START, "daily") == datetime(2026, 3, 3, 8, 0)
    assert next_injection_date(START, "EOD") == datetime(2026, 3, 4, 8, 0)
    assert next_injection_date(START, "weekly") == datetime(2026, 3, 9, 8, 0)
    assert next_injection_date(START, DosingFrequency(FrequencyKind.TWICE_WEEKLY)) == datetime(2026, 3, 5, 20, 0)


def test_recurring_dates():
    dates = recurring_dates(START, "eod", 3)
    assert dates == [START, START + timedelta(days=2), START + timedelta(days=4)]
    assert recurring_dates(START, "daily", 0) == []


def test_cycle_injection_count():
    assert cycle_injection_count(4, "daily") == 28
    assert cycle_injection_count(4, "eod") == 14
    assert cycle_injection_count(3, "eod") == 11
    assert cycle_injection_count(4, "weekly") == 4
    assert cycle_injection_count(4, "biw") == 8


def test_cycle_end_date():
    assert cycle_end_date(START, 6) == START + timedelta(days=42)


def test_cycle_schedule():
    dates = cycle_schedule(START, 2, "weekly")
    assert dates == [START, START + timedelta(days=7)]


def test_due_and_overdue():
    assert is_injection_due(START, START + timedelta(minutes=10))
    assert not is_injection_due(START, START - timedelta(minutes=1))
    assert not is_injection_overdue(START, START + timedelta(minutes=30))
    assert is_injection_overdue(START, START + timedelta(minutes=31))
    assert not is_injection_due(START, START + timedelta(minutes=31))


def test_injection_status():
    assert injection_status(START, START - timedelta(hours=1)) == "upcoming"
    assert injection_status(START, START + timedelta(minutes=5)) == "due"
    assert injection_status(START, START + timedelta(hours=1)) == "overdue"
    assert injection_status(START, START + timedelta(hours=1), grace_minutes=90) == "due"


def test_check_cycle_length():
    assert check_cycle_length(8) == 8
    assert check_cycle_length(MAX_CYCLE_WEEKS) == MAX_CYCLE_WEEKS
    for weeks in (0, -1, float("nan"), float("inf"), MAX_CYCLE_WEEKS + 1):
        with pytest.raises(InvalidInputError):
            check_cycle_length(weeks)
