"""
Injection Schedule
Date arithmetic for recurring injections and protocol cycles.
Reminder delivery is handled by the device; this only works out dates.
"""

import math
from datetime import datetime, timedelta
from typing import List, Union

from errors import InvalidInputError
from frequency import DosingFrequency, as_frequency

Frequency = Union[DosingFrequency, str]


def next_injection_date(last_injection: datetime, frequency: Frequency) -> datetime:
    """Date of the injection following last_injection"""
    return last_injection + as_frequency(frequency).interval


def recurring_dates(start: datetime, frequency: Frequency, count: int) -> List[datetime]:
    """count injection dates starting at (and including) start"""
    step = as_frequency(frequency).interval
    return [start + step * i for i in range(max(count, 0))]


def cycle_injection_count(cycle_length_weeks: float, frequency: Frequency) -> int:
    """
    Number of injections in a cycle

    daily 4 weeks -> 28, eod 4 weeks -> 14, weekly 4 weeks -> 4
    """
    return math.ceil(cycle_length_weeks * 7 / as_frequency(frequency).days_per_dose)


def cycle_end_date(start: datetime, cycle_length_weeks: float) -> datetime:
    return start + timedelta(weeks=cycle_length_weeks)


def cycle_schedule(start: datetime, cycle_length_weeks: float, frequency: Frequency) -> List[datetime]:
    """All injection dates for a cycle"""
    count = cycle_injection_count(cycle_length_weeks, frequency)
    return recurring_dates(start, frequency, count)


def is_injection_due(scheduled: datetime, now: datetime, grace_minutes: int = 30) -> bool:
    """True from the scheduled time until the grace period runs out"""
    return scheduled <= now <= scheduled + timedelta(minutes=grace_minutes)


def is_injection_overdue(scheduled: datetime, now: datetime, grace_minutes: int = 30) -> bool:
    return now > scheduled + timedelta(minutes=grace_minutes)


def injection_status(scheduled: datetime, now: datetime, grace_minutes: int = 30) -> str:
    """'due', 'overdue' or 'upcoming' for a scheduled injection"""
    if is_injection_overdue(scheduled, now, grace_minutes):
        return "overdue"
    if is_injection_due(scheduled, now, grace_minutes):
        return "due"
    return "upcoming"


MAX_CYCLE_WEEKS = 104


def check_cycle_length(cycle_length_weeks: float) -> float:
    """Raise InvalidInputError unless 0 < cycle_length_weeks <= MAX_CYCLE_WEEKS"""
    if not math.isfinite(cycle_length_weeks) or cycle_length_weeks <= 0:
        raise InvalidInputError("Cycle length must be greater than 0")
    if cycle_length_weeks > MAX_CYCLE_WEEKS:
        raise InvalidInputError(f"Cycle length cannot exceed {MAX_CYCLE_WEEKS} weeks")
    return cycle_length_weeks
