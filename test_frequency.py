"""
Tests for dosing frequency parsing
"""

from datetime import timedelta

import pytest

from frequency import DosingFrequency, FrequencyKind, days_per_dose, as_frequency


@pytest.mark.parametrize("text, kind", [
    ("daily", FrequencyKind.DAILY),
    ("daily or twice daily", FrequencyKind.DAILY),
    ("QD", FrequencyKind.DAILY),
    ("daily or EOD", FrequencyKind.DAILY),
    ("EOD", FrequencyKind.EVERY_OTHER_DAY),
    ("Every other day", FrequencyKind.EVERY_OTHER_DAY),
    ("weekly", FrequencyKind.WEEKLY),
    ("qw", FrequencyKind.WEEKLY),
    ("twice weekly", FrequencyKind.WEEKLY),
    ("BIW", FrequencyKind.TWICE_WEEKLY),
    ("as needed", FrequencyKind.CUSTOM),
])
def test_parse_precedence(text, kind):
    assert DosingFrequency.parse(text).kind is kind


def test_parse_keeps_text_as_label():
    assert DosingFrequency.parse("as needed").label == "as needed"


def test_qd_must_match_exactly():
    # "qd" is only recognised on its own, not inside other words
    assert DosingFrequency.parse("qdx").kind is FrequencyKind.CUSTOM


def test_days_per_dose():
    assert days_per_dose("daily") == 1
    assert days_per_dose("eod") == 2
    assert days_per_dose("weekly") == 7
    assert days_per_dose("biw") == 3.5
    assert days_per_dose("something else") == 1
    assert days_per_dose(DosingFrequency.custom(10)) == 10


def test_interval():
    assert DosingFrequency(FrequencyKind.EVERY_OTHER_DAY).interval == timedelta(days=2)
    assert DosingFrequency(FrequencyKind.TWICE_WEEKLY).interval == timedelta(days=3, hours=12)


def test_custom_needs_days():
    with pytest.raises(ValueError):
        DosingFrequency(FrequencyKind.CUSTOM)


def test_as_frequency_passes_through():
    freq = DosingFrequency(FrequencyKind.WEEKLY)
    assert as_frequency(freq) is freq


def test_to_dict():
    assert DosingFrequency.custom(4, label="every 4 days").to_dict() == {
        "kind": "custom",
        "days_per_dose": 4.0,
        "label": "every 4 days",
    }
