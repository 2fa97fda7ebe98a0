"""
Tests for the key-value store, saved calculations and preferences
"""

import pytest

from calculator import calculate_dose
from database import (
    KeyValueStore, StorageKeys,
    save_calculation, list_saved_calculations, delete_saved_calculation,
    load_preferences, save_preferences, reset_preferences,
)
from models import get_session, StoredValue, CalculationInput


@pytest.fixture
def store():
    session = get_session("sqlite://")
    yield KeyValueStore(session)
    session.close()


def test_save_and_load(store):
    store.save(StorageKeys.PREFERENCES, {"default_units": "mcg", "reminder_minutes": 15})
    assert store.load(StorageKeys.PREFERENCES) == {"default_units": "mcg", "reminder_minutes": 15}


def test_load_missing_returns_none(store):
    assert store.load("nope") is None


def test_save_overwrites(store):
    store.save("onboarding_complete", False)
    store.save("onboarding_complete", True)
    assert store.load("onboarding_complete") is True
    assert store.session.query(StoredValue).count() == 1


def test_remove(store):
    store.save("a", 1)
    store.save("b", 2)
    assert store.remove("a") is True
    assert store.remove("a") is False
    assert store.load("a") is None
    assert store.load("b") == 2


def test_unserializable_value_raises(store):
    with pytest.raises(TypeError):
        store.save("bad", object())
    assert store.load("bad") is None


def test_corrupt_value_loads_as_none(store):
    store.session.add(StoredValue(key="corrupt", value="{not json"))
    store.session.commit()
    assert store.load("corrupt") is None


def test_saved_calculations(store):
    calc_input = CalculationInput(
        vial_strength=5, vial_strength_unit="mg", diluent_volume=2,
        syringe_type="u100", desired_dose=250, desired_dose_unit="mcg",
        dosing_frequency="daily",
    )
    entry = save_calculation(store, calc_input, calculate_dose(calc_input), name="BPC-157")

    saved = list_saved_calculations(store)
    assert len(saved) == 1
    assert saved[0]["id"] == entry["id"]
    assert saved[0]["name"] == "BPC-157"
    assert saved[0]["input"]["dosing_frequency"] == "daily"
    assert saved[0]["result"]["units_to_draw"] == 10.0
    assert CalculationInput.from_dict(saved[0]["input"]) == calc_input

    assert delete_saved_calculation(store, entry["id"]) is True
    assert delete_saved_calculation(store, entry["id"]) is False
    assert list_saved_calculations(store) == []


def test_preferences(store):
    assert load_preferences(store) == {}
    assert save_preferences(store, {"default_syringe_type": "U40"}) == {"default_syringe_type": "u40"}
    assert load_preferences(store) == {"default_syringe_type": "u40"}

    assert reset_preferences(store) is True
    assert load_preferences(store) == {}
    assert reset_preferences(store) is False


def test_preferences_reject_unknown_values(store):
    with pytest.raises(KeyError):
        save_preferences(store, {"theme": "dark"})
    with pytest.raises(ValueError):
        save_preferences(store, {"default_syringe_type": "u1000"})
    assert load_preferences(store) == {}
