"""
Tests for unit normalization and syringe conversion
"""

import pytest

from units import (
    MassUnit, SyringeType, ConcentrationUnit,
    to_mcg, from_mcg, units_per_ml, ml_to_units, units_to_ml,
    round2, pick_concentration_unit, format_dose, syringe_type,
)


def test_to_mcg():
    assert to_mcg(5, MassUnit.MG) == 5000
    assert to_mcg(5, "mg") == 5000
    assert to_mcg(250, "mcg") == 250
    assert to_mcg(2, "MG") == 2000


def test_from_mcg():
    assert from_mcg(150, "mg") == pytest.approx(0.15)
    assert from_mcg(150, MassUnit.MCG) == 150


def test_unknown_unit_rejected():
    with pytest.raises(ValueError):
        to_mcg(1, "grams")
    with pytest.raises(ValueError):
        syringe_type("u200")


def test_units_per_ml():
    assert units_per_ml(SyringeType.U100) == 100
    assert units_per_ml("tuberculin") == 100
    assert units_per_ml("standard_1ml") == 100
    assert units_per_ml("u40") == 40


def test_ml_units_conversion():
    assert ml_to_units(0.5, "u100") == 50
    assert ml_to_units(0.5, "u40") == 20
    assert units_to_ml(20, "u40") == 0.5
    assert units_to_ml(25, "u100") == 0.25


def test_round2_rounds_halves_up():
    assert round2(0.125) == 0.13
    assert round2(0.375) == 0.38
    assert round2(3.3333) == 3.33
    assert round2(10.0) == 10.0


def test_pick_concentration_unit():
    assert pick_concentration_unit(2500) == (2.5, ConcentrationUnit.MG_PER_ML)
    assert pick_concentration_unit(1000) == (1.0, ConcentrationUnit.MG_PER_ML)
    assert pick_concentration_unit(999) == (999, ConcentrationUnit.MCG_PER_ML)


def test_format_dose():
    assert format_dose(0.25, "mg") == "250 mcg"
    assert format_dose(2, "mg") == "2 mg"
    assert format_dose(250, "mcg") == "250 mcg"
    assert format_dose(1.5, MassUnit.MG) == "1.5 mg"
