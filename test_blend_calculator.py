"""
Tests for the multi-peptide blend calculator
"""

import pytest

from blend_calculator import validate_blend_input, calculate_blend_dose, compute_blend_dose, print_blend_report
from errors import InvalidInputError
from models import BlendComponent, BlendCalculationInput
from units import ConcentrationUnit, MassUnit


def component(name, amount, unit="mg"):
    return BlendComponent(peptide_id=name.lower(), peptide_name=name, amount=amount, unit=unit)


def make_blend(components=None, **overrides):
    values = dict(
        components=components if components is not None else [
            component("BPC-157", 3),
            component("TB-500", 2),
        ],
        total_vial_strength=5,
        vial_strength_unit="mg",
        diluent_volume=2,
        syringe_type="u100",
        desired_dose=250,
        desired_dose_unit="mcg",
    )
    values.update(overrides)
    return BlendCalculationInput(**values)


# ==================== calculate_blend_dose ====================

def test_two_component_blend():
    result = calculate_blend_dose(make_blend())
    assert result.total_units_to_draw == 10.0
    assert result.total_concentration == 2.5
    assert result.concentration_unit is ConcentrationUnit.MG_PER_ML
    assert result.total_doses == 20

    bpc, tb = result.component_results
    assert bpc.peptide_name == "BPC-157"
    assert bpc.percentage == 60.0
    assert bpc.amount_in_dose == pytest.approx(0.15)  # 150 mcg, shown in mg
    assert bpc.unit is MassUnit.MG
    assert bpc.units_to_draw == 6.0

    assert tb.percentage == 40.0
    assert tb.amount_in_dose == pytest.approx(0.1)
    assert tb.units_to_draw == 4.0


def test_amount_in_dose_in_component_unit():
    blend = make_blend([component("BPC-157", 3000, "mcg"), component("TB-500", 2, "mg")])
    bpc, tb = calculate_blend_dose(blend).component_results
    assert bpc.amount_in_dose == 150.0
    assert bpc.unit is MassUnit.MCG
    assert tb.amount_in_dose == pytest.approx(0.1)


def test_component_order_preserved():
    names = ["TB-500", "BPC-157", "GHK-Cu"]
    blend = make_blend([component(n, 1) for n in names])
    result = calculate_blend_dose(blend)
    assert [c.peptide_name for c in result.component_results] == names


def test_percentages_not_forced_to_100():
    blend = make_blend([component("BPC-157", 2), component("TB-500", 2)])
    result = calculate_blend_dose(blend)
    assert [c.percentage for c in result.component_results] == [40.0, 40.0]
    assert sum(c.percentage for c in result.component_results) == pytest.approx(80.0)


def test_blend_u40():
    result = calculate_blend_dose(make_blend(syringe_type="u40"))
    assert result.total_units_to_draw == 4.0
    assert [c.units_to_draw for c in result.component_results] == [2.4, 1.6]


def test_blend_percentage_rounded_independently():
    blend = make_blend([component("A", 1), component("B", 1), component("C", 1)], total_vial_strength=3)
    result = calculate_blend_dose(blend)
    assert [c.percentage for c in result.component_results] == [33.33, 33.33, 33.33]


def test_blend_deterministic():
    blend = make_blend()
    assert calculate_blend_dose(blend) == calculate_blend_dose(blend)


# ==================== validate_blend_input ====================

def test_validate_blend_ok():
    result = validate_blend_input(make_blend())
    assert result.valid
    assert result.error is None


def test_validate_blend_needs_two_components():
    result = validate_blend_input(make_blend([component("BPC-157", 5)]))
    assert not result.valid
    assert result.error == "Blend must contain at least 2 peptides"


def test_validate_blend_component_count_checked_first():
    result = validate_blend_input(make_blend([], total_vial_strength=0))
    assert result.error == "Blend must contain at least 2 peptides"


@pytest.mark.parametrize("field, message", [
    ("total_vial_strength", "Total vial strength must be greater than 0"),
    ("diluent_volume", "Diluent volume must be greater than 0"),
    ("desired_dose", "Desired dose must be greater than 0"),
])
def test_validate_blend_rejects_zero(field, message):
    result = validate_blend_input(make_blend(**{field: 0}))
    assert not result.valid
    assert result.error == message


def test_validate_blend_rejects_overage_beyond_tolerance():
    blend = make_blend([component("BPC-157", 3.1), component("TB-500", 2)])  # 5.1 mg, 2% over
    result = validate_blend_input(blend)
    assert not result.valid
    assert "exceed total vial strength" in result.error


def test_validate_blend_allows_overage_within_tolerance():
    blend = make_blend([component("BPC-157", 3.04), component("TB-500", 2)])  # 5.04 mg, 0.8% over
    assert validate_blend_input(blend).valid


def test_validate_blend_normalizes_component_units():
    blend = make_blend([component("BPC-157", 3000, "mcg"), component("TB-500", 2.5)])
    assert not validate_blend_input(blend).valid


def test_compute_blend_dose_fails_closed():
    with pytest.raises(InvalidInputError, match="at least 2"):
        compute_blend_dose(make_blend([component("BPC-157", 5)]))


def test_print_blend_report(capsys):
    blend = make_blend()
    print_blend_report(blend, compute_blend_dose(blend))
    out = capsys.readouterr().out
    assert "BPC-157 + TB-500" in out
    assert "BPC-157: 150 mcg (60.0%, 6.0 units)" in out
    assert "Vial: 5 mg in 2 ml" in out


@pytest.mark.parametrize("overrides, message", [
    (dict(total_vial_strength=float("inf")), "Total vial strength must be a finite number"),
    (dict(diluent_volume=float("nan")), "Diluent volume must be a finite number"),
    (dict(desired_dose=float("inf")), "Desired dose must be a finite number"),
])
def test_validate_blend_rejects_non_finite(overrides, message):
    result = validate_blend_input(make_blend(**overrides))
    assert not result.valid
    assert result.error == message


def test_validate_blend_rejects_non_finite_component():
    blend = make_blend([component("BPC-157", float("nan")), component("TB-500", 2)])
    assert validate_blend_input(blend).error == "BPC-157 amount must be a finite number"


def test_compute_blend_dose_rejects_tiny_dose():
    with pytest.raises(InvalidInputError, match="outside the range"):
        compute_blend_dose(make_blend(desired_dose=1e-310))
