"""
Blend Calculator
Dosing for vials that hold several peptides in a fixed ratio.
One draw from the vial delivers every component in proportion to its share
of the vial's total mass.
"""

import math

from calculator import OUT_OF_RANGE
from errors import InvalidInputError
from models import BlendCalculationInput, BlendCalculationResult, ComponentResult, ValidationResult
from units import to_mcg, from_mcg, ml_to_units, round2, pick_concentration_unit, format_dose

# Component amounts may exceed the labelled vial total by this much (rounding on labels)
COMPONENT_SUM_TOLERANCE = 0.01


def validate_blend_input(blend_input: BlendCalculationInput) -> ValidationResult:
    """Return the first failing check, in the order the form shows them"""
    if len(blend_input.components) < 2:
        return ValidationResult.fail("Blend must contain at least 2 peptides")
    for label, value in (
        ("Total vial strength", blend_input.total_vial_strength),
        ("Diluent volume", blend_input.diluent_volume),
        ("Desired dose", blend_input.desired_dose),
    ):
        if not math.isfinite(value):
            return ValidationResult.fail(f"{label} must be a finite number")
    for c in blend_input.components:
        if not math.isfinite(c.amount):
            return ValidationResult.fail(f"{c.peptide_name} amount must be a finite number")

    if blend_input.total_vial_strength <= 0:
        return ValidationResult.fail("Total vial strength must be greater than 0")
    if blend_input.diluent_volume <= 0:
        return ValidationResult.fail("Diluent volume must be greater than 0")
    if blend_input.desired_dose <= 0:
        return ValidationResult.fail("Desired dose must be greater than 0")

    total_component_mcg = sum(to_mcg(c.amount, c.unit) for c in blend_input.components)
    total_vial_mcg = to_mcg(blend_input.total_vial_strength, blend_input.vial_strength_unit)
    if total_component_mcg > total_vial_mcg * (1 + COMPONENT_SUM_TOLERANCE):
        return ValidationResult.fail("Component amounts exceed total vial strength")

    desired_dose_mcg = to_mcg(blend_input.desired_dose, blend_input.desired_dose_unit)
    if not math.isfinite(total_vial_mcg / desired_dose_mcg):
        return ValidationResult.fail(OUT_OF_RANGE)

    return ValidationResult.ok()


def calculate_blend_dose(blend_input: BlendCalculationInput) -> BlendCalculationResult:
    """
    Calculate the total draw and what each component contributes to it

    Each component is computed on its own from its share of the vial; the
    percentages are not rebalanced, so they only sum to 100 when the
    component amounts add up to the vial total.
    Assumes validate_blend_input() passed.
    """
    total_vial_mcg = to_mcg(blend_input.total_vial_strength, blend_input.vial_strength_unit)
    desired_dose_mcg = to_mcg(blend_input.desired_dose, blend_input.desired_dose_unit)

    concentration_mcg_per_ml = total_vial_mcg / blend_input.diluent_volume
    volume_needed_ml = desired_dose_mcg / concentration_mcg_per_ml
    total_units_to_draw = ml_to_units(volume_needed_ml, blend_input.syringe_type)

    component_results = []
    for component in blend_input.components:
        percentage = to_mcg(component.amount, component.unit) / total_vial_mcg * 100
        amount_in_dose_mcg = desired_dose_mcg * percentage / 100
        component_results.append(ComponentResult(
            peptide_name=component.peptide_name,
            amount_in_dose=round2(from_mcg(amount_in_dose_mcg, component.unit)),
            unit=component.unit,
            units_to_draw=round2(total_units_to_draw * percentage / 100),
            percentage=round2(percentage),
        ))

    total_doses = math.floor(total_vial_mcg / desired_dose_mcg)
    total_concentration, concentration_unit = pick_concentration_unit(concentration_mcg_per_ml)

    return BlendCalculationResult(
        total_units_to_draw=round2(total_units_to_draw),
        total_concentration=round2(total_concentration),
        concentration_unit=concentration_unit,
        total_doses=total_doses,
        component_results=tuple(component_results),
    )


def compute_blend_dose(blend_input: BlendCalculationInput) -> BlendCalculationResult:
    """Validate then calculate; raises InvalidInputError on bad input"""
    validation = validate_blend_input(blend_input)
    if not validation.valid:
        raise InvalidInputError(validation.error)
    try:
        return calculate_blend_dose(blend_input)
    except (OverflowError, ZeroDivisionError) as e:
        raise InvalidInputError(OUT_OF_RANGE) from e


def print_blend_report(blend_input: BlendCalculationInput, result: BlendCalculationResult) -> None:
    """Print a formatted blend dosing report"""
    names = " + ".join(c.peptide_name for c in blend_input.components)
    print(f"\n{'='*60}")
    print(f"BLEND DOSING REPORT: {names}")
    print(f"{'='*60}")
    print(f"\n  • Vial: {format_dose(blend_input.total_vial_strength, blend_input.vial_strength_unit)}"
          f" in {blend_input.diluent_volume:g} ml")
    print(f"  • Concentration: {result.total_concentration:g} {result.concentration_unit.value}")
    print(f"  • Dose: {format_dose(blend_input.desired_dose, blend_input.desired_dose_unit)}"
          f" = {result.total_units_to_draw} units ({blend_input.syringe_type.value})")
    print(f"  • Total doses available: {result.total_doses}")
    print("\nPER COMPONENT:")
    for c in result.component_results:
        print(f"  • {c.peptide_name}: {format_dose(c.amount_in_dose, c.unit)}"
              f" ({c.percentage}%, {c.units_to_draw} units)")
    print(f"{'='*60}\n")
