"""
Peptide Calculator
Handles reconstitution and dosing calculations for a single-peptide vial
"""

import math
from typing import Any, Dict, Optional, Union

from errors import InvalidInputError
from frequency import DosingFrequency, days_per_dose
from models import CalculationInput, CalculationResult, ValidationResult
from units import (
    to_mcg, ml_to_units, units_to_ml, round2,
    pick_concentration_unit, format_dose,
)

OUT_OF_RANGE = "Values are outside the range the calculator can handle"


def validate_calculation_input(calc_input: CalculationInput, compare_normalized: bool = False) -> ValidationResult:
    """
    Check a calculation input before it reaches calculate_dose

    By default dose and vial strength are compared as entered, before any
    unit conversion, so a 250 mcg dose from a 5 mg vial fails the
    dose/strength check. compare_normalized=True compares them in mcg.
    Never raises; callers check .valid.
    """
    for label, value in (
        ("Vial strength", calc_input.vial_strength),
        ("Diluent volume", calc_input.diluent_volume),
        ("Desired dose", calc_input.desired_dose),
    ):
        if not math.isfinite(value):
            return ValidationResult.fail(f"{label} must be a finite number")

    if calc_input.vial_strength <= 0:
        return ValidationResult.fail("Vial strength must be greater than 0")
    if calc_input.diluent_volume <= 0:
        return ValidationResult.fail("Diluent volume must be greater than 0")
    if calc_input.desired_dose <= 0:
        return ValidationResult.fail("Desired dose must be greater than 0")

    strength_mcg = to_mcg(calc_input.vial_strength, calc_input.vial_strength_unit)
    dose_mcg = to_mcg(calc_input.desired_dose, calc_input.desired_dose_unit)
    if compare_normalized:
        dose, strength = dose_mcg, strength_mcg
    else:
        dose, strength = calc_input.desired_dose, calc_input.vial_strength
    if dose > strength:
        return ValidationResult.fail("Desired dose cannot exceed vial strength")

    # 1e-310 mcg out of a 5 mg vial is a valid float but not a countable number of doses
    if not math.isfinite(strength_mcg / dose_mcg):
        return ValidationResult.fail(OUT_OF_RANGE)
    if calc_input.vial_cost is not None and not math.isfinite(calc_input.vial_cost):
        return ValidationResult.fail("Vial cost must be a finite number")
    return ValidationResult.ok()


def calculate_dose(calc_input: CalculationInput) -> CalculationResult:
    """
    Calculate syringe units and vial economics for a desired dose

    Assumes validate_calculation_input() passed. A zero diluent volume or
    dose is not re-checked here and raises ZeroDivisionError.

    Args:
        calc_input: Vial strength, diluent, syringe and dose

    Returns:
        CalculationResult with units rounded to 2 decimals
    """
    # Convert everything to mcg
    vial_strength_mcg = to_mcg(calc_input.vial_strength, calc_input.vial_strength_unit)
    desired_dose_mcg = to_mcg(calc_input.desired_dose, calc_input.desired_dose_unit)

    concentration_mcg_per_ml = vial_strength_mcg / calc_input.diluent_volume
    volume_needed_ml = desired_dose_mcg / concentration_mcg_per_ml
    units_to_draw = ml_to_units(volume_needed_ml, calc_input.syringe_type)

    total_doses = math.floor(vial_strength_mcg / desired_dose_mcg)

    vial_duration = 0
    if calc_input.dosing_frequency:
        vial_duration = total_doses * days_per_dose(calc_input.dosing_frequency)

    concentration, concentration_unit = pick_concentration_unit(concentration_mcg_per_ml)

    cost_per_dose = None
    if calc_input.vial_cost is not None and total_doses > 0:
        cost_per_dose = round2(calc_input.vial_cost / total_doses)

    return CalculationResult(
        units_to_draw=round2(units_to_draw),
        concentration=round2(concentration),
        concentration_unit=concentration_unit,
        total_doses=total_doses,
        vial_duration=vial_duration,
        cost_per_dose=cost_per_dose,
    )


def compute_dose(calc_input: CalculationInput) -> CalculationResult:
    """
    Validate then calculate; raises InvalidInputError instead of an arithmetic error

    Dose and vial strength are compared in mcg here, so mixed-unit input
    (mg vial, mcg dose) is accepted.
    """
    validation = validate_calculation_input(calc_input, compare_normalized=True)
    if not validation.valid:
        raise InvalidInputError(validation.error)
    try:
        return calculate_dose(calc_input)
    except (OverflowError, ZeroDivisionError) as e:
        raise InvalidInputError(OUT_OF_RANGE) from e


def _frequency_label(frequency: Union[str, DosingFrequency, None]) -> Optional[str]:
    if not frequency:
        return None
    if isinstance(frequency, DosingFrequency):
        return frequency.label or frequency.kind.value
    return frequency


class PeptideCalculator:
    """Reconstitution reports built on the dose functions above"""

    @staticmethod
    def reconstitution_report(
        peptide_name: str,
        calc_input: CalculationInput,
        result: CalculationResult,
    ) -> Dict[str, Any]:
        """
        Describe an already computed dose for display

        Args:
            peptide_name: Name of the peptide
            calc_input: The input that produced result
            result: Output of compute_dose(calc_input)

        Returns:
            Dictionary with all calculations
        """
        return {
            "peptide": peptide_name,
            "vial_strength": format_dose(calc_input.vial_strength, calc_input.vial_strength_unit),
            "water_added_ml": calc_input.diluent_volume,
            "concentration": f"{result.concentration:g} {result.concentration_unit.value}",
            "target_dose": format_dose(calc_input.desired_dose, calc_input.desired_dose_unit),
            "dose_volume_ml": round(units_to_ml(result.units_to_draw, calc_input.syringe_type), 3),
            "syringe_type": calc_input.syringe_type.value,
            "syringe_units": result.units_to_draw,
            "total_doses_in_vial": result.total_doses,
            "frequency": _frequency_label(calc_input.dosing_frequency),
            "vial_lasts_days": result.vial_duration,
            "cost_per_dose": result.cost_per_dose,
        }

    @staticmethod
    def print_reconstitution_report(report: Dict[str, Any]) -> None:
        """Print a formatted reconstitution report"""
        print(f"\n{'='*60}")
        print(f"PEPTIDE RECONSTITUTION REPORT: {report['peptide']}")
        print(f"{'='*60}")
        print("\nVIAL PREPARATION:")
        print(f"  • Peptide amount: {report['vial_strength']}")
        print(f"  • Bacteriostatic water: {report['water_added_ml']} ml")
        print(f"  • Final concentration: {report['concentration']}")
        print("\nDOSING INSTRUCTIONS:")
        print(f"  • Target dose: {report['target_dose']}")
        print(f"  • Inject volume: {report['dose_volume_ml']} ml")
        print(f"  • Syringe units: {report['syringe_units']} units (on {report['syringe_type']} syringe)")
        if report.get("frequency"):
            print(f"  • Frequency: {report['frequency']}")
        print("\nVIAL LIFESPAN:")
        print(f"  • Total doses available: {report['total_doses_in_vial']}")
        if report.get("frequency"):
            print(f"  • Vial will last: {report['vial_lasts_days']} days")
        if report.get("cost_per_dose") is not None:
            print(f"  • Cost per dose: {report['cost_per_dose']:.2f}")
        print(f"{'='*60}\n")
