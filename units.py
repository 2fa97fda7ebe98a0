"""
Dose Units
Mass normalization, syringe conversion and display rounding
"""

import enum
import math
from typing import Tuple, Union


class MassUnit(enum.Enum):
    """Mass unit a vial or dose is labelled in"""
    MG = "mg"
    MCG = "mcg"


class SyringeType(enum.Enum):
    """Syringe the dose is drawn with"""
    U100 = "u100"                  # U-100 insulin syringe (100 units = 1 mL)
    U40 = "u40"                    # U-40 insulin syringe (40 units = 1 mL)
    TUBERCULIN = "tuberculin"      # 1 mL marked like U-100
    STANDARD_1ML = "standard_1ml"  # 0.01 mL increments, read as 100 units


class ConcentrationUnit(enum.Enum):
    """Unit a reconstituted concentration is reported in"""
    MG_PER_ML = "mg/mL"
    MCG_PER_ML = "mcg/mL"


MCG_PER_MG = 1000

# Only U-40 differs; the other three are all read on a 100-unit scale.
UNITS_PER_ML = {
    SyringeType.U100: 100,
    SyringeType.U40: 40,
    SyringeType.TUBERCULIN: 100,
    SyringeType.STANDARD_1ML: 100,
}


def mass_unit(unit: Union[MassUnit, str]) -> MassUnit:
    """Coerce 'mg' / 'mcg' strings to MassUnit"""
    if isinstance(unit, MassUnit):
        return unit
    return MassUnit(str(unit).strip().lower())


def syringe_type(value: Union[SyringeType, str]) -> SyringeType:
    """Coerce 'u100' / 'u40' / ... strings to SyringeType"""
    if isinstance(value, SyringeType):
        return value
    return SyringeType(str(value).strip().lower())


def to_mcg(value: float, unit: Union[MassUnit, str]) -> float:
    """
    Normalize a mass to micrograms

    Args:
        value: Amount in the given unit
        unit: MassUnit (or its string value)

    Returns:
        Amount in mcg
    """
    if mass_unit(unit) is MassUnit.MG:
        return value * MCG_PER_MG
    return value


def from_mcg(value_mcg: float, unit: Union[MassUnit, str]) -> float:
    """Convert a microgram amount back into the given unit"""
    if mass_unit(unit) is MassUnit.MG:
        return value_mcg / MCG_PER_MG
    return value_mcg


def units_per_ml(value: Union[SyringeType, str]) -> int:
    """Syringe units that make up one milliliter"""
    return UNITS_PER_ML[syringe_type(value)]


def ml_to_units(ml: float, value: Union[SyringeType, str]) -> float:
    """Convert a volume in mL to units on the given syringe"""
    return ml * units_per_ml(value)


def units_to_ml(units: float, value: Union[SyringeType, str]) -> float:
    """Convert syringe units to a volume in mL"""
    return units / units_per_ml(value)


def round2(value: float) -> float:
    """Round to 2 decimals, halves rounded up (2.345 -> 2.35, not 2.34)"""
    return math.floor(value * 100 + 0.5) / 100


def pick_concentration_unit(concentration_mcg_per_ml: float) -> Tuple[float, ConcentrationUnit]:
    """
    Choose the display unit for a concentration

    mg/mL is used once the solution reaches 1 mg/mL, mcg/mL below that.

    Returns:
        (unrounded value, unit)
    """
    concentration_mg_per_ml = concentration_mcg_per_ml / MCG_PER_MG
    if concentration_mg_per_ml >= 1:
        return concentration_mg_per_ml, ConcentrationUnit.MG_PER_ML
    return concentration_mcg_per_ml, ConcentrationUnit.MCG_PER_ML


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def format_dose(value: float, unit: Union[MassUnit, str]) -> str:
    """Format a dose for display; sub-milligram mg doses are shown in mcg"""
    unit = mass_unit(unit)
    if unit is MassUnit.MG and value < 1:
        return f"{_format_number(round2(value * MCG_PER_MG))} mcg"
    return f"{_format_number(value)} {unit.value}"
