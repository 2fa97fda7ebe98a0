"""
Peptide Dose Calculator Models
Immutable calculation records and the SQLAlchemy table backing the
key-value store
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from sqlalchemy import create_engine, Column, Integer, String, Text, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker

from frequency import DosingFrequency, FrequencyKind
from units import MassUnit, SyringeType, ConcentrationUnit, mass_unit, syringe_type

Base = declarative_base()

_MISSING = object()


def _pick(data: Dict[str, Any], snake: str, camel: str, default: Any = _MISSING) -> Any:
    """Read a key in either snake_case or the mobile client's camelCase"""
    if snake in data:
        return data[snake]
    if camel in data:
        return data[camel]
    if default is _MISSING:
        raise KeyError(snake)
    return default


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _frequency_from_value(value: Any) -> Union[str, DosingFrequency, None]:
    if value is None or isinstance(value, (str, DosingFrequency)):
        return value
    if isinstance(value, dict):
        kind = FrequencyKind(value["kind"])
        if kind is FrequencyKind.CUSTOM:
            return DosingFrequency.custom(float(value["days_per_dose"]), label=value.get("label"))
        return DosingFrequency(kind, label=value.get("label"))
    raise TypeError(f"Unsupported dosing frequency: {value!r}")


def _frequency_to_value(value: Union[str, DosingFrequency, None]) -> Any:
    if isinstance(value, DosingFrequency):
        return value.to_dict()
    return value


# ==================== SINGLE PEPTIDE ====================

@dataclass(frozen=True)
class CalculationInput:
    """One vial, one peptide, one desired dose"""
    vial_strength: float
    vial_strength_unit: MassUnit
    diluent_volume: float  # mL of bacteriostatic water
    syringe_type: SyringeType
    desired_dose: float
    desired_dose_unit: MassUnit
    dosing_frequency: Union[str, DosingFrequency, None] = None
    peptide_id: Optional[str] = None
    vial_cost: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "vial_strength_unit", mass_unit(self.vial_strength_unit))
        object.__setattr__(self, "desired_dose_unit", mass_unit(self.desired_dose_unit))
        object.__setattr__(self, "syringe_type", syringe_type(self.syringe_type))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CalculationInput":
        return cls(
            vial_strength=float(_pick(data, "vial_strength", "vialStrength")),
            vial_strength_unit=_pick(data, "vial_strength_unit", "vialStrengthUnit", "mg"),
            diluent_volume=float(_pick(data, "diluent_volume", "diluentVolume")),
            syringe_type=_pick(data, "syringe_type", "syringeType", "u100"),
            desired_dose=float(_pick(data, "desired_dose", "desiredDose")),
            desired_dose_unit=_pick(data, "desired_dose_unit", "desiredDoseUnit", "mcg"),
            dosing_frequency=_frequency_from_value(_pick(data, "dosing_frequency", "dosingFrequency", None)),
            peptide_id=_pick(data, "peptide_id", "peptideId", None),
            vial_cost=_optional_float(_pick(data, "vial_cost", "vialCost", None)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vial_strength": self.vial_strength,
            "vial_strength_unit": self.vial_strength_unit.value,
            "diluent_volume": self.diluent_volume,
            "syringe_type": self.syringe_type.value,
            "desired_dose": self.desired_dose,
            "desired_dose_unit": self.desired_dose_unit.value,
            "dosing_frequency": _frequency_to_value(self.dosing_frequency),
            "peptide_id": self.peptide_id,
            "vial_cost": self.vial_cost,
        }


@dataclass(frozen=True)
class CalculationResult:
    units_to_draw: float
    concentration: float
    concentration_unit: ConcentrationUnit
    total_doses: int
    vial_duration: float  # days, 0 when no frequency was given
    cost_per_dose: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "units_to_draw": self.units_to_draw,
            "concentration": self.concentration,
            "concentration_unit": self.concentration_unit.value,
            "total_doses": self.total_doses,
            "vial_duration": self.vial_duration,
            "cost_per_dose": self.cost_per_dose,
        }


# ==================== BLENDS ====================

@dataclass(frozen=True)
class BlendComponent:
    """One peptide inside a pre-mixed blend vial"""
    peptide_id: str
    peptide_name: str
    amount: float
    unit: MassUnit

    def __post_init__(self):
        object.__setattr__(self, "unit", mass_unit(self.unit))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BlendComponent":
        name = _pick(data, "peptide_name", "peptideName")
        return cls(
            peptide_id=_pick(data, "peptide_id", "peptideId", name),
            peptide_name=name,
            amount=float(data["amount"]),
            unit=data.get("unit", "mg"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "peptide_id": self.peptide_id,
            "peptide_name": self.peptide_name,
            "amount": self.amount,
            "unit": self.unit.value,
        }


@dataclass(frozen=True)
class BlendCalculationInput:
    components: Tuple[BlendComponent, ...]
    total_vial_strength: float
    vial_strength_unit: MassUnit
    diluent_volume: float
    syringe_type: SyringeType
    desired_dose: float
    desired_dose_unit: MassUnit

    def __post_init__(self):
        object.__setattr__(self, "components", tuple(self.components))
        object.__setattr__(self, "vial_strength_unit", mass_unit(self.vial_strength_unit))
        object.__setattr__(self, "desired_dose_unit", mass_unit(self.desired_dose_unit))
        object.__setattr__(self, "syringe_type", syringe_type(self.syringe_type))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BlendCalculationInput":
        components: Iterable[Dict[str, Any]] = data.get("components") or []
        return cls(
            components=tuple(BlendComponent.from_dict(c) for c in components),
            total_vial_strength=float(_pick(data, "total_vial_strength", "totalVialStrength")),
            vial_strength_unit=_pick(data, "vial_strength_unit", "vialStrengthUnit", "mg"),
            diluent_volume=float(_pick(data, "diluent_volume", "diluentVolume")),
            syringe_type=_pick(data, "syringe_type", "syringeType", "u100"),
            desired_dose=float(_pick(data, "desired_dose", "desiredDose")),
            desired_dose_unit=_pick(data, "desired_dose_unit", "desiredDoseUnit", "mcg"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "components": [c.to_dict() for c in self.components],
            "total_vial_strength": self.total_vial_strength,
            "vial_strength_unit": self.vial_strength_unit.value,
            "diluent_volume": self.diluent_volume,
            "syringe_type": self.syringe_type.value,
            "desired_dose": self.desired_dose,
            "desired_dose_unit": self.desired_dose_unit.value,
        }


@dataclass(frozen=True)
class ComponentResult:
    peptide_name: str
    amount_in_dose: float  # in the component's own unit
    unit: MassUnit
    units_to_draw: float
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "peptide_name": self.peptide_name,
            "amount_in_dose": self.amount_in_dose,
            "unit": self.unit.value,
            "units_to_draw": self.units_to_draw,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class BlendCalculationResult:
    total_units_to_draw: float
    total_concentration: float
    concentration_unit: ConcentrationUnit
    total_doses: int
    component_results: Tuple[ComponentResult, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_units_to_draw": self.total_units_to_draw,
            "total_concentration": self.total_concentration,
            "concentration_unit": self.concentration_unit.value,
            "total_doses": self.total_doses,
            "component_results": [c.to_dict() for c in self.component_results],
        }


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(True)

    @classmethod
    def fail(cls, error: str) -> "ValidationResult":
        return cls(False, error)

    def to_dict(self) -> Dict[str, Any]:
        if self.valid:
            return {"valid": True}
        return {"valid": False, "error": self.error}


# ==================== STORAGE TABLE ====================

class StoredValue(Base):
    """One key in the key-value store; value is JSON text"""
    __tablename__ = 'stored_values'

    id = Column(Integer, primary_key=True)
    key = Column(String(200), nullable=False, unique=True)
    value = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<StoredValue(key='{self.key}')>"


# Database initialization functions
def create_database(db_url="sqlite:///peptide_tracker.db"):
    """Create all tables in the database"""
    engine = create_engine(db_url, echo=False)
    Base.metadata.create_all(engine)
    return engine


def get_session(db_url="sqlite:///peptide_tracker.db"):
    """Get a database session, creating tables on first use"""
    engine = create_database(db_url)
    Session = sessionmaker(bind=engine)
    return Session()


if __name__ == "__main__":
    print("Creating database tables...")
    create_database()
    print("Database tables created successfully!")
