"""
Database Operations
Key-value storage for preferences and saved calculations
"""

import json
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import StoredValue, CalculationInput, CalculationResult
from units import syringe_type

logger = logging.getLogger(__name__)


class StorageKeys:
    """Keys the app stores under"""
    CALCULATIONS = "calculations"
    PREFERENCES = "preferences"


class KeyValueStore:
    """JSON values stored by key"""

    def __init__(self, session: Session):
        self.session = session

    def _row(self, key: str) -> Optional[StoredValue]:
        return self.session.query(StoredValue).filter(StoredValue.key == key).first()

    def save(self, key: str, value: Any) -> None:
        """Save a JSON-serializable value, replacing any existing one"""
        try:
            payload = json.dumps(value)
            row = self._row(key)
            if row:
                row.value = payload
            else:
                self.session.add(StoredValue(key=key, value=payload))
            self.session.commit()
        except (TypeError, ValueError, SQLAlchemyError):
            self.session.rollback()
            logger.exception("Error saving %s", key)
            raise

    def load(self, key: str) -> Optional[Any]:
        """Load a value; None if missing or unreadable"""
        row = self._row(key)
        if row is None:
            return None
        try:
            return json.loads(row.value)
        except ValueError:
            logger.exception("Error loading %s", key)
            return None

    def remove(self, key: str) -> bool:
        try:
            row = self._row(key)
            if not row:
                return False
            self.session.delete(row)
            self.session.commit()
            return True
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Error removing %s", key)
            raise


# ==================== SAVED CALCULATIONS ====================

def save_calculation(
    store: KeyValueStore,
    calc_input: CalculationInput,
    result: CalculationResult,
    name: Optional[str] = None,
) -> Dict[str, Any]:
    """Append a calculation to the saved list and return the stored entry"""
    entry = {
        "id": uuid.uuid4().hex,
        "name": name,
        "created_at": datetime.utcnow().isoformat(),
        "input": calc_input.to_dict(),
        "result": result.to_dict(),
    }
    saved = store.load(StorageKeys.CALCULATIONS) or []
    saved.append(entry)
    store.save(StorageKeys.CALCULATIONS, saved)
    return entry


def list_saved_calculations(store: KeyValueStore) -> List[Dict[str, Any]]:
    return store.load(StorageKeys.CALCULATIONS) or []


def delete_saved_calculation(store: KeyValueStore, calculation_id: str) -> bool:
    saved = list_saved_calculations(store)
    remaining = [c for c in saved if c.get("id") != calculation_id]
    if len(remaining) == len(saved):
        return False
    store.save(StorageKeys.CALCULATIONS, remaining)
    return True


# ==================== PREFERENCES ====================

PREFERENCE_KEYS = ("default_syringe_type",)


def load_preferences(store: KeyValueStore) -> Dict[str, Any]:
    return store.load(StorageKeys.PREFERENCES) or {}


def save_preferences(store: KeyValueStore, updates: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge updates into the stored preferences

    Raises KeyError for an unknown preference and ValueError for an
    unknown syringe type.
    """
    for name in updates:
        if name not in PREFERENCE_KEYS:
            raise KeyError(name)
    preferences = load_preferences(store)
    preferences.update(updates)
    if preferences.get("default_syringe_type") is not None:
        preferences["default_syringe_type"] = syringe_type(preferences["default_syringe_type"]).value
    store.save(StorageKeys.PREFERENCES, preferences)
    return preferences


def reset_preferences(store: KeyValueStore) -> bool:
    return store.remove(StorageKeys.PREFERENCES)
