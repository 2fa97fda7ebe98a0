"""
Peptide Dose Calculator Web API

JSON endpoints the mobile calculator screens post to:
- single-peptide and blend dose calculations (validated)
- peptide reference lookups used to pre-fill the forms
- injection schedules for a protocol cycle
- saved calculations and preferences, kept in the key-value store
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any, Dict

from flask import Flask, request, jsonify

from blend_calculator import validate_blend_input, compute_blend_dose
from calculator import validate_calculation_input, compute_dose
from config import Config
from database import (
    KeyValueStore, save_calculation, list_saved_calculations, delete_saved_calculation,
    load_preferences, save_preferences, reset_preferences,
)
from errors import InvalidInputError
from frequency import DosingFrequency
from injection_schedule import (
    check_cycle_length, cycle_schedule, cycle_end_date, next_injection_date, injection_status,
)
from models import get_session, CalculationInput, BlendCalculationInput
import peptide_catalog

app = Flask(__name__)
app.config["DATABASE_URL"] = Config.DATABASE_URL
app.config["DEFAULT_SYRINGE_TYPE"] = Config.DEFAULT_SYRINGE_TYPE
app.logger.setLevel(getattr(logging, Config.LOG_LEVEL, logging.INFO))

# Malformed payloads (missing keys, non-numeric values, unknown units, numbers too large for a float)
PAYLOAD_ERRORS = (KeyError, TypeError, ValueError, OverflowError)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _request_json() -> Dict[str, Any]:
    payload = request.get_json(force=True, silent=True)
    if not isinstance(payload, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return payload


def _json_payload() -> Dict[str, Any]:
    """Calculator payload with the preferred syringe filled in when none is named"""
    payload = _request_json()
    if "syringe_type" not in payload and "syringeType" not in payload:
        payload["syringe_type"] = _default_syringe()
    return payload


def _default_syringe() -> str:
    session, store = _open_store()
    try:
        preferred = load_preferences(store).get("default_syringe_type")
    finally:
        session.close()
    return preferred or app.config["DEFAULT_SYRINGE_TYPE"]


def _bad_request(message: str):
    return jsonify({"error": message}), 400


def _payload_error_message(e: Exception) -> str:
    if isinstance(e, KeyError):
        return f"Missing field: {e.args[0]}"
    return f"Invalid value: {e}"


def _open_store():
    session = get_session(app.config["DATABASE_URL"])
    return session, KeyValueStore(session)


def _parse_datetime(value: Any) -> datetime:
    if not isinstance(value, str):
        raise TypeError(f"expected an ISO date string, got {value!r}")
    return datetime.fromisoformat(value)


# -----------------------------------------------------------------------------
# Peptide reference
# -----------------------------------------------------------------------------
@app.route("/api/peptides")
def api_peptides():
    category = request.args.get("category") or None
    query = (request.args.get("q") or "").strip()
    if query:
        peptides = peptide_catalog.search_peptides(query)
    else:
        peptides = peptide_catalog.list_peptides(category)
    return jsonify(peptides)


@app.route("/api/peptides/categories")
def api_peptide_categories():
    return jsonify(peptide_catalog.list_categories())


@app.route("/api/peptides/<peptide_id>")
def api_peptide_detail(peptide_id: str):
    peptide = peptide_catalog.get_peptide(peptide_id)
    if not peptide:
        return jsonify({"error": f"Peptide '{peptide_id}' not found"}), 404
    return jsonify(peptide)


# -----------------------------------------------------------------------------
# Calculators
# -----------------------------------------------------------------------------
@app.route("/api/validate", methods=["POST"])
def api_validate():
    """
    Returns {valid, error?}. Dose and strength are compared as entered
    unless ?normalized=1 is passed.
    """
    try:
        calc_input = CalculationInput.from_dict(_json_payload())
    except InvalidInputError as e:
        return _bad_request(str(e))
    except PAYLOAD_ERRORS as e:
        return _bad_request(_payload_error_message(e))
    normalized = request.args.get("normalized", "").lower() in ("1", "true", "yes")
    return jsonify(validate_calculation_input(calc_input, compare_normalized=normalized).to_dict())


@app.route("/api/validate-blend", methods=["POST"])
def api_validate_blend():
    try:
        blend_input = BlendCalculationInput.from_dict(_json_payload())
    except InvalidInputError as e:
        return _bad_request(str(e))
    except PAYLOAD_ERRORS as e:
        return _bad_request(_payload_error_message(e))
    return jsonify(validate_blend_input(blend_input).to_dict())


@app.route("/api/calculate", methods=["POST"])
def api_calculate():
    """
    POST JSON CalculationInput (snake_case or camelCase keys).
    Returns: {units_to_draw, concentration, concentration_unit, total_doses, vial_duration, cost_per_dose}
    """
    try:
        calc_input = CalculationInput.from_dict(_json_payload())
        result = compute_dose(calc_input)
    except InvalidInputError as e:
        return _bad_request(str(e))
    except PAYLOAD_ERRORS as e:
        return _bad_request(_payload_error_message(e))
    return jsonify(result.to_dict())


@app.route("/api/calculate-blend", methods=["POST"])
def api_calculate_blend():
    """
    POST JSON BlendCalculationInput with a `components` list.
    Returns: totals plus `component_results` in component order.
    """
    try:
        blend_input = BlendCalculationInput.from_dict(_json_payload())
        result = compute_blend_dose(blend_input)
    except InvalidInputError as e:
        return _bad_request(str(e))
    except PAYLOAD_ERRORS as e:
        return _bad_request(_payload_error_message(e))
    return jsonify(result.to_dict())


# -----------------------------------------------------------------------------
# Saved calculations
# -----------------------------------------------------------------------------
@app.route("/api/calculations", methods=["GET"])
def api_list_calculations():
    session, store = _open_store()
    try:
        return jsonify(list_saved_calculations(store))
    finally:
        session.close()


@app.route("/api/calculations", methods=["POST"])
def api_save_calculation():
    """Calculate and save in one step; body is a CalculationInput plus optional `name`"""
    try:
        payload = _json_payload()
        calc_input = CalculationInput.from_dict(payload)
        result = compute_dose(calc_input)
    except InvalidInputError as e:
        return _bad_request(str(e))
    except PAYLOAD_ERRORS as e:
        return _bad_request(_payload_error_message(e))

    session, store = _open_store()
    try:
        entry = save_calculation(store, calc_input, result, name=(payload.get("name") or None))
    except Exception:
        app.logger.exception("Failed to save calculation")
        return jsonify({"error": "Could not save calculation"}), 500
    finally:
        session.close()

    app.logger.info("Saved calculation %s", entry["id"])
    return jsonify(entry), 201


@app.route("/api/calculations/<calculation_id>", methods=["DELETE"])
def api_delete_calculation(calculation_id: str):
    session, store = _open_store()
    try:
        deleted = delete_saved_calculation(store, calculation_id)
    finally:
        session.close()
    if not deleted:
        return jsonify({"error": "Calculation not found"}), 404
    return jsonify({"deleted": calculation_id})


# -----------------------------------------------------------------------------
# Injection schedule
# -----------------------------------------------------------------------------
@app.route("/api/schedule", methods=["POST"])
def api_schedule():
    """
    POST JSON {cycleWeeks, frequency | peptideId, start?, lastInjection?}.
    Without `frequency` the peptide's typical frequency is used.
    Returns every injection date in the cycle, plus the next injection and
    whether it is due when `lastInjection` is given.
    """
    try:
        payload = _request_json()
        text = payload.get("frequency")
        if not text:
            peptide_id = payload.get("peptide_id") or payload.get("peptideId")
            if not peptide_id:
                raise KeyError("frequency")
            peptide = peptide_catalog.get_peptide(peptide_id)
            if not peptide:
                return jsonify({"error": f"Peptide '{peptide_id}' not found"}), 404
            text = peptide["dosing_range"]["frequency"]
        frequency = DosingFrequency.parse(str(text))
        weeks = payload.get("cycle_weeks", payload.get("cycleWeeks"))
        if weeks is None:
            raise KeyError("cycle_weeks")
        weeks = check_cycle_length(float(weeks))
        start = payload.get("start")
        start = _parse_datetime(start) if start else datetime.now().replace(microsecond=0)
        last = payload.get("last_injection") or payload.get("lastInjection")
        last = _parse_datetime(last) if last else None

        dates = cycle_schedule(start, weeks, frequency)
        schedule = {
            "frequency": frequency.to_dict(),
            "injections": len(dates),
            "start": start.isoformat(),
            "end_date": cycle_end_date(start, weeks).isoformat(),
            "dates": [d.isoformat() for d in dates],
        }
        if last is not None:
            upcoming = next_injection_date(last, frequency)
            schedule["next_injection"] = upcoming.isoformat()
            schedule["status"] = injection_status(upcoming, datetime.now())
    except InvalidInputError as e:
        return _bad_request(str(e))
    except PAYLOAD_ERRORS as e:
        return _bad_request(_payload_error_message(e))
    return jsonify(schedule)


# -----------------------------------------------------------------------------
# Preferences
# -----------------------------------------------------------------------------
@app.route("/api/preferences", methods=["GET"])
def api_get_preferences():
    session, store = _open_store()
    try:
        return jsonify(load_preferences(store))
    finally:
        session.close()


@app.route("/api/preferences", methods=["PUT"])
def api_update_preferences():
    try:
        updates = _request_json()
    except InvalidInputError as e:
        return _bad_request(str(e))

    session, store = _open_store()
    try:
        preferences = save_preferences(store, updates)
    except KeyError as e:
        return _bad_request(f"Unknown preference: {e.args[0]}")
    except ValueError as e:
        return _bad_request(f"Invalid value: {e}")
    finally:
        session.close()
    return jsonify(preferences)


@app.route("/api/preferences", methods=["DELETE"])
def api_reset_preferences():
    session, store = _open_store()
    try:
        reset_preferences(store)
    finally:
        session.close()
    return jsonify({})


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=Config.DEBUG)
