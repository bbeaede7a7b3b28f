"""Validation API blueprint."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict

from flask import Blueprint, Response, current_app, jsonify, request

from core.constants import REASON_DESCRIPTIONS
from core.exceptions import RecordParseError
from services.engagement_service import analyze_engagement, analyze_engagement_by_date
from services.validation_runner import run_validation
from utils.csv_parser import (
    entries_from_dicts,
    parse_entries_csv,
    parse_recharges_csv,
    recharges_from_dicts,
    write_verdicts_csv,
)


validation_bp = Blueprint("validation", __name__, url_prefix="/api")


def _json_body() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise RecordParseError("Request body must be a JSON object")
    return payload


def _list_field(payload: Dict[str, Any], name: str, required: bool = True):
    value = payload.get(name)
    if value is None and not required:
        return None
    if not isinstance(value, list):
        raise RecordParseError(f"'{name}' must be a list")
    return value


def _run(entries, recharges):
    return run_validation(
        entries,
        recharges,
        calendar=current_app.extensions["draw_calendar"],
        config=current_app.config["VALIDATOR_CONFIG"],
    )


@validation_bp.route("/validate", methods=["POST"])
def validate():
    """Validate JSON entries against JSON recharges.

    ``recharges`` may be null or omitted, meaning no recharge data was loaded.
    """
    payload = _json_body()
    entries = entries_from_dicts(_list_field(payload, "entries"))
    raw_recharges = _list_field(payload, "recharges", required=False)
    recharges = recharges_from_dicts(raw_recharges) if raw_recharges is not None else None

    result = _run(entries, recharges)
    return jsonify(result.to_dict())


@validation_bp.route("/validate/csv", methods=["POST"])
def validate_csv():
    """Validate sheet exports and return the verdicts as a CSV download."""
    payload = _json_body()
    entries_csv = payload.get("entries_csv")
    if not isinstance(entries_csv, str):
        raise RecordParseError("'entries_csv' must be a string")
    recharges_csv = payload.get("recharges_csv")

    recharges = parse_recharges_csv(recharges_csv) if isinstance(recharges_csv, str) else None
    result = _run(parse_entries_csv(entries_csv), recharges)

    return Response(
        "\ufeff" + write_verdicts_csv(result.verdicts),
        mimetype="text/csv; charset=utf-8",
        headers={"Content-Disposition": "attachment; filename=ticket_validation.csv"},
    )


@validation_bp.route("/reasons")
def reasons():
    return jsonify({code.value: text for code, text in REASON_DESCRIPTIONS.items()})


@validation_bp.route("/engagement", methods=["POST"])
def engagement():
    payload = _json_body()
    entries = entries_from_dicts(_list_field(payload, "entries"))
    recharges = recharges_from_dicts(_list_field(payload, "recharges"))

    days = payload.get("days", 7)
    if not isinstance(days, int) or not 1 <= days <= 90:
        raise RecordParseError("'days' must be an integer between 1 and 90")
    today = None
    if payload.get("today"):
        try:
            today = date.fromisoformat(str(payload["today"]))
        except ValueError:
            raise RecordParseError("'today' must be an ISO date") from None

    return jsonify({
        "overall": analyze_engagement(entries, recharges).to_dict(),
        "daily": [d.to_dict() for d in analyze_engagement_by_date(entries, recharges, days, today)],
    })
