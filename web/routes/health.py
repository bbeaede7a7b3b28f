"""Health check blueprint."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify


health_bp = Blueprint("health", __name__)


@health_bp.route("/health")
def health_check():
    calendar = current_app.extensions["draw_calendar"]
    config = current_app.config["VALIDATOR_CONFIG"]

    data = {
        "status": "ok",
        "environment": config.environment,
        "calendar": {
            "holidays": [f"{m:02d}-{d:02d}" for m, d in sorted(calendar.holidays)],
            "early_cutoff_dates": [f"{m:02d}-{d:02d}" for m, d in sorted(calendar.early_cutoff_dates)],
            "default_cutoff": calendar.default_cutoff.strftime("%H:%M"),
            "early_cutoff": calendar.early_cutoff.strftime("%H:%M"),
            "no_draw_weekdays": sorted(calendar.no_draw_weekdays),
            "probe_limit": calendar.probe_limit,
        },
    }
    return jsonify(data)
