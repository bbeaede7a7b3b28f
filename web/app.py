"""Flask application factory for the validation API."""

from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from werkzeug.exceptions import HTTPException

from config import Config, load_config
from core.exceptions import CalendarConfigurationError, ValidationError
from web.config_middleware import configure_app, setup_metrics
from web.routes import register_routes


def create_app(config: Optional[Config] = None, testing: bool = False) -> Flask:
    """Create and configure Flask application.

    Args:
        config: Application configuration (loaded from the environment when omitted)
        testing: Whether running in testing mode

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)

    # Configure application
    configure_app(app, config or load_config(), testing)

    # Setup middleware
    setup_metrics(app)

    # Register routes
    register_routes(app)

    # Setup additional handlers
    _setup_routes(app)
    _setup_error_handlers(app)

    return app


def _setup_routes(app: Flask) -> None:
    """Setup basic application routes.

    Args:
        app: Flask application instance
    """
    @app.route('/metrics')
    def metrics():
        """Expose Prometheus metrics."""
        data = generate_latest()
        return data, 200, {'Content-Type': CONTENT_TYPE_LATEST}


def _setup_error_handlers(app: Flask) -> None:
    """Setup JSON error handlers.

    Args:
        app: Flask application instance
    """
    @app.errorhandler(ValidationError)
    def bad_payload(error):
        """Malformed request payloads."""
        return jsonify({"error": str(error)}), 400

    @app.errorhandler(CalendarConfigurationError)
    def calendar_error(error):
        """The draw calendar is broken for the submitted dates; nothing was validated."""
        app.logger.error(f"Calendar configuration error: {error}")
        return jsonify({"error": "calendar_configuration", "detail": str(error)}), 500

    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify({"error": error.name, "detail": error.description}), error.code
