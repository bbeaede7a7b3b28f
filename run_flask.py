"""Direct Flask server runner using environment variables."""

from __future__ import annotations

from config import load_config
from core import setup_logger
from web import create_app

if __name__ == "__main__":
    # Load configuration
    config = load_config()
    setup_logger(name="", level=config.log_level, log_file=config.log_file)

    # Create Flask application
    app = create_app(config)

    # Run Flask server
    app.run(host=config.web_host, port=config.web_port, debug=config.debug)
