"""
Burbli - Application Factory

Community listings of local home-improvement jobs: what was done,
who did it, roughly what it cost, and whether they'd use them again.
"""

import logging
from flask import Flask
from flask_cors import CORS

from burbli.config import get_config
from burbli.database import close_db, init_db
from burbli.logging_config import init_request_logging

logger = logging.getLogger(__name__)


def create_app(config_path=None, db_path=None):
    """
    Application factory for creating Flask app instances.

    Args:
        config_path: Optional path to config.yaml file
        db_path: Optional database path overriding the config

    Returns:
        Configured Flask application instance
    """
    from dotenv import load_dotenv

    load_dotenv()

    try:
        config = get_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Configuration Error: {e}")
        raise

    # Autocomplete degrades to a 500 from /api/places; everything else works
    if not config.places_api_key:
        logger.warning("GOOGLE_MAPS_API_KEY not set; suburb autocomplete disabled")

    app = Flask(__name__)
    CORS(app)

    app.config["BURBLI_CONFIG"] = config
    app.config["DATABASE"] = str(db_path or config.database_path)
    app.json.sort_keys = False

    # One connection per request, closed on teardown
    init_db(app.config["DATABASE"])
    app.teardown_appcontext(close_db)

    init_request_logging(app)
    register_blueprints(app)

    logger.info(f"{config.site_name} app created (database: {app.config['DATABASE']})")
    return app


def register_blueprints(app):
    """Register all Flask blueprints."""
    from burbli.routes import register_all_blueprints

    register_all_blueprints(app)
