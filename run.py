#!/usr/bin/env python3
"""
Burbli - Main Entry Point

Uses the application factory pattern via burbli.create_app().

Usage:
    python run.py

Environment Variables:
    FLASK_ENV: development (default), production, testing
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (optional)
    BURBLI_CONFIG: Path to config.yaml (optional)
    GOOGLE_MAPS_API_KEY: Enables suburb autocomplete
    PORT: Port to listen on (default 5000)
"""

import os
import sys
from pathlib import Path

APP_DIR = Path(__file__).parent

# Load environment variables from .env file
from dotenv import load_dotenv

load_dotenv(APP_DIR / ".env")

# Initialize logging first
from burbli.logging_config import setup_logging, get_logger

# Setup logging based on environment
flask_env = os.environ.get("FLASK_ENV", "development")
log_level = os.environ.get("LOG_LEVEL")
json_logs = flask_env == "production"

setup_logging(level=log_level, json_logs=json_logs)
logger = get_logger(__name__)


def main():
    """Main entry point for Burbli."""

    logger.info("=" * 60)
    logger.info("Burbli - Starting Up")
    logger.info("=" * 60)

    # Run startup validation
    from burbli.startup import run_startup_validation
    from burbli.config import get_config

    logger.info("Running startup validation...")
    validation_passed, results = run_startup_validation(
        strict=False, log_results=True  # Allow warnings in development
    )

    if not validation_passed:
        logger.error("Startup validation failed. Please fix the errors above.")
        sys.exit(1)

    # Create the Flask app using factory
    from burbli import create_app

    app = create_app()
    config = get_config()
    port = int(os.environ.get("PORT", 5000))

    logger.info("")
    logger.info("=" * 60)
    logger.info(f"  {config.site_name}")
    logger.info("=" * 60)
    logger.info(f"  Environment: {flask_env}")
    logger.info(f"  Configuration: {config.config_path}")
    logger.info(f"  Database: {app.config['DATABASE']}")
    logger.info(f"  Autocomplete: {'enabled' if config.places_api_key else 'disabled'}")
    logger.info("")
    logger.info(f"  Feed: http://localhost:{port}/api/jobs")
    logger.info(f"  Health Check: http://localhost:{port}/api/health")
    logger.info("=" * 60)
    logger.info("")

    # Run Flask app
    debug_mode = flask_env != "production"
    app.run(debug=debug_mode, host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
