"""
Routes Package - Flask Blueprints for Burbli

This module registers all Flask blueprints with the application.

Blueprint structure:
- main_bp: Health check and sitemap
- feed_bp: Browse and filter the job feed
- jobs_bp: Create, update and delete your own posts
- places_bp: Suburb autocomplete proxy
"""

import logging

from .feed import feed_bp
from .jobs import jobs_bp
from .main import main_bp
from .places import places_bp

logger = logging.getLogger(__name__)


def register_all_blueprints(app):
    """
    Register all Flask blueprints with the application.

    Args:
        app: Flask application instance
    """
    for blueprint in (main_bp, feed_bp, jobs_bp, places_bp):
        app.register_blueprint(blueprint)
        logger.debug(f"Registered {blueprint.name} blueprint")

    logger.info("Registered API routes")


__all__ = [
    "register_all_blueprints",
    "main_bp",
    "feed_bp",
    "jobs_bp",
    "places_bp",
]
