"""
Main Routes Blueprint - Health check and sitemap
"""

import logging
from datetime import datetime, timezone
from xml.sax.saxutils import escape

from flask import Blueprint, Response, current_app, jsonify

from burbli.database import get_db
from burbli.startup import get_health_status

logger = logging.getLogger(__name__)

main_bp = Blueprint("main", __name__)


@main_bp.route("/api/health")
def health():
    """
    Health check.

    Route: GET /api/health

    Returns:
        Health status JSON; 503 when the database is unavailable
    """
    status = get_health_status(get_db())
    code = 200 if status["status"] == "healthy" else 503
    return jsonify(status), code


@main_bp.route("/sitemap.xml")
def sitemap():
    """
    Sitemap of the public pages under the configured base URL.

    Route: GET /sitemap.xml
    """
    config = current_app.config["BURBLI_CONFIG"]
    lastmod = datetime.now(timezone.utc).date().isoformat()

    entries = []
    for path in config.page_routes:
        priority = "1.0" if path == "/" else "0.6"
        entries.append(
            "  <url>\n"
            f"    <loc>{escape(config.base_url + path)}</loc>\n"
            f"    <lastmod>{lastmod}</lastmod>\n"
            "    <changefreq>weekly</changefreq>\n"
            f"    <priority>{priority}</priority>\n"
            "  </url>"
        )

    body = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        + "\n".join(entries)
        + "\n</urlset>\n"
    )
    return Response(body, mimetype="application/xml")
