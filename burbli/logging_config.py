"""
Logging setup for Burbli.

Development gets coloured one-line console output; production gets JSON
lines on the console and in a rotating file under logs/. Log records
emitted while a request is being handled carry the request's method,
path and user id, and every API request is logged once on completion.
"""

import json
import logging
import logging.handlers
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from flask import g, has_request_context, request

LOGS_DIR = Path(__file__).parent.parent / "logs"

LOG_LEVELS = {
    "development": logging.DEBUG,
    "production": logging.INFO,
    "testing": logging.WARNING,
}

# Third-party loggers that are too chatty below WARNING
QUIET_LOGGERS = ["urllib3", "requests", "werkzeug"]

# Requests not worth a log line each
UNLOGGED_PATHS = {"/api/health"}


def _request_fields() -> Dict[str, Any]:
    """Method, path and user of the current request, or {} outside one."""
    if not has_request_context():
        return {}
    fields = {"method": request.method, "path": request.path}
    user_id = request.headers.get("X-User-Id")
    if user_id:
        fields["user_id"] = user_id
    return fields


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shipping."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }

        request_fields = _request_fields()
        if request_fields:
            entry["request"] = request_fields

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_data"):
            entry["data"] = record.extra_data

        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored console formatter for development."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"
    MAX_MESSAGE = 500

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        message = record.getMessage()
        if len(message) > self.MAX_MESSAGE:
            message = message[: self.MAX_MESSAGE] + "..."

        line = f"{color}[{timestamp}] {record.levelname:8}{self.RESET} {record.name}: {message}"
        if hasattr(record, "extra_data"):
            line += f" {record.extra_data}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: Optional[str] = None,
    json_logs: bool = False,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        level: Log level name; defaults to the level for FLASK_ENV
        json_logs: Use JSON on the console instead of coloured lines
        log_file: Write JSON logs to this file (production defaults to logs/app.log)

    Returns:
        The root logger
    """
    env = os.environ.get("FLASK_ENV", "development")
    if level:
        log_level = getattr(logging, level.upper(), logging.INFO)
    else:
        log_level = LOG_LEVELS.get(env, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(JSONFormatter() if json_logs else ConsoleFormatter())
    root_logger.addHandler(console_handler)

    if log_file is None and env == "production":
        LOGS_DIR.mkdir(exist_ok=True)
        log_file = str(LOGS_DIR / "app.log")

    if log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module (pass __name__)."""
    return logging.getLogger(name)


def log_extra(**data) -> Dict[str, Any]:
    """
    Structured data for a single log call, shown by both formatters.

    Example:
        logger.debug("Feed filtered", extra=log_extra(criteria=asdict(criteria)))
    """
    return {"extra_data": data}


def init_request_logging(app) -> None:
    """
    Log one line per API request with its status and duration.

    Args:
        app: Flask application
    """
    request_logger = get_logger("burbli.requests")

    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        if request.path in UNLOGGED_PATHS:
            return response

        started = g.pop("request_started", None)
        duration_ms = round((time.perf_counter() - started) * 1000, 1) if started else None

        log = request_logger.warning if response.status_code >= 500 else request_logger.info
        log(f"{request.method} {request.path} {response.status_code} ({duration_ms} ms)")
        return response
