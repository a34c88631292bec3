"""
Startup checks and health reporting for Burbli.

Each check returns a list of ValidationResult. run_startup_validation()
runs them all, logs a report and decides whether the server may start.
get_health_status() backs the /api/health endpoint.
"""

import os
import sqlite3
import importlib.util
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
from datetime import datetime, timezone

from burbli.logging_config import LOG_LEVELS, get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]

# (import name, distribution name, purpose)
REQUIRED_PACKAGES = [
    ("flask", "flask", "web framework"),
    ("flask_cors", "flask-cors", "CORS headers for the front end"),
    ("yaml", "PyYAML", "config.yaml parsing"),
    ("requests", "requests", "places API client"),
    ("dotenv", "python-dotenv", ".env loading"),
]

# Columns the feed reads; older databases get the last two from migrations
JOB_COLUMNS = {
    "id", "owner_id", "title", "business_name", "suburb", "state", "postcode",
    "recommend", "cost_type", "cost_exact", "cost_min", "cost_max", "notes",
    "created_at", "completed_at", "is_approved",
}


class ValidationResult:
    """Result of a validation check."""

    def __init__(
        self,
        name: str,
        passed: bool,
        message: str,
        severity: str = "error",  # error, warning, info
        fix_hint: Optional[str] = None,
    ):
        self.name = name
        self.passed = passed
        self.message = message
        self.severity = severity
        self.fix_hint = fix_hint

    def blocks_startup(self, strict: bool = False) -> bool:
        """Whether this result should stop the server from starting."""
        if self.passed:
            return False
        return self.severity == "error" or (strict and self.severity == "warning")

    def __str__(self) -> str:
        status = "PASS" if self.passed else self.severity.upper()
        return f"[{status}] {self.name}: {self.message}"


def validate_environment() -> List[ValidationResult]:
    """Check the environment variables Burbli reads."""
    results = []

    # Autocomplete is optional; posting and browsing work without it
    if os.environ.get("GOOGLE_MAPS_API_KEY"):
        results.append(ValidationResult(
            "Places API key", True, "GOOGLE_MAPS_API_KEY configured", severity="info"
        ))
    else:
        results.append(ValidationResult(
            "Places API key",
            False,
            "GOOGLE_MAPS_API_KEY not set; suburb autocomplete disabled",
            severity="warning",
            fix_hint="Set GOOGLE_MAPS_API_KEY in your .env file",
        ))

    flask_env = os.environ.get("FLASK_ENV", "development")
    if flask_env in LOG_LEVELS:
        results.append(ValidationResult(
            "Flask Environment", True, f"Running in {flask_env} mode", severity="info"
        ))
    else:
        results.append(ValidationResult(
            "Flask Environment",
            False,
            f"Unknown FLASK_ENV '{flask_env}'; using INFO logging",
            severity="warning",
            fix_hint=f"Use one of: {', '.join(LOG_LEVELS)}",
        ))

    return results


def validate_configuration(config_path: Optional[PathLike] = None) -> List[ValidationResult]:
    """Check that config.yaml loads and that the database directory exists."""
    from burbli.config import Config

    try:
        config = Config(config_path)
    except FileNotFoundError as e:
        return [ValidationResult(
            "Configuration",
            False,
            str(e).splitlines()[0],
            fix_hint="Copy config.example.yaml to config.yaml",
        )]
    except ValueError as e:
        return [ValidationResult("Configuration", False, str(e))]

    results = [ValidationResult(
        "Configuration", True, f"Loaded {config.config_path} for {config.site_name}", severity="info"
    )]

    db_dir = config.database_path.parent
    if not db_dir.is_dir():
        results.append(ValidationResult(
            "Database directory",
            False,
            f"{db_dir} does not exist",
            fix_hint="Create the directory or change database.path in config.yaml",
        ))

    return results


def validate_database(db_path: Optional[PathLike] = None) -> List[ValidationResult]:
    """Initialise the database and confirm the jobs table has every column."""
    from burbli.database import init_db, resolve_db_path

    try:
        init_db(db_path)
        # Private connection; the request-scoped one on flask.g stays open
        conn = sqlite3.connect(resolve_db_path(db_path), timeout=30.0)
        try:
            columns = {row[1] for row in conn.execute("PRAGMA table_info(jobs)").fetchall()}
            job_count = conn.execute("SELECT COUNT(*) FROM jobs").fetchone()[0] if columns else 0
        finally:
            conn.close()
    except sqlite3.Error as e:
        return [ValidationResult(
            "Database",
            False,
            f"Database error: {e}",
            fix_hint="Check database file permissions and integrity",
        )]

    missing = JOB_COLUMNS - columns
    if missing:
        return [ValidationResult(
            "Database", False, f"Table 'jobs' is missing columns: {', '.join(sorted(missing))}"
        )]

    return [ValidationResult("Database", True, f"Table 'jobs' ready ({job_count} jobs)", severity="info")]


def validate_dependencies() -> List[ValidationResult]:
    """Check that every required package can be imported."""
    results = []

    for module, distribution, purpose in REQUIRED_PACKAGES:
        if importlib.util.find_spec(module) is not None:
            results.append(ValidationResult(
                f"Package: {distribution}", True, f"available ({purpose})", severity="info"
            ))
        else:
            results.append(ValidationResult(
                f"Package: {distribution}",
                False,
                f"not installed ({purpose})",
                fix_hint=f"Run: pip install {distribution}",
            ))

    return results


def _log_report(results: List[ValidationResult]) -> None:
    logger.info("=" * 60)
    logger.info("STARTUP VALIDATION RESULTS")
    logger.info("=" * 60)

    for result in results:
        if result.passed or result.severity == "info":
            logger.info(str(result))
            continue

        log = logger.error if result.severity == "error" else logger.warning
        log(str(result))
        if result.fix_hint:
            log(f"  Hint: {result.fix_hint}")

    logger.info("=" * 60)


def run_startup_validation(
    strict: bool = False,
    log_results: bool = True,
    config_path: Optional[PathLike] = None,
    db_path: Optional[PathLike] = None,
) -> Tuple[bool, List[ValidationResult]]:
    """
    Run all startup validations.

    Args:
        strict: If True, treat warnings as errors
        log_results: If True, log validation results
        config_path: Config file to check (defaults to the usual lookup)
        db_path: Database file to initialise and check (defaults to the configured path)

    Returns:
        Tuple of (all_passed, results)
    """
    from burbli.config import Config

    config_results = validate_configuration(config_path)
    if db_path is None and config_results[0].passed:
        db_path = Config(config_path).database_path

    results = [
        *validate_environment(),
        *config_results,
        *validate_database(db_path),
        *validate_dependencies(),
    ]

    if log_results:
        _log_report(results)

    blocking = [r for r in results if r.blocks_startup(strict)]
    if blocking:
        mode = " (strict mode)" if strict else ""
        logger.error(f"Startup validation failed with {len(blocking)} problem(s){mode}")
        return False, results

    logger.info("Startup validation passed")
    return True, results


def get_health_status(conn: sqlite3.Connection) -> Dict:
    """
    Health report for the /api/health endpoint.

    Args:
        conn: Open database connection

    Returns:
        Dict with an overall status, a timestamp and one entry per check
    """
    status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "checks": {},
    }

    try:
        job_count, visible = conn.execute(
            "SELECT COUNT(*), COALESCE(SUM(is_approved = 1), 0) FROM jobs"
        ).fetchone()
        status["checks"]["database"] = {
            "status": "healthy",
            "job_count": job_count,
            "visible_count": visible,
        }
    except sqlite3.Error as e:
        logger.error(f"Health check could not query the database: {e}")
        status["status"] = "unhealthy"
        status["checks"]["database"] = {"status": "unhealthy", "error": str(e)}

    status["checks"]["places"] = {
        "status": "healthy" if os.environ.get("GOOGLE_MAPS_API_KEY") else "disabled",
    }

    return status
