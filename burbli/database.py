"""
Database - Job record store for Burbli

This module handles database initialization, connection management,
migrations and the job queries used by the feed and the submission
flows. Rows are converted to JobRecord snapshots on the way out.
"""

import sqlite3
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from flask import current_app, g

from burbli.constants import DEFAULT_DB_PATH
from burbli.models import (
    ExactCost,
    JobRecord,
    RangeCost,
    coerce_amount,
    job_from_row,
    recommendation_to_stored,
)
from burbli.validation import JobDraft

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def resolve_db_path(db_path: Optional[PathLike]) -> Path:
    if db_path is not None:
        return Path(db_path)
    try:
        return Path(current_app.config.get("DATABASE", DEFAULT_DB_PATH))
    except RuntimeError:
        # Outside an application context
        return DEFAULT_DB_PATH


def init_db(db_path: Optional[PathLike] = None):
    """
    Initialize SQLite database with the jobs table.

    Uses WAL (Write-Ahead Logging) mode for better concurrency.

    Args:
        db_path: Database file (defaults to the app's DATABASE setting)
    """
    path = resolve_db_path(db_path)
    conn = sqlite3.connect(path, timeout=30.0)

    try:
        # Enable WAL mode for better concurrency
        conn.execute("PRAGMA journal_mode=WAL")

        conn.execute("""
            CREATE TABLE IF NOT EXISTS jobs (
                id TEXT PRIMARY KEY,
                owner_id TEXT,
                title TEXT,
                business_name TEXT,
                suburb TEXT NOT NULL,
                state TEXT NOT NULL,
                postcode TEXT,
                recommend INTEGER,
                cost_type TEXT DEFAULT 'hidden',
                cost_exact REAL,
                cost_min REAL,
                cost_max REAL,
                notes TEXT,
                created_at TEXT,
                updated_at TEXT
            )
        """)

        conn.execute("CREATE INDEX IF NOT EXISTS idx_jobs_created_at ON jobs (created_at)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_jobs_owner_id ON jobs (owner_id)")

        run_migrations(conn)
        conn.commit()
    finally:
        conn.close()

    logger.info(f"Database ready at {path}")


def run_migrations(conn):
    """
    Run database migrations to add new columns as needed.

    Uses PRAGMA table_info() to check for missing columns and adds them
    with ALTER TABLE.

    Args:
        conn: SQLite connection
    """
    jobs_columns = {row[1] for row in conn.execute("PRAGMA table_info(jobs)").fetchall()}

    # Migration: Add completed_at column for the completion year filter
    if "completed_at" not in jobs_columns:
        logger.info("Migrating database: adding 'completed_at' column to jobs...")
        conn.execute("ALTER TABLE jobs ADD COLUMN completed_at TEXT")

    # Migration: Add moderation flag; existing posts stay visible
    if "is_approved" not in jobs_columns:
        logger.info("Migrating database: adding 'is_approved' column to jobs...")
        conn.execute("ALTER TABLE jobs ADD COLUMN is_approved INTEGER DEFAULT 1")


def get_db(db_path: Optional[PathLike] = None) -> sqlite3.Connection:
    """
    Create and return a database connection with Row factory.

    Inside a request the connection is cached on flask.g and closed by
    close_db() at teardown. Outside a request the caller owns it.

    Returns:
        sqlite3.Connection: Database connection with Row factory enabled

    Examples:
        >>> conn = get_db()
        >>> row = conn.execute("SELECT * FROM jobs WHERE id = ?", (job_id,)).fetchone()
        >>> print(row['title'])  # Access by column name
    """
    def connect():
        conn = sqlite3.connect(resolve_db_path(db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        return conn

    try:
        if "db" not in g:
            g.db = connect()
        return g.db
    except RuntimeError:
        # Outside an application context
        return connect()


def close_db(e=None):
    """Close database connection if it exists in flask g."""
    db = g.pop("db", None)
    if db is not None:
        db.close()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _cost_columns(draft: JobDraft) -> dict:
    cost = draft.cost
    if isinstance(cost, ExactCost):
        return {"cost_type": "exact", "cost_exact": coerce_amount(cost.amount),
                "cost_min": None, "cost_max": None}
    if isinstance(cost, RangeCost):
        return {"cost_type": "range", "cost_exact": None,
                "cost_min": coerce_amount(cost.min), "cost_max": coerce_amount(cost.max)}
    return {"cost_type": "hidden", "cost_exact": None, "cost_min": None, "cost_max": None}


def _draft_columns(draft: JobDraft) -> dict:
    columns = {
        "title": draft.title,
        "business_name": draft.business_name,
        "suburb": draft.suburb,
        "state": draft.state,
        "postcode": draft.postcode,
        "recommend": recommendation_to_stored(draft.recommend),
        "notes": draft.notes,
        "completed_at": draft.completed_at.isoformat() if draft.completed_at else None,
    }
    columns.update(_cost_columns(draft))
    return columns


def fetch_all_jobs(conn: sqlite3.Connection) -> List[JobRecord]:
    """
    Fetch every approved job, newest first.

    A store failure is logged and reported as an empty feed so the browse
    page still renders.

    Returns:
        List of JobRecord
    """
    try:
        rows = conn.execute(
            "SELECT * FROM jobs WHERE is_approved = 1 ORDER BY created_at DESC"
        ).fetchall()
    except sqlite3.Error as e:
        logger.error(f"❌ Could not load jobs for the feed: {e}")
        return []

    return [job_from_row(row) for row in rows]


def get_job(conn: sqlite3.Connection, job_id: str) -> Optional[JobRecord]:
    """Fetch a single job by id, or None if it does not exist."""
    row = conn.execute("SELECT * FROM jobs WHERE id = ?", (job_id,)).fetchone()
    return job_from_row(row) if row else None


def list_jobs_for_owner(conn: sqlite3.Connection, owner_id: str) -> List[JobRecord]:
    """Jobs posted by one user, newest first."""
    rows = conn.execute(
        "SELECT * FROM jobs WHERE owner_id = ? ORDER BY created_at DESC", (owner_id,)
    ).fetchall()
    return [job_from_row(row) for row in rows]


def create_job(conn: sqlite3.Connection, owner_id: str, draft: JobDraft) -> JobRecord:
    """
    Insert a new job for the given owner.

    Args:
        conn: SQLite connection
        owner_id: Signed-in user posting the job
        draft: Validated submission

    Returns:
        The stored JobRecord
    """
    job_id = uuid.uuid4().hex
    now = _now()

    columns = _draft_columns(draft)
    columns.update({
        "id": job_id,
        "owner_id": owner_id,
        "created_at": now,
        "updated_at": now,
        "is_approved": 1,
    })

    names = ", ".join(columns)
    placeholders = ", ".join("?" for _ in columns)
    conn.execute(f"INSERT INTO jobs ({names}) VALUES ({placeholders})", list(columns.values()))
    conn.commit()

    logger.info(f"Created job {job_id} for owner {owner_id}")
    return get_job(conn, job_id)


def update_job(
    conn: sqlite3.Connection, job_id: str, owner_id: str, draft: JobDraft
) -> Optional[JobRecord]:
    """
    Replace a job's fields, scoped to its owner.

    Returns:
        The updated JobRecord, or None when no job matches both the id and
        the owner
    """
    columns = _draft_columns(draft)
    columns["updated_at"] = _now()

    assignments = ", ".join(f"{name} = ?" for name in columns)
    cursor = conn.execute(
        f"UPDATE jobs SET {assignments} WHERE id = ? AND owner_id = ?",
        [*columns.values(), job_id, owner_id],
    )
    conn.commit()

    if cursor.rowcount == 0:
        logger.warning(f"Update skipped: job {job_id} not found for owner {owner_id}")
        return None

    logger.info(f"Updated job {job_id}")
    return get_job(conn, job_id)


def delete_job(conn: sqlite3.Connection, job_id: str, owner_id: str) -> bool:
    """Delete a job owned by the given user. Returns True if a row was removed."""
    cursor = conn.execute("DELETE FROM jobs WHERE id = ? AND owner_id = ?", (job_id, owner_id))
    conn.commit()

    deleted = cursor.rowcount > 0
    if deleted:
        logger.info(f"Deleted job {job_id}")
    return deleted
