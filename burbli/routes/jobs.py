"""
Jobs Routes Blueprint - Manage your own posts

Create, update and delete jobs posted by the signed-in user. Sign-in is
handled upstream; the user id arrives in the X-User-Id header and is
passed explicitly to every database call.
"""

import sqlite3
import logging
from functools import wraps
from flask import Blueprint, jsonify, request

from burbli.database import create_job, delete_job, get_db, list_jobs_for_owner, update_job
from burbli.routes.feed import job_to_dict
from burbli.validation import ValidationError, validate_job_draft

logger = logging.getLogger(__name__)

jobs_bp = Blueprint("jobs", __name__)

USER_HEADER = "X-User-Id"


def require_user(view):
    """Pass the signed-in user id to the view as owner_id, or return 401."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        owner_id = (request.headers.get(USER_HEADER) or "").strip()
        if not owner_id:
            return jsonify({"error": "Sign in required"}), 401
        return view(*args, owner_id=owner_id, **kwargs)

    return wrapper


@jobs_bp.route("/api/my-jobs")
@require_user
def get_my_jobs(owner_id):
    """
    List the signed-in user's posts, newest first.

    Route: GET /api/my-jobs
    """
    try:
        jobs = list_jobs_for_owner(get_db(), owner_id)
    except sqlite3.Error as e:
        logger.error(f"❌ Error in /api/my-jobs: {e}")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"jobs": [job_to_dict(job) for job in jobs]})


@jobs_bp.route("/api/jobs", methods=["POST"])
@require_user
def post_job(owner_id):
    """
    Post a new job.

    Route: POST /api/jobs

    Request Body (JSON):
        title, business_name, suburb, state, postcode (required)
        recommend: "yes", "no" or "unspecified"
        cost_type: "exact", "range" or "hidden"
        cost_exact / cost_min / cost_max: Amounts in dollars
        notes, completed_at (optional)

    Returns:
        201 with the created job, or 400 with per-field errors
    """
    try:
        draft = validate_job_draft(request.get_json(silent=True) or {})
        job = create_job(get_db(), owner_id, draft)
    except ValidationError as e:
        return jsonify({"error": "Invalid job", "fields": e.errors}), 400
    except sqlite3.Error as e:
        logger.error(f"❌ Error creating job: {e}")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify(job_to_dict(job)), 201


@jobs_bp.route("/api/jobs/<job_id>", methods=["PATCH"])
@require_user
def patch_job(job_id, owner_id):
    """
    Replace the fields of one of your posts.

    Route: PATCH /api/jobs/<job_id>

    Returns:
        The updated job, 400 with per-field errors, or 404 if the job does
        not exist or belongs to someone else
    """
    try:
        draft = validate_job_draft(request.get_json(silent=True) or {})
        job = update_job(get_db(), job_id, owner_id, draft)
    except ValidationError as e:
        return jsonify({"error": "Invalid job", "fields": e.errors}), 400
    except sqlite3.Error as e:
        logger.error(f"❌ Error updating job {job_id}: {e}")
        return jsonify({"error": "Internal server error"}), 500

    if job is None:
        return jsonify({"error": "Job not found"}), 404
    return jsonify(job_to_dict(job))


@jobs_bp.route("/api/jobs/<job_id>", methods=["DELETE"])
@require_user
def remove_job(job_id, owner_id):
    """
    Delete one of your posts.

    Route: DELETE /api/jobs/<job_id>
    """
    try:
        deleted = delete_job(get_db(), job_id, owner_id)
    except sqlite3.Error as e:
        logger.error(f"❌ Error deleting job {job_id}: {e}")
        return jsonify({"error": "Internal server error"}), 500

    if not deleted:
        return jsonify({"error": "Job not found"}), 404
    return jsonify({"success": True})
