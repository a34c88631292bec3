"""
Feed Routes Blueprint - Browse and filter posted jobs

The filter state lives in the query string, so any filtered view of the
feed is a shareable URL.
"""

import logging
from dataclasses import asdict
from flask import Blueprint, jsonify, request

from burbli.database import fetch_all_jobs, get_db, get_job
from burbli.filters import build_feed, criteria_to_query_string, decode_criteria
from burbli.filters.cost_filter import derive_cost_range, display_cost
from burbli.logging_config import log_extra
from burbli.models import ExactCost, JobRecord, RangeCost

logger = logging.getLogger(__name__)

feed_bp = Blueprint("feed", __name__)


def _cost_type(job: JobRecord) -> str:
    if isinstance(job.cost, ExactCost):
        return "exact"
    if isinstance(job.cost, RangeCost):
        return "range"
    return "hidden"


def job_to_dict(job: JobRecord) -> dict:
    """Serialize a job for the API, including its derived cost fields."""
    cost_range = derive_cost_range(job)
    return {
        "id": job.id,
        "title": job.title,
        "business_name": job.business_name,
        "suburb": job.suburb,
        "state": job.region,
        "postcode": job.postcode,
        "recommend": job.recommend.value,
        "cost_type": _cost_type(job),
        "cost_min": cost_range.min,
        "cost_max": cost_range.max,
        "cost_display": display_cost(job),
        "notes": job.notes,
        "completed_at": job.completed_at.isoformat() if job.completed_at else None,
        "created_at": job.created_at.isoformat() if job.created_at else None,
    }


@feed_bp.route("/api/jobs")
def get_feed():
    """
    Retrieve the job feed with filters applied.

    Route: GET /api/jobs

    Query Parameters:
        q (str, optional): Search words; every word must match
        region (str, optional): State code (VIC, NSW, ...)
        recommended (bool, optional): Only recommended jobs
        cost_min (number, optional): Lowest cost of interest, in dollars
        cost_max (number, optional): Highest cost of interest, in dollars
        year (str, optional): Year the job was completed

    Returns:
        JSON response with:
        - jobs: Matching jobs, newest first
        - total: Number of jobs before filtering
        - count: Number of matching jobs
        - available_years: Completion years on record, newest first
        - active_filters: Labels describing each active filter
        - query: Canonical query string for the active filters

    Examples:
        GET /api/jobs?q=epping+vic&recommended=1
        GET /api/jobs?cost_min=1000&cost_max=5000&year=2023
    """
    criteria = decode_criteria(request.args)
    records = fetch_all_jobs(get_db())
    feed = build_feed(records, criteria)

    logger.debug(
        f"Feed request matched {len(feed.jobs)} of {feed.total} jobs",
        extra=log_extra(criteria=asdict(criteria)),
    )

    return jsonify({
        "jobs": [job_to_dict(job) for job in feed.jobs],
        "total": feed.total,
        "count": len(feed.jobs),
        "available_years": feed.available_years,
        "active_filters": feed.active_filters,
        "query": criteria_to_query_string(criteria),
    })


@feed_bp.route("/api/jobs/<job_id>")
def get_feed_job(job_id):
    """
    Retrieve a single job.

    Route: GET /api/jobs/<job_id>

    Returns:
        JSON job, or 404 if it does not exist
    """
    job = get_job(get_db(), job_id)
    if job is None:
        return jsonify({"error": "Job not found"}), 404
    return jsonify(job_to_dict(job))
