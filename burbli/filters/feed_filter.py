"""
Feed Filter - Multi-criteria filtering for the job feed

Applies the browse filters (text search, region, recommended only, cost
range, completion year) to a list of job records and derives the facets
the feed shows next to the results.

Every function here is pure: records and criteria are never modified and
nothing is cached between calls. Incomplete records are excluded rather
than rejected.
"""

import logging
from dataclasses import dataclass, field
from datetime import timezone
from typing import Iterable, List, Optional

from burbli.constants import ALL
from burbli.filters.cost_filter import cost_overlaps, derive_cost_range, format_aud
from burbli.models import FilterCriteria, JobRecord, Recommendation, coerce_amount, parse_timestamp

logger = logging.getLogger(__name__)


@dataclass
class FeedView:
    """Filtered feed plus the facets computed from the full record set."""
    jobs: List[JobRecord] = field(default_factory=list)
    total: int = 0
    available_years: List[int] = field(default_factory=list)
    active_filters: List[str] = field(default_factory=list)


def tokenize(text_query: Optional[str]) -> List[str]:
    """Split a search query into lowercase whitespace-separated tokens."""
    if not text_query:
        return []
    return text_query.lower().split()


def build_search_blob(job: JobRecord) -> str:
    """
    Build the lowercase text a search query is matched against.

    Besides the individual fields, "suburb region" and
    "suburb region postcode" are included so a query like "epping vic 3076"
    matches as typed.
    """
    suburb = job.suburb or ''
    region = job.region or ''
    postcode = job.postcode or ''

    parts = [
        job.title or '',
        job.business_name or '',
        suburb,
        region,
        postcode,
        f"{suburb} {region}",
        f"{suburb} {region} {postcode}",
    ]
    return ' '.join(parts).lower()


def matches_text(job: JobRecord, tokens: List[str]) -> bool:
    """Every token must appear somewhere in the job's search blob."""
    if not tokens:
        return True
    blob = build_search_blob(job)
    return all(token in blob for token in tokens)


def completed_year(job: JobRecord) -> Optional[int]:
    """Calendar year (UTC) the job was completed, or None if unknown."""
    completed_at = parse_timestamp(job.completed_at)
    if completed_at is None:
        return None
    return completed_at.astimezone(timezone.utc).year


def job_matches(job: JobRecord, criteria: FilterCriteria, tokens: Optional[List[str]] = None) -> bool:
    """
    Check a single job against every active filter.

    Args:
        job: Job record
        criteria: Filter criteria
        tokens: Pre-tokenized text query (tokenized from criteria if omitted)

    Returns:
        True if the job passes all filters
    """
    if tokens is None:
        tokens = tokenize(criteria.text_query)

    if not matches_text(job, tokens):
        return False

    if criteria.recommended_only and job.recommend is not Recommendation.RECOMMENDED:
        return False

    if criteria.region != ALL and job.region != criteria.region:
        return False

    cost_min = coerce_amount(criteria.cost_min)
    cost_max = coerce_amount(criteria.cost_max)
    if cost_min is not None or cost_max is not None:
        if not cost_overlaps(derive_cost_range(job), cost_min, cost_max):
            return False

    if criteria.completed_year != ALL:
        year = completed_year(job)
        if year is None or str(year) != str(criteria.completed_year):
            return False

    return True


def apply_filters(records: Iterable[JobRecord], criteria: FilterCriteria) -> List[JobRecord]:
    """
    Return the records that satisfy the criteria, in their original order.

    Args:
        records: Job records, typically newest first
        criteria: Filter criteria

    Returns:
        New list holding the matching records
    """
    tokens = tokenize(criteria.text_query)
    return [job for job in records if job_matches(job, criteria, tokens)]


def available_years(records: Iterable[JobRecord]) -> List[int]:
    """Distinct completion years across all records, most recent first."""
    years = {completed_year(job) for job in records}
    years.discard(None)
    return sorted(years, reverse=True)


def active_filter_summary(criteria: FilterCriteria) -> List[str]:
    """
    Describe each active filter for display as a chip or caption.

    Returns:
        Labels such as 'Search: "roof"', 'Region: VIC' or 'Cost from $1,000.00'
    """
    labels = []

    tokens = tokenize(criteria.text_query)
    if tokens:
        labels.append(f'Search: "{" ".join(tokens)}"')

    if criteria.region != ALL:
        labels.append(f"Region: {criteria.region}")

    if criteria.recommended_only:
        labels.append("Recommended only")

    cost_min = coerce_amount(criteria.cost_min)
    cost_max = coerce_amount(criteria.cost_max)
    if cost_min is not None and cost_max is not None:
        labels.append(f"Cost: {format_aud(cost_min)}–{format_aud(cost_max)}")
    elif cost_min is not None:
        labels.append(f"Cost from {format_aud(cost_min)}")
    elif cost_max is not None:
        labels.append(f"Cost up to {format_aud(cost_max)}")

    if criteria.completed_year != ALL:
        labels.append(f"Completed: {criteria.completed_year}")

    return labels


def build_feed(records: List[JobRecord], criteria: FilterCriteria) -> FeedView:
    """
    Filter the feed and compute its facets in one pass for the view layer.

    Facets come from the unfiltered records so the year picker always
    offers every year on record.
    """
    jobs = apply_filters(records, criteria)
    logger.debug(f"Feed filtered {len(records)} jobs down to {len(jobs)}")
    return FeedView(
        jobs=jobs,
        total=len(records),
        available_years=available_years(records),
        active_filters=active_filter_summary(criteria),
    )
