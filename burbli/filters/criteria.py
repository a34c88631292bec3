"""
Filter criteria <-> query string

The feed keeps its filters in the URL so views can be shared and
bookmarked. These helpers translate between request arguments and
FilterCriteria; the feed filters themselves never see the query string.
"""

import re
import logging
from typing import Any, Dict, Mapping
from urllib.parse import urlencode

from burbli.constants import ALL, REGIONS
from burbli.models import FilterCriteria, coerce_amount

logger = logging.getLogger(__name__)

# Query string parameter names
PARAM_QUERY = 'q'
PARAM_REGION = 'region'
PARAM_RECOMMENDED = 'recommended'
PARAM_COST_MIN = 'cost_min'
PARAM_COST_MAX = 'cost_max'
PARAM_YEAR = 'year'

TRUTHY = {'1', 'true', 'yes', 'on'}

YEAR_PATTERN = re.compile(r'^\d{4}$')


def _clean_region(value: Any) -> str:
    region = str(value or '').strip().upper()
    return region if region in REGIONS else ALL


def _clean_year(value: Any) -> str:
    year = str(value or '').strip()
    return year if YEAR_PATTERN.match(year) else ALL


def decode_criteria(params: Mapping[str, Any]) -> FilterCriteria:
    """
    Build FilterCriteria from query string arguments.

    Unknown or malformed values fall back to "no filter" rather than
    raising, so a hand-edited URL still renders the feed.

    Args:
        params: Mapping such as flask.request.args

    Returns:
        FilterCriteria
    """
    text_query = ' '.join(str(params.get(PARAM_QUERY) or '').split())
    recommended = str(params.get(PARAM_RECOMMENDED) or '').strip().lower()

    return FilterCriteria(
        text_query=text_query,
        region=_clean_region(params.get(PARAM_REGION)),
        recommended_only=recommended in TRUTHY,
        cost_min=coerce_amount(params.get(PARAM_COST_MIN)),
        cost_max=coerce_amount(params.get(PARAM_COST_MAX)),
        completed_year=_clean_year(params.get(PARAM_YEAR)),
    )


def _format_amount(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def encode_criteria(criteria: FilterCriteria) -> Dict[str, str]:
    """
    Query string arguments for the given criteria, omitting defaults.

    Returns:
        Dict of parameter name to string value
    """
    params: Dict[str, str] = {}

    text_query = ' '.join((criteria.text_query or '').split())
    if text_query:
        params[PARAM_QUERY] = text_query
    if criteria.region != ALL:
        params[PARAM_REGION] = criteria.region
    if criteria.recommended_only:
        params[PARAM_RECOMMENDED] = '1'

    cost_min = coerce_amount(criteria.cost_min)
    if cost_min is not None:
        params[PARAM_COST_MIN] = _format_amount(cost_min)
    cost_max = coerce_amount(criteria.cost_max)
    if cost_max is not None:
        params[PARAM_COST_MAX] = _format_amount(cost_max)

    if criteria.completed_year != ALL:
        params[PARAM_YEAR] = str(criteria.completed_year)

    return params


def criteria_to_query_string(criteria: FilterCriteria) -> str:
    """URL-encoded query string for the criteria ('' when nothing is set)."""
    return urlencode(encode_criteria(criteria))
