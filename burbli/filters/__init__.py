"""
Feed Filters Package - Filtering and cost normalisation for the job feed

- Cost filter: derive comparable cost ranges and display strings
- Feed filter: apply the browse filters and compute feed facets
- Criteria: translate filter criteria to and from the URL query string
"""

from .cost_filter import (
    CostRange,
    cost_overlaps,
    derive_cost_range,
    display_cost,
    format_aud,
)
from .feed_filter import (
    FeedView,
    active_filter_summary,
    apply_filters,
    available_years,
    build_feed,
    build_search_blob,
    tokenize,
)
from .criteria import (
    criteria_to_query_string,
    decode_criteria,
    encode_criteria,
)

__all__ = [
    # Cost filter
    'CostRange',
    'cost_overlaps',
    'derive_cost_range',
    'display_cost',
    'format_aud',
    # Feed filter
    'FeedView',
    'active_filter_summary',
    'apply_filters',
    'available_years',
    'build_feed',
    'build_search_blob',
    'tokenize',
    # Criteria
    'criteria_to_query_string',
    'decode_criteria',
    'encode_criteria',
]
