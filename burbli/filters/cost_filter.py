"""
Cost Filter - Comparable cost ranges and cost display

Turns a job's tagged cost (exact, range or hidden) into a numeric
interval the feed can compare against, and into the text shown on a
job card.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from burbli.constants import COST_NOT_SHARED
from burbli.models import ExactCost, HiddenCost, JobRecord, RangeCost, coerce_amount

logger = logging.getLogger(__name__)

EN_DASH = '–'


@dataclass(frozen=True)
class CostRange:
    """Derived cost interval. None means the bound is unknown."""
    min: Optional[float] = None
    max: Optional[float] = None

    @property
    def is_unknown(self) -> bool:
        return self.min is None and self.max is None


def format_aud(value: Any) -> str:
    """
    Format an amount as Australian dollars.

    Args:
        value: Amount in whole dollars

    Returns:
        Formatted string like "$3,899.00", or the raw value as text when it
        is not a finite number
    """
    amount = coerce_amount(value)
    if amount is None:
        return str(value)

    sign = '-' if amount < 0 else ''
    return f"{sign}${abs(amount):,.2f}"


def derive_cost_range(job: JobRecord) -> CostRange:
    """
    Derive the comparable [min, max] interval for a job.

    Args:
        job: Job record

    Returns:
        CostRange; both bounds are None for hidden or unusable costs
    """
    cost = job.cost

    if isinstance(cost, ExactCost):
        amount = coerce_amount(cost.amount)
        return CostRange(amount, amount)

    if isinstance(cost, RangeCost):
        return CostRange(coerce_amount(cost.min), coerce_amount(cost.max))

    return CostRange()


def display_cost(job: JobRecord) -> str:
    """
    Human-readable cost for a job card.

    Exact costs show one amount, ranges show the known bounds joined by an
    en dash, and anything else shows the "not shared" message.
    """
    cost = job.cost

    if isinstance(cost, ExactCost):
        return format_aud(cost.amount)

    if isinstance(cost, RangeCost):
        bounds = [coerce_amount(cost.min), coerce_amount(cost.max)]
        present = [format_aud(b) for b in bounds if b is not None]
        if not present:
            return COST_NOT_SHARED
        return EN_DASH.join(present)

    if not isinstance(cost, HiddenCost):
        logger.debug(f"Unrecognised cost on job {job.id}: {cost!r}")
    return COST_NOT_SHARED


def cost_overlaps(
    cost_range: CostRange,
    cost_min: Optional[float] = None,
    cost_max: Optional[float] = None,
) -> bool:
    """
    Check whether a job's cost interval overlaps the requested bounds.

    A job with no known cost never satisfies an active cost filter. A job
    without an upper bound cannot prove it reaches a floor, and one without
    a lower bound cannot prove it sits under a ceiling.

    Args:
        cost_range: Derived interval for the job
        cost_min: Inclusive lower bound requested, or None
        cost_max: Inclusive upper bound requested, or None

    Returns:
        True if the job passes the cost filter
    """
    if cost_min is None and cost_max is None:
        return True

    if cost_range.is_unknown:
        return False

    if cost_min is not None:
        if cost_range.max is None or cost_range.max < cost_min:
            return False

    if cost_max is not None:
        if cost_range.min is None or cost_range.min > cost_max:
            return False

    return True
