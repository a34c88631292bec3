"""
Models - Job records and filter criteria

Immutable value snapshots handed to the feed filters, plus the ingestion
boundary that turns stored rows into them. Cost amounts are whole
Australian dollars everywhere past this module.
"""

import math
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, Union

from burbli.constants import ALL

logger = logging.getLogger(__name__)


class Recommendation(Enum):
    """Whether the poster would use the business again."""
    RECOMMENDED = "recommended"
    NOT_RECOMMENDED = "not_recommended"
    UNSPECIFIED = "unspecified"


@dataclass(frozen=True)
class ExactCost:
    """A single amount paid."""
    amount: Any


@dataclass(frozen=True)
class RangeCost:
    """A price range; either bound may be missing."""
    min: Any = None
    max: Any = None


@dataclass(frozen=True)
class HiddenCost:
    """The poster preferred not to share what they paid."""


Cost = Union[ExactCost, RangeCost, HiddenCost]


@dataclass(frozen=True)
class JobRecord:
    """A posted home-improvement job, as shown in the feed."""
    id: str
    title: str = ''
    business_name: Optional[str] = None
    suburb: str = ''
    region: str = ''
    postcode: str = ''
    recommend: Recommendation = Recommendation.UNSPECIFIED
    cost: Cost = HiddenCost()
    notes: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    owner_id: Optional[str] = None


@dataclass(frozen=True)
class FilterCriteria:
    """Feed filter state. The defaults apply no filtering at all."""
    text_query: str = ''
    region: str = ALL
    recommended_only: bool = False
    cost_min: Optional[float] = None
    cost_max: Optional[float] = None
    completed_year: str = ALL


def coerce_amount(value: Any) -> Optional[float]:
    """
    Coerce a stored or submitted cost value to a finite number.

    Accepts ints, floats and numeric strings such as "3500" or "$3,500".
    Booleans, non-numeric text, NaN and infinities all come back as None.

    Args:
        value: Raw value from the database, a form or a query string

    Returns:
        The amount as a float, or None when it is not usable
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        cleaned = value.replace('$', '').replace(',', '').strip()
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return number


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp into an aware UTC datetime.

    Naive values are taken to be UTC already. Unparseable input gives None.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith('Z') or text.endswith('z'):
            text = text[:-1] + '+00:00'
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def recommendation_from_stored(value: Any) -> Recommendation:
    """Map the stored recommend column (1, 0 or NULL) to the tri-state."""
    if value is True or (type(value) is int and value == 1):
        return Recommendation.RECOMMENDED
    if value is False or (type(value) is int and value == 0):
        return Recommendation.NOT_RECOMMENDED
    return Recommendation.UNSPECIFIED


def recommendation_to_stored(value: Recommendation) -> Optional[int]:
    """Inverse of recommendation_from_stored."""
    if value is Recommendation.RECOMMENDED:
        return 1
    if value is Recommendation.NOT_RECOMMENDED:
        return 0
    return None


def cost_from_stored(row: Mapping[str, Any]) -> Cost:
    """
    Build the tagged cost from the flat cost columns.

    Older rows used "na" or NULL for a hidden cost and kept the exact amount
    in a `cost` or `cost_amount` column; both are tolerated here. An exact
    cost without a usable amount, or a range with neither bound usable, is
    treated as hidden.
    """
    cost_type = (row.get('cost_type') or '').strip().lower()

    if cost_type == 'exact':
        amount = row.get('cost_exact')
        if amount is None:
            amount = row.get('cost_amount', row.get('cost'))
        amount = coerce_amount(amount)
        if amount is None:
            return HiddenCost()
        return ExactCost(amount)

    if cost_type == 'range':
        low = coerce_amount(row.get('cost_min'))
        high = coerce_amount(row.get('cost_max'))
        if low is None and high is None:
            return HiddenCost()
        return RangeCost(low, high)

    return HiddenCost()


def job_from_row(row: Mapping[str, Any]) -> JobRecord:
    """
    Convert a stored job row into an immutable JobRecord.

    Args:
        row: sqlite3.Row or dict with the jobs table columns

    Returns:
        JobRecord snapshot
    """
    data = dict(row)

    postcode = data.get('postcode')
    return JobRecord(
        id=str(data.get('id')),
        title=data.get('title') or '',
        business_name=data.get('business_name') or None,
        suburb=data.get('suburb') or '',
        region=data.get('state') or '',
        postcode='' if postcode is None else str(postcode),
        recommend=recommendation_from_stored(data.get('recommend')),
        cost=cost_from_stored(data),
        notes=data.get('notes') or None,
        completed_at=parse_timestamp(data.get('completed_at')),
        created_at=parse_timestamp(data.get('created_at')),
        owner_id=data.get('owner_id'),
    )
