"""
Submission validation for posted jobs.

Checks a submitted job (JSON body of a create or update request) and
normalises it into a JobDraft ready for the database. All problems are
collected and raised together so the form can highlight every field.
"""

import re
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from burbli.constants import NOTES_MAX_LENGTH, REGIONS
from burbli.models import (
    Cost,
    ExactCost,
    HiddenCost,
    RangeCost,
    Recommendation,
    coerce_amount,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

POSTCODE_PATTERN = re.compile(r'^\d{4}$')

RECOMMEND_VALUES = {
    'yes': Recommendation.RECOMMENDED,
    'recommended': Recommendation.RECOMMENDED,
    'no': Recommendation.NOT_RECOMMENDED,
    'not_recommended': Recommendation.NOT_RECOMMENDED,
    'unspecified': Recommendation.UNSPECIFIED,
}

HIDDEN_COST_TYPES = {'', 'hidden', 'na'}


class ValidationError(Exception):
    """Raised when a submitted job has invalid fields."""

    def __init__(self, errors: Dict[str, str]):
        super().__init__("Invalid job submission: " + ", ".join(sorted(errors)))
        self.errors = errors


@dataclass(frozen=True)
class JobDraft:
    """A validated job submission."""
    title: str
    business_name: str
    suburb: str
    state: str
    postcode: str
    recommend: Recommendation
    cost: Cost
    notes: Optional[str] = None
    completed_at: Optional[datetime] = None


def _text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ''
    return str(value).strip()


def _aware(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _parse_recommend(value: Any) -> Optional[Recommendation]:
    if value is None:
        return Recommendation.UNSPECIFIED
    if value is True:
        return Recommendation.RECOMMENDED
    if value is False:
        return Recommendation.NOT_RECOMMENDED
    if isinstance(value, str):
        return RECOMMEND_VALUES.get(value.strip().lower())
    return None


def _parse_cost(payload: Mapping[str, Any], errors: Dict[str, str]) -> Cost:
    cost_type = _text(payload, 'cost_type').lower()

    if cost_type in HIDDEN_COST_TYPES:
        return HiddenCost()

    if cost_type == 'exact':
        amount = coerce_amount(payload.get('cost_exact'))
        if amount is None:
            errors['cost_exact'] = "Enter the amount paid"
        elif amount < 0:
            errors['cost_exact'] = "Amount cannot be negative"
        return ExactCost(amount)

    if cost_type == 'range':
        low = coerce_amount(payload.get('cost_min'))
        high = coerce_amount(payload.get('cost_max'))
        if low is None and high is None:
            errors['cost_min'] = "Enter at least one end of the range"
        if (low is not None and low < 0) or (high is not None and high < 0):
            errors['cost_min'] = "Amounts cannot be negative"
        elif low is not None and high is not None and low > high:
            errors['cost_max'] = "Maximum must not be below the minimum"
        return RangeCost(low, high)

    errors['cost_type'] = "Choose exact, range or hidden"
    return HiddenCost()


def validate_job_draft(payload: Mapping[str, Any], now: Optional[datetime] = None) -> JobDraft:
    """
    Validate a submitted job and build a JobDraft.

    Args:
        payload: Submitted fields (title, business_name, suburb, state,
            postcode, recommend, cost_type, cost_exact, cost_min, cost_max,
            notes, completed_at)
        now: Current time, for rejecting completion dates in the future
            (naive values are taken to be UTC)

    Returns:
        JobDraft with trimmed text and a tagged cost

    Raises:
        ValidationError: If any field is missing or invalid
    """
    if not isinstance(payload, Mapping):
        raise ValidationError({'body': "Expected a JSON object"})

    errors: Dict[str, str] = {}

    title = _text(payload, 'title')
    business_name = _text(payload, 'business_name')
    suburb = _text(payload, 'suburb')
    for key, value in (('title', title), ('business_name', business_name), ('suburb', suburb)):
        if not value:
            errors[key] = "This field is required"

    state = _text(payload, 'state').upper()
    if state not in REGIONS:
        errors['state'] = f"State must be one of {', '.join(REGIONS)}"

    postcode = _text(payload, 'postcode')
    if not POSTCODE_PATTERN.match(postcode):
        errors['postcode'] = "Postcode must be 4 digits"

    recommend = _parse_recommend(payload.get('recommend'))
    if recommend is None:
        errors['recommend'] = "Recommendation must be yes, no or unspecified"
        recommend = Recommendation.UNSPECIFIED

    cost = _parse_cost(payload, errors)

    notes = _text(payload, 'notes') or None
    if notes and len(notes) > NOTES_MAX_LENGTH:
        errors['notes'] = f"Notes must be {NOTES_MAX_LENGTH} characters or fewer"

    completed_at = None
    raw_completed = payload.get('completed_at')
    if raw_completed not in (None, ''):
        completed_at = parse_timestamp(raw_completed)
        if completed_at is None:
            errors['completed_at'] = "Completion date must be an ISO date"
        elif completed_at > _aware(now or datetime.now(timezone.utc)):
            errors['completed_at'] = "Completion date cannot be in the future"

    if errors:
        logger.debug(f"Rejected job submission: {errors}")
        raise ValidationError(errors)

    return JobDraft(
        title=title,
        business_name=business_name,
        suburb=suburb,
        state=state,
        postcode=postcode,
        recommend=recommend,
        cost=cost,
        notes=notes,
        completed_at=completed_at,
    )
