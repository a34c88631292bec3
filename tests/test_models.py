"""
Tests for turning stored rows into job records.

Older rows carry cost and recommendation in several shapes; all of them
must map onto the tagged cost and the tri-state recommendation.
"""

from datetime import datetime, timezone

import pytest

from burbli.models import (
    ExactCost,
    HiddenCost,
    RangeCost,
    Recommendation,
    coerce_amount,
    job_from_row,
    parse_timestamp,
    recommendation_from_stored,
)


def row(**fields):
    base = {
        "id": "abc",
        "owner_id": "user-1",
        "title": "Roof insulation",
        "business_name": "Northside Insulation",
        "suburb": "Epping",
        "state": "VIC",
        "postcode": "3076",
        "recommend": 1,
        "cost_type": "exact",
        "cost_exact": 3899.0,
        "cost_min": None,
        "cost_max": None,
        "notes": None,
        "completed_at": "2023-06-15T00:00:00+00:00",
        "created_at": "2024-01-10T04:00:00Z",
    }
    base.update(fields)
    return base


def test_job_from_row():
    job = job_from_row(row())

    assert job.id == "abc"
    assert job.region == "VIC"
    assert job.recommend is Recommendation.RECOMMENDED
    assert job.cost == ExactCost(3899.0)
    assert job.completed_at == datetime(2023, 6, 15, tzinfo=timezone.utc)
    assert job.created_at == datetime(2024, 1, 10, 4, tzinfo=timezone.utc)


def test_postcode_keeps_leading_zero():
    """Darwin postcodes start with 0."""
    assert job_from_row(row(postcode="0800")).postcode == "0800"
    assert job_from_row(row(postcode=None)).postcode == ""


@pytest.mark.parametrize("stored, expected", [
    (1, Recommendation.RECOMMENDED),
    (True, Recommendation.RECOMMENDED),
    (0, Recommendation.NOT_RECOMMENDED),
    (False, Recommendation.NOT_RECOMMENDED),
    (None, Recommendation.UNSPECIFIED),
    ("yes", Recommendation.UNSPECIFIED),
    (2, Recommendation.UNSPECIFIED),
])
def test_recommendation_is_never_coerced(stored, expected):
    assert recommendation_from_stored(stored) is expected


@pytest.mark.parametrize("cost_type", ["hidden", "na", None, "", "free"])
def test_hidden_cost_types(cost_type):
    assert job_from_row(row(cost_type=cost_type)).cost == HiddenCost()


def test_range_cost_from_row():
    job = job_from_row(row(cost_type="range", cost_exact=None, cost_min=800, cost_max="1400"))
    assert job.cost == RangeCost(800.0, 1400.0)


@pytest.mark.parametrize("amount", [None, "", "n/a", float("nan")])
def test_exact_without_usable_amount_becomes_hidden(amount):
    job = job_from_row(row(cost_exact=amount))
    assert job.cost == HiddenCost()


def test_range_without_bounds_becomes_hidden():
    job = job_from_row(row(cost_type="range", cost_exact=None, cost_min=None, cost_max="n/a"))
    assert job.cost == HiddenCost()


def test_legacy_exact_cost_column():
    """Rows from before cost_exact existed kept the amount in `cost`."""
    job = job_from_row(row(cost_exact=None, cost="3500"))
    assert job.cost == ExactCost(3500.0)


@pytest.mark.parametrize("value, expected", [
    (3899, 3899.0),
    (12.5, 12.5),
    ("3,500", 3500.0),
    (" $80 ", 80.0),
    ("", None),
    ("abc", None),
    (float("nan"), None),
    (float("inf"), None),
    ("Infinity", None),
    (True, None),
    (10 ** 400, None),
    (None, None),
    ([100], None),
])
def test_coerce_amount(value, expected):
    assert coerce_amount(value) == expected


def test_parse_timestamp():
    assert parse_timestamp("2023-06-15") == datetime(2023, 6, 15, tzinfo=timezone.utc)
    assert parse_timestamp("not a date") is None
    assert parse_timestamp("") is None
    assert parse_timestamp(20230615) is None
