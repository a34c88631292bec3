"""
Tests for job submission validation.
"""

from datetime import datetime, timezone

import pytest

from burbli.models import ExactCost, HiddenCost, RangeCost, Recommendation
from burbli.validation import ValidationError, validate_job_draft

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def test_valid_submission(valid_submission):
    draft = validate_job_draft(valid_submission, now=NOW)

    assert draft.title == "Roof insulation"
    assert draft.state == "VIC"
    assert draft.postcode == "3076"
    assert draft.recommend is Recommendation.RECOMMENDED
    assert draft.cost == ExactCost(3899.0)
    assert draft.notes == "Quick and tidy."
    assert draft.completed_at == datetime(2023, 6, 15, tzinfo=timezone.utc)


def test_missing_required_fields_are_all_reported():
    with pytest.raises(ValidationError) as exc_info:
        validate_job_draft({}, now=NOW)

    errors = exc_info.value.errors
    for field in ("title", "business_name", "suburb", "state", "postcode"):
        assert field in errors


@pytest.mark.parametrize("postcode", ["307", "30766", "3o76", "", None])
def test_postcode_must_be_four_digits(valid_submission, postcode):
    valid_submission["postcode"] = postcode

    with pytest.raises(ValidationError) as exc_info:
        validate_job_draft(valid_submission, now=NOW)
    assert "postcode" in exc_info.value.errors


def test_state_must_be_a_known_region(valid_submission):
    valid_submission["state"] = "Victoria"

    with pytest.raises(ValidationError) as exc_info:
        validate_job_draft(valid_submission, now=NOW)
    assert "state" in exc_info.value.errors


@pytest.mark.parametrize("value, expected", [
    (True, Recommendation.RECOMMENDED),
    (False, Recommendation.NOT_RECOMMENDED),
    ("no", Recommendation.NOT_RECOMMENDED),
    ("Unspecified", Recommendation.UNSPECIFIED),
    (None, Recommendation.UNSPECIFIED),
])
def test_recommend_values(valid_submission, value, expected):
    valid_submission["recommend"] = value
    assert validate_job_draft(valid_submission, now=NOW).recommend is expected


def test_recommend_rejects_other_values(valid_submission):
    valid_submission["recommend"] = 1

    with pytest.raises(ValidationError) as exc_info:
        validate_job_draft(valid_submission, now=NOW)
    assert "recommend" in exc_info.value.errors


@pytest.mark.parametrize("cost_type", [None, "", "hidden", "na"])
def test_hidden_cost(valid_submission, cost_type):
    valid_submission["cost_type"] = cost_type
    assert validate_job_draft(valid_submission, now=NOW).cost == HiddenCost()


def test_exact_cost_requires_amount(valid_submission):
    valid_submission["cost_exact"] = ""

    with pytest.raises(ValidationError) as exc_info:
        validate_job_draft(valid_submission, now=NOW)
    assert "cost_exact" in exc_info.value.errors


def test_negative_cost_rejected(valid_submission):
    valid_submission["cost_exact"] = -10

    with pytest.raises(ValidationError):
        validate_job_draft(valid_submission, now=NOW)


def test_range_cost(valid_submission):
    valid_submission.update({"cost_type": "range", "cost_min": "800", "cost_max": 1400})
    assert validate_job_draft(valid_submission, now=NOW).cost == RangeCost(800.0, 1400.0)


def test_one_sided_range_allowed(valid_submission):
    valid_submission.update({"cost_type": "range", "cost_max": "1400"})
    assert validate_job_draft(valid_submission, now=NOW).cost == RangeCost(None, 1400.0)


def test_range_needs_a_bound(valid_submission):
    valid_submission.update({"cost_type": "range"})

    with pytest.raises(ValidationError) as exc_info:
        validate_job_draft(valid_submission, now=NOW)
    assert "cost_min" in exc_info.value.errors


def test_inverted_range_rejected(valid_submission):
    valid_submission.update({"cost_type": "range", "cost_min": 2000, "cost_max": 100})

    with pytest.raises(ValidationError) as exc_info:
        validate_job_draft(valid_submission, now=NOW)
    assert "cost_max" in exc_info.value.errors


def test_unknown_cost_type_rejected(valid_submission):
    valid_submission["cost_type"] = "quote"

    with pytest.raises(ValidationError) as exc_info:
        validate_job_draft(valid_submission, now=NOW)
    assert "cost_type" in exc_info.value.errors


def test_completed_at_in_future_rejected(valid_submission):
    valid_submission["completed_at"] = "2030-01-01"

    with pytest.raises(ValidationError) as exc_info:
        validate_job_draft(valid_submission, now=NOW)
    assert "completed_at" in exc_info.value.errors


def test_completed_at_must_parse(valid_submission):
    valid_submission["completed_at"] = "last spring"

    with pytest.raises(ValidationError) as exc_info:
        validate_job_draft(valid_submission, now=NOW)
    assert "completed_at" in exc_info.value.errors


def test_blank_notes_become_none(valid_submission):
    valid_submission["notes"] = "   "
    assert validate_job_draft(valid_submission, now=NOW).notes is None


def test_notes_length_limit(valid_submission):
    valid_submission["notes"] = "x" * 2001

    with pytest.raises(ValidationError) as exc_info:
        validate_job_draft(valid_submission, now=NOW)
    assert "notes" in exc_info.value.errors


def test_non_object_body_rejected():
    with pytest.raises(ValidationError) as exc_info:
        validate_job_draft(["not", "a", "dict"])
    assert "body" in exc_info.value.errors


def test_oversized_amount_rejected(valid_submission):
    valid_submission["cost_exact"] = 10 ** 400

    with pytest.raises(ValidationError) as exc_info:
        validate_job_draft(valid_submission, now=NOW)
    assert "cost_exact" in exc_info.value.errors


def test_naive_now_is_treated_as_utc(valid_submission):
    naive_now = datetime(2024, 6, 1)

    assert validate_job_draft(valid_submission, now=naive_now).completed_at.year == 2023

    valid_submission["completed_at"] = "2024-07-01"
    with pytest.raises(ValidationError) as exc_info:
        validate_job_draft(valid_submission, now=naive_now)
    assert "completed_at" in exc_info.value.errors
