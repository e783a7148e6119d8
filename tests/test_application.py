"""Application wizard validation tests."""

from __future__ import annotations

import pytest

from philanthrohub.directory import (
    STEPS,
    OrganizationApplication,
    parse_application,
    validate_application,
    validate_step,
)
from philanthrohub.errors import ValidationError


@pytest.fixture
def payload() -> dict:
    return {
        "name": "Hope Trust",
        "website": "https://hope.org",
        "country": "India",
        "category": "Education",
        "description": "Bringing libraries to rural schools across the region.",
        "compliance": {"fcra": True, "taxExempt": False},
        "contactEmail": "team@hope.org",
    }


def test_valid_payload_has_no_errors(payload: dict) -> None:
    assert validate_application(payload) == {}


def test_steps_cover_every_field_once() -> None:
    fields = [field for step in STEPS for field in step.fields]

    assert [step.number for step in STEPS] == [1, 2, 3, 4]
    assert STEPS[0].fields == ("name", "website", "country", "category", "otherCategory")
    assert STEPS[3].fields == ("contactEmail",)
    assert len(fields) == len(set(fields))


@pytest.mark.parametrize(
    ("field", "value", "message"),
    [
        ("name", "Ab", "Organization name is required and must be at least 3 characters"),
        ("website", "hope.org", "Please enter a valid website URL (starting with http:// or https://)"),
        ("country", "", "Please select a country of operation"),
        ("category", "", "Please select a primary category"),
        ("description", "Too short", "Please provide a description of at least 20 characters"),
        ("contactEmail", "not-an-email", "Please enter a valid email address"),
    ],
)
def test_invalid_field_reports_message(payload: dict, field: str, value: str, message: str) -> None:
    payload[field] = value

    assert validate_application(payload) == {field: [message]}


def test_other_category_requires_free_text(payload: dict) -> None:
    payload["category"] = "Other"

    assert validate_step(1, payload) == {"otherCategory": ["Please specify your category"]}

    payload["otherCategory"] = "Arts"
    assert validate_step(1, payload) == {}


def test_compliance_requires_at_least_one_document(payload: dict) -> None:
    payload["compliance"] = {"fcra": False}

    assert validate_step(3, payload) == {
        "compliance": ["Please select at least one verification document to proceed"]
    }


def test_other_document_requires_description(payload: dict) -> None:
    payload["compliance"] = {"other": True, "otherDescription": ""}

    assert validate_step(3, payload) == {
        "compliance.otherDescription": ["Please specify the name of the document"]
    }


def test_validate_step_only_checks_that_step(payload: dict) -> None:
    payload["contactEmail"] = ""
    payload["description"] = ""

    assert validate_step(1, payload) == {}
    assert set(validate_step(2, payload)) == {"description"}
    assert set(validate_step(4, payload)) == {"contactEmail"}


def test_validate_step_rejects_unknown_step(payload: dict) -> None:
    with pytest.raises(ValueError):
        validate_step(5, payload)


def test_parse_application_builds_model(payload: dict) -> None:
    application = parse_application(payload)

    assert isinstance(application, OrganizationApplication)
    assert application.contact_email == "team@hope.org"
    assert application.compliance.fcra is True
    assert application.resolved_category == "Education"
    assert application.to_payload()["contactEmail"] == "team@hope.org"
    assert application.to_payload()["compliance"]["taxExempt"] is False


def test_parse_application_resolves_other_category(payload: dict) -> None:
    payload["category"] = "Other"
    payload["otherCategory"] = "Arts & Culture"

    assert parse_application(payload).resolved_category == "Arts & Culture"


def test_parse_application_collects_all_field_errors() -> None:
    with pytest.raises(ValidationError) as excinfo:
        parse_application({"name": "X"})

    error = excinfo.value
    assert error.message == "Please correct the highlighted fields."
    assert {"name", "website", "country", "category", "description", "compliance", "contactEmail"} <= set(
        error.fields
    )


def test_parse_application_rejects_non_mapping() -> None:
    with pytest.raises(ValidationError) as excinfo:
        parse_application(["not", "an", "object"])  # type: ignore[arg-type]

    assert excinfo.value.message == "Application must be a JSON object."
