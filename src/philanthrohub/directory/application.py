"""Validation for the multi-step organization application.

Applications travel over the wire with camelCase keys (``otherCategory``,
``contactEmail``, ``compliance.taxExempt``); field errors are reported under the same
names so a form can show them next to the matching input.
"""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from philanthrohub.errors import ValidationError

COUNTRIES = ("Global", "India", "USA", "UK", "Canada", "Australia", "Other")
CATEGORIES = (
    "Education",
    "Healthcare",
    "Environment",
    "Animal Welfare",
    "Human Rights",
    "Disaster Relief",
    "Other",
)
OTHER = "Other"

_HTTP_URL = TypeAdapter(HttpUrl)
_EMAIL = TypeAdapter(EmailStr)


class ComplianceDocuments(BaseModel):
    """Verification documents the applicant can provide.

    Attributes:
        fcra: FCRA registration certificate.
        tax_exempt: Tax exemption certificate.
        annual_reports: Audited annual reports.
        other: Another document, named in ``other_description``.
        other_description: Name of the other document.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    fcra: bool = False
    tax_exempt: bool = False
    annual_reports: bool = False
    other: bool = False
    other_description: str = ""


class OrganizationApplication(BaseModel):
    """A validated application submitted through the wizard."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str
    website: str
    country: str
    category: str
    other_category: str = ""
    description: str
    compliance: ComplianceDocuments = Field(default_factory=ComplianceDocuments)
    contact_email: str

    @property
    def resolved_category(self) -> str:
        """Return the category to list under, substituting the free-text one for ``Other``."""
        if self.category == OTHER:
            return self.other_category
        return self.category

    def to_payload(self) -> dict[str, Any]:
        """Return the camelCase wire representation."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True, slots=True)
class WizardStep:
    """One page of the application wizard.

    Attributes:
        number: 1-based position of the step.
        title: Heading shown in the progress indicator.
    """

    number: int
    title: str

    @property
    def fields(self) -> tuple[str, ...]:
        """Return the wire field names validated on this step."""
        return tuple(dict.fromkeys(rule.field for rule in _RULES if rule.step == self.number))


STEPS = (
    WizardStep(1, "Basic Info"),
    WizardStep(2, "Mission & Details"),
    WizardStep(3, "Compliance"),
    WizardStep(4, "Contact"),
)


def _text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    return value if isinstance(value, str) else ""


def _compliance(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    value = payload.get("compliance")
    return value if isinstance(value, MappingABC) else {}


def _accepts(adapter: TypeAdapter, value: str) -> bool:
    try:
        adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def _has_document(payload: Mapping[str, Any]) -> bool:
    compliance = _compliance(payload)
    return any(bool(compliance.get(key)) for key in ("fcra", "taxExempt", "annualReports", "other"))


def _names_other_document(payload: Mapping[str, Any]) -> bool:
    compliance = _compliance(payload)
    if not compliance.get("other"):
        return True
    description = compliance.get("otherDescription")
    return isinstance(description, str) and len(description) >= 3


def _names_other_category(payload: Mapping[str, Any]) -> bool:
    return _text(payload, "category") != OTHER or len(_text(payload, "otherCategory")) >= 3


@dataclass(frozen=True, slots=True)
class _Rule:
    field: str
    step: int
    check: Callable[[Mapping[str, Any]], bool]
    message: str


_RULES = (
    _Rule(
        "name",
        1,
        lambda p: len(_text(p, "name")) >= 3,
        "Organization name is required and must be at least 3 characters",
    ),
    _Rule(
        "website",
        1,
        lambda p: _accepts(_HTTP_URL, _text(p, "website")),
        "Please enter a valid website URL (starting with http:// or https://)",
    ),
    _Rule("country", 1, lambda p: bool(_text(p, "country")), "Please select a country of operation"),
    _Rule("category", 1, lambda p: bool(_text(p, "category")), "Please select a primary category"),
    _Rule("otherCategory", 1, _names_other_category, "Please specify your category"),
    _Rule(
        "description",
        2,
        lambda p: len(_text(p, "description")) >= 20,
        "Please provide a description of at least 20 characters",
    ),
    _Rule(
        "compliance",
        3,
        _has_document,
        "Please select at least one verification document to proceed",
    ),
    _Rule(
        "compliance.otherDescription",
        3,
        _names_other_document,
        "Please specify the name of the document",
    ),
    _Rule(
        "contactEmail",
        4,
        lambda p: _accepts(_EMAIL, _text(p, "contactEmail")),
        "Please enter a valid email address",
    ),
)


def _collect(payload: Mapping[str, Any], step: int | None) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for rule in _RULES:
        if step is not None and rule.step != step:
            continue
        if not rule.check(payload):
            errors.setdefault(rule.field, []).append(rule.message)
    return errors


def validate_application(payload: Mapping[str, Any]) -> dict[str, list[str]]:
    """Return field errors for every step of ``payload``; an empty mapping means valid."""
    return _collect(payload, None)


def validate_step(step: int, payload: Mapping[str, Any]) -> dict[str, list[str]]:
    """Return field errors for the fields shown on ``step`` only.

    Raises:
        ValueError: If ``step`` is not a wizard step number.
    """
    if step not in {wizard_step.number for wizard_step in STEPS}:
        raise ValueError(f"Unknown wizard step {step}; expected 1-{len(STEPS)}.")
    return _collect(payload, step)


def parse_application(payload: Mapping[str, Any]) -> OrganizationApplication:
    """Validate ``payload`` and build an ``OrganizationApplication``.

    Raises:
        ValidationError: If any field fails validation.
    """
    if not isinstance(payload, MappingABC):
        raise ValidationError("Application must be a JSON object.")

    errors = validate_application(payload)
    if errors:
        raise ValidationError("Please correct the highlighted fields.", fields=errors)

    try:
        return OrganizationApplication.model_validate(dict(payload))
    except PydanticValidationError as exc:
        fields: dict[str, list[str]] = {}
        for error in exc.errors():
            name = ".".join(str(part) for part in error["loc"]) or "application"
            fields.setdefault(name, []).append(error["msg"])
        raise ValidationError("Please correct the highlighted fields.", fields=fields) from exc


__all__ = [
    "CATEGORIES",
    "COUNTRIES",
    "OTHER",
    "STEPS",
    "ComplianceDocuments",
    "OrganizationApplication",
    "WizardStep",
    "parse_application",
    "validate_application",
    "validate_step",
]
