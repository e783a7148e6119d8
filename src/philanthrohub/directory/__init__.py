"""Organization directory: records, application validation, and the in-memory store."""

from .application import (
    CATEGORIES,
    COUNTRIES,
    STEPS,
    ComplianceDocuments,
    OrganizationApplication,
    WizardStep,
    parse_application,
    validate_application,
    validate_step,
)
from .models import Organization, OrganizationDraft
from .seed import seed_organizations
from .store import PENDING_TAG, VERIFIED_TAG, DirectoryStore

__all__ = [
    "CATEGORIES",
    "COUNTRIES",
    "STEPS",
    "ComplianceDocuments",
    "DirectoryStore",
    "Organization",
    "OrganizationApplication",
    "OrganizationDraft",
    "PENDING_TAG",
    "VERIFIED_TAG",
    "WizardStep",
    "parse_application",
    "seed_organizations",
    "validate_application",
    "validate_step",
]
