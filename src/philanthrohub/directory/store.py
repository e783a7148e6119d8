"""In-memory organization directory."""

from __future__ import annotations

import logging
from typing import Iterable

from philanthrohub.errors import ValidationError

from .application import OrganizationApplication
from .models import Organization, OrganizationDraft

LOGGER = logging.getLogger(__name__)

DEFAULT_IMAGE = "https://images.unsplash.com/photo-1488521787991-ed7bbaae773c?auto=format&fit=crop&q=80"
SUBMISSION_IMAGE = (
    "https://images.unsplash.com/photo-1501770118606-b1d640526693?fm=jpg&q=60&w=3000"
    "&ixlib=rb-4.1.0&ixid=M3wxMjA3fDB8MHxwaG90by1wYWdlfHx8fGVufDB8fHx8fA%3D%3D"
)
VERIFIED_TAG = "Verified"
PENDING_TAG = "Pending Verification"
REQUIRED_FIELDS_MESSAGE = "Name and category are required"


class DirectoryStore:
    """Hold the canonical list of organizations, newest first.

    The store only appends: records are never edited or removed. Two creation paths exist
    and keep different default tags. ``create`` (direct) tags new records ``Verified`` and
    ``submit`` (wizard) tags them ``Pending Verification``; both leave ``verified`` false.
    """

    def __init__(self, organizations: Iterable[Organization] = ()) -> None:
        """Initialize the store with existing organizations in listing order.

        Args:
            organizations: Records to start with, typically the seed data.

        Raises:
            ValueError: If two records share an identifier.
        """
        self._organizations: list[Organization] = []
        self._ids: set[str] = set()
        for organization in organizations:
            if organization.id in self._ids:
                raise ValueError(f"Duplicate organization id {organization.id!r}.")
            self._organizations.append(organization)
            self._ids.add(organization.id)

    def __len__(self) -> int:
        return len(self._organizations)

    def list_all(self) -> list[Organization]:
        """Return every organization in listing order."""
        return list(self._organizations)

    def create(self, draft: OrganizationDraft) -> Organization:
        """Add an organization from a direct creation request.

        Args:
            draft: Request body; ``name`` and ``category`` must be non-empty.

        Returns:
            Organization: The stored record.

        Raises:
            ValidationError: If ``name`` or ``category`` is missing.
        """
        fields: dict[str, list[str]] = {}
        if not draft.name:
            fields["name"] = ["Name is required"]
        if not draft.category:
            fields["category"] = ["Category is required"]
        if fields:
            raise ValidationError(REQUIRED_FIELDS_MESSAGE, fields=fields)

        organization = Organization(
            id=self._next_id(),
            name=draft.name,
            category=draft.category,
            description=draft.description or "",
            tags=[draft.category, VERIFIED_TAG],
            country=draft.country or None,
            website=draft.website or "",
            image=DEFAULT_IMAGE,
            verified=False,
        )
        self._prepend(organization)
        return organization

    def submit(self, application: OrganizationApplication) -> Organization:
        """Add an organization from a validated wizard application.

        Args:
            application: Application that already passed wizard validation.

        Returns:
            Organization: The stored record, pending verification.
        """
        category = application.resolved_category
        organization = Organization(
            id=self._next_id(),
            name=application.name,
            category=category,
            description=application.description,
            tags=[category, PENDING_TAG],
            country=application.country,
            website=application.website,
            image=SUBMISSION_IMAGE,
            verified=False,
        )
        self._prepend(organization)
        return organization

    def _next_id(self) -> str:
        candidate = len(self._organizations) + 1
        while str(candidate) in self._ids:
            candidate += 1
        return str(candidate)

    def _prepend(self, organization: Organization) -> None:
        self._organizations.insert(0, organization)
        self._ids.add(organization.id)
        LOGGER.info(
            "Listed organization %s (%s) under %s.",
            organization.id,
            organization.name,
            organization.category,
        )


__all__ = [
    "DEFAULT_IMAGE",
    "DirectoryStore",
    "PENDING_TAG",
    "REQUIRED_FIELDS_MESSAGE",
    "SUBMISSION_IMAGE",
    "VERIFIED_TAG",
]
