"""Read and write access to the directory as one client."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from philanthrohub.config.models import HubConfig
from philanthrohub.directory.application import OrganizationApplication
from philanthrohub.directory.models import Organization, OrganizationDraft
from philanthrohub.errors import SubmissionError, ValidationError

from .query import OrganizationsQuery, QueryResult, Scheduler
from .service import OrganizationService

LOGGER = logging.getLogger(__name__)


class DirectoryClient:
    """Pair the HTTP service with the cached organization list.

    Successful writes invalidate the cache so the next read includes the new organization.
    Failed writes are logged and re-raised for the caller to show.
    """

    def __init__(self, service: OrganizationService, query: OrganizationsQuery) -> None:
        self.service = service
        self.query = query

    @classmethod
    def from_config(
        cls,
        config: HubConfig,
        *,
        service: Optional[OrganizationService] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> "DirectoryClient":
        """Build a client from configuration.

        Args:
            config: Loaded PhilanthroHub configuration.
            service: Service to use instead of one built from ``config.api``.
            scheduler: Background refresh runner forwarded to the query.
        """
        service = service or OrganizationService.from_settings(config.api)
        options: dict[str, Any] = {
            "stale_time": config.cache.stale_time_seconds,
            "refetch_interval": config.cache.refetch_interval_seconds,
        }
        if scheduler is not None:
            options["scheduler"] = scheduler
        return cls(service, OrganizationsQuery(service.get_all, **options))

    def organizations(self) -> QueryResult:
        """Return the organization list, served from cache when fresh enough."""
        return self.query.read()

    def create_organization(self, draft: OrganizationDraft | Mapping[str, Any]) -> Organization:
        """Create an organization directly and invalidate the cached list.

        Raises:
            ValidationError: If required fields are missing.
            SubmissionError: If the service could not create the organization.
        """
        try:
            organization = self.service.create(draft)
        except (ValidationError, SubmissionError) as exc:
            LOGGER.warning("Failed to create organization: %s", exc)
            raise
        self.query.invalidate()
        return organization

    def submit_application(self, application: OrganizationApplication) -> Organization:
        """Submit a wizard application and invalidate the cached list.

        Raises:
            ValidationError: If the service rejected the application.
            SubmissionError: If the service could not store the application.
        """
        try:
            organization = self.service.submit(application)
        except (ValidationError, SubmissionError) as exc:
            LOGGER.warning("Failed to submit organization: %s", exc)
            raise
        self.query.invalidate()
        return organization

    def start_polling(self) -> None:
        """Begin background polling of the organization list."""
        self.query.start_polling()

    def close(self) -> None:
        """Stop polling and release HTTP resources."""
        self.query.stop()
        self.service.close()


__all__ = ["DirectoryClient"]
