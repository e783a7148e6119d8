"""HTTP client for the directory service endpoints."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from philanthrohub.config.models import ApiSettings
from philanthrohub.directory.application import OrganizationApplication
from philanthrohub.directory.models import Organization, OrganizationDraft
from philanthrohub.errors import SubmissionError, TransientFetchError, ValidationError

ORGANIZATIONS_ENDPOINT = "/api/organizations"
SUBMISSIONS_ENDPOINT = "/api/organizations/submissions"


class OrganizationService:
    """Fetch and create organizations over HTTP.

    Only the list request is retried on transient statuses; creates are sent once so a
    retry can never list the same organization twice.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        max_retries: int = 3,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            base_url: Root URL of the directory service.
            timeout: Request timeout in seconds.
            max_retries: Retry attempts for the list request.
            session: Preconfigured session; a retrying session is built when omitted.
            logger: Logger instance.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

        if session is None:
            session = requests.Session()
            retry_strategy = Retry(
                total=max_retries,
                backoff_factor=0.5,
                status_forcelist=[429, 500, 502, 503, 504],
                allowed_methods=["GET"],
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            session.mount("http://", adapter)
            session.mount("https://", adapter)
            session.headers.update({"Accept": "application/json"})
        self.session = session

    @classmethod
    def from_settings(cls, settings: ApiSettings, **kwargs: Any) -> "OrganizationService":
        """Build a service from the ``api`` configuration section."""
        return cls(
            settings.base_url,
            timeout=settings.timeout_seconds,
            max_retries=settings.max_retries,
            **kwargs,
        )

    def get_all(self) -> list[Organization]:
        """
        Fetch the full organization list.

        Returns:
            List of organizations, newest first

        Raises:
            TransientFetchError: On network failure, error status, or malformed payload
        """
        url = self._url(ORGANIZATIONS_ENDPOINT)
        self.logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Organization list request failed: GET {url} - {e}")
            raise TransientFetchError(f"Could not reach the directory service: {e}") from e

        if not response.ok:
            raise TransientFetchError(
                f"Directory service returned HTTP {response.status_code} for the organization list."
            )

        try:
            payload = response.json()
            if not isinstance(payload, list):
                raise ValueError("expected a JSON array")
            return [Organization.model_validate(item) for item in payload]
        except ValueError as e:
            self.logger.error(f"Malformed organization list from {url}: {e}")
            raise TransientFetchError(f"Malformed organization list: {e}") from e

    def create(self, draft: OrganizationDraft | Mapping[str, Any]) -> Organization:
        """
        Create an organization through the direct endpoint.

        Raises:
            ValidationError: If the service rejects the request as incomplete (HTTP 400)
            SubmissionError: On any other failure
        """
        if isinstance(draft, OrganizationDraft):
            payload = draft.model_dump(exclude_none=True)
        else:
            payload = dict(draft)
        return self._post(ORGANIZATIONS_ENDPOINT, payload)

    def submit(self, application: OrganizationApplication) -> Organization:
        """
        Submit a wizard application; the listing starts out pending verification.

        Raises:
            ValidationError: If the service rejects the application (HTTP 400)
            SubmissionError: On any other failure
        """
        return self._post(SUBMISSIONS_ENDPOINT, application.to_payload())

    def close(self) -> None:
        """Release pooled connections."""
        self.session.close()

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _post(self, endpoint: str, payload: Mapping[str, Any]) -> Organization:
        url = self._url(endpoint)
        self.logger.debug(f"POST {url}")
        try:
            response = self.session.post(url, json=dict(payload), timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Create request failed: POST {url} - {e}")
            raise SubmissionError(f"Could not reach the directory service: {e}") from e

        body = _json_object(response)
        if response.status_code == 400:
            fields = body.get("fields")
            raise ValidationError(
                str(body.get("error") or "The submission was rejected."),
                fields=fields if isinstance(fields, dict) else None,
            )
        if not response.ok:
            message = body.get("error") or f"HTTP {response.status_code}"
            raise SubmissionError(f"Failed to create organization: {message}")

        try:
            return Organization.model_validate(body)
        except ValueError as e:
            raise SubmissionError(f"Malformed organization in response: {e}") from e


def _json_object(response: requests.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


__all__ = ["ORGANIZATIONS_ENDPOINT", "SUBMISSIONS_ENDPOINT", "OrganizationService"]
