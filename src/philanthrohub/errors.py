"""Errors raised by the directory, the data access client, and submissions."""

from __future__ import annotations

from typing import Mapping, Sequence


class PhilanthroHubError(Exception):
    """Base exception for directory operations."""


class ValidationError(PhilanthroHubError):
    """Raised when a submission is missing required fields or carries invalid values.

    Attributes:
        fields: Mapping of field names to the messages shown next to each field.
    """

    def __init__(
        self,
        message: str,
        fields: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.fields: dict[str, list[str]] = {
            name: list(messages) for name, messages in (fields or {}).items()
        }


class TransientFetchError(PhilanthroHubError):
    """Raised when the organization list cannot be retrieved."""


class SubmissionError(PhilanthroHubError):
    """Raised when creating an organization fails for a reason other than validation."""


__all__ = ["PhilanthroHubError", "ValidationError", "TransientFetchError", "SubmissionError"]
