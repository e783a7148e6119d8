"""Directory data models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Organization(BaseModel):
    """A listed nonprofit organization.

    Records are created once and never mutated, so the model is frozen.

    Attributes:
        id: Identifier unique within the directory's lifetime.
        name: Display name.
        description: Free-text mission statement.
        category: Single classification label, such as ``"Education"``.
        tags: Display labels, including status markers like ``"Verified"``.
        country: Optional country of operation.
        website: Organization website URL.
        image: Image URL shown on the listing card.
        verified: Whether the organization's documentation has been verified.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    category: str = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)
    country: str | None = None
    website: str = ""
    image: str = ""
    verified: bool = False

    def to_payload(self) -> dict:
        """Return the JSON wire representation, omitting an unset country."""
        return self.model_dump(mode="json", exclude_none=True)


class OrganizationDraft(BaseModel):
    """Request body for direct creation.

    Only ``name`` and ``category`` are required, and that check belongs to the store so the
    draft can carry whatever the caller sent.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    category: str | None = None
    description: str | None = None
    website: str | None = None
    country: str | None = None


__all__ = ["Organization", "OrganizationDraft"]
