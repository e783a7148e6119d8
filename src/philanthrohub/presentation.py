"""View-model and rich rendering for the directory listing."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from philanthrohub.client.query import QueryResult
from philanthrohub.directory.models import Organization
from philanthrohub.search import SearchCriteria, derive_categories, filter_organizations

LOAD_FAILED_MESSAGE = "Failed to load organizations. Please try again later."


class PageStatus(str, Enum):
    """Which of the mutually exclusive listing states to show."""

    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    RESULTS = "results"


@dataclass(frozen=True, slots=True)
class DirectoryPage:
    """Everything the listing needs to render once.

    Attributes:
        status: Listing state to show.
        organizations: Visible organizations. After a failed refresh this is the filtered
            last-known list.
        categories: Category universe derived from the full list.
        criteria: Search inputs the page was computed with.
        total: Number of organizations before filtering.
        message: Banner text for the error and empty states.
    """

    status: PageStatus
    organizations: tuple[Organization, ...] = ()
    categories: tuple[str, ...] = ()
    criteria: SearchCriteria = field(default_factory=SearchCriteria)
    total: int = 0
    message: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-ready representation."""
        return {
            "status": self.status.value,
            "message": self.message,
            "query": self.criteria.query,
            "selected_categories": list(self.criteria.categories),
            "categories": list(self.categories),
            "counts": {"total": self.total, "matches": len(self.organizations)},
            "organizations": [organization.to_payload() for organization in self.organizations],
        }


def build_directory_page(result: QueryResult, criteria: SearchCriteria) -> DirectoryPage:
    """Combine a query result with search inputs into a ``DirectoryPage``.

    An error always wins over the empty and results states so a failed fetch is never
    mistaken for zero matches.
    """
    organizations = result.organizations
    visible = tuple(filter_organizations(organizations, criteria.query, criteria.categories))
    categories = tuple(derive_categories(organizations))

    if result.is_error:
        status = PageStatus.ERROR
        message: str | None = LOAD_FAILED_MESSAGE
    elif result.is_loading:
        status = PageStatus.LOADING
        message = None
    elif visible:
        status = PageStatus.RESULTS
        message = None
    else:
        status = PageStatus.EMPTY
        message = f'No organizations found matching "{criteria.query}"'

    return DirectoryPage(
        status=status,
        organizations=visible,
        categories=categories,
        criteria=criteria,
        total=len(organizations),
        message=message,
    )


def _organization_table(organizations: tuple[Organization, ...]) -> Table:
    table = Table(show_lines=False, expand=True)
    table.add_column("Name", style="bold")
    table.add_column("Category", style="cyan")
    table.add_column("Country")
    table.add_column("Tags")
    table.add_column("Website", overflow="fold")
    for organization in organizations:
        name = Text(organization.name)
        if organization.verified:
            name.append(" ✓", style="green")
        table.add_row(
            name,
            organization.category,
            organization.country or "",
            ", ".join(organization.tags),
            organization.website,
        )
    return table


def render_directory_page(page: DirectoryPage) -> RenderableType:
    """Return a rich renderable for ``page``."""
    parts: list[RenderableType] = []
    if page.criteria.categories:
        chips = "  ".join(f"[reverse] {category} [/reverse]" for category in page.criteria.categories)
        parts.append(Text.from_markup(f"Filters: {chips}"))

    if page.status is PageStatus.LOADING:
        parts.append(Text("Loading organizations...", style="dim"))
    elif page.status is PageStatus.ERROR:
        parts.append(Panel(Text(page.message or LOAD_FAILED_MESSAGE, style="red"), border_style="red"))
        if page.organizations:
            parts.append(Text("Showing the last loaded list.", style="dim"))
            parts.append(_organization_table(page.organizations))
    elif page.status is PageStatus.EMPTY:
        parts.append(Text(page.message or "", style="yellow"))
        parts.append(Text("Try adjusting your search terms.", style="dim"))
    else:
        parts.append(_organization_table(page.organizations))
        parts.append(
            Text(f"{len(page.organizations)} of {page.total} organizations shown.", style="dim")
        )
    return Group(*parts)


__all__ = [
    "DirectoryPage",
    "LOAD_FAILED_MESSAGE",
    "PageStatus",
    "build_directory_page",
    "render_directory_page",
]
