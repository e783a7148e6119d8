"""Filtering of the organization list by free text and category."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence

from philanthrohub.directory.models import Organization

from .state import SearchFilterState


def matches_query(organization: Organization, query: str) -> bool:
    """Return whether ``query`` occurs in the name, category, or any tag, ignoring case.

    The query is not trimmed, so whitespace is matched literally. An empty query matches.
    """
    needle = query.lower()
    return (
        needle in organization.name.lower()
        or needle in organization.category.lower()
        or any(needle in tag.lower() for tag in organization.tags)
    )


def matches_categories(organization: Organization, selected: Collection[str]) -> bool:
    """Return whether the organization's category is selected; no selection passes all."""
    if not selected:
        return True
    return organization.category in selected


def filter_organizations(
    organizations: Iterable[Organization],
    query: str,
    selected_categories: Collection[str],
) -> list[Organization]:
    """Return the organizations matching both the query and the category selection.

    Args:
        organizations: Full list in display order.
        query: Free-text query.
        selected_categories: Categories to keep, compared exactly; empty keeps all.

    Returns:
        list[Organization]: Matching organizations in their original relative order.
    """
    selected = frozenset(selected_categories)
    return [
        organization
        for organization in organizations
        if matches_query(organization, query) and matches_categories(organization, selected)
    ]


def derive_categories(organizations: Iterable[Organization]) -> list[str]:
    """Return the distinct categories present in ``organizations``, sorted ascending."""
    return sorted({organization.category for organization in organizations})


def filter_category_options(categories: Sequence[str], category_search: str) -> list[str]:
    """Narrow the category picker to entries containing ``category_search``, ignoring case."""
    needle = category_search.lower()
    return [category for category in categories if needle in category.lower()]


def apply_filters(
    organizations: Iterable[Organization],
    state: SearchFilterState,
) -> list[Organization]:
    """Filter ``organizations`` with the criteria held by ``state`` at call time."""
    criteria = state.criteria
    return filter_organizations(organizations, criteria.query, criteria.categories)


__all__ = [
    "apply_filters",
    "derive_categories",
    "filter_category_options",
    "filter_organizations",
    "matches_categories",
    "matches_query",
]
