"""Search state and filtering for the organization directory."""

from .engine import (
    apply_filters,
    derive_categories,
    filter_category_options,
    filter_organizations,
    matches_categories,
    matches_query,
)
from .state import SearchCriteria, SearchFilterState

__all__ = [
    "SearchCriteria",
    "SearchFilterState",
    "apply_filters",
    "derive_categories",
    "filter_category_options",
    "filter_organizations",
    "matches_categories",
    "matches_query",
]
