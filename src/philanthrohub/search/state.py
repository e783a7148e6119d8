"""Session-scoped search and category filter state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

Listener = Callable[["SearchCriteria"], None]


@dataclass(frozen=True, slots=True)
class SearchCriteria:
    """Immutable view of the current search inputs.

    Attributes:
        query: Free-text query, matched literally.
        categories: Selected categories in the order they were chosen.
    """

    query: str = ""
    categories: tuple[str, ...] = ()


class SearchFilterState:
    """Mutable container for the query and the selected categories.

    One instance lives for one browsing session. Derived values such as the visible
    organizations are never stored here; they are recomputed from ``criteria`` on read.
    """

    def __init__(self) -> None:
        self._query = ""
        self._categories: list[str] = []
        self._listeners: list[Listener] = []

    @property
    def search_query(self) -> str:
        """Return the current free-text query."""
        return self._query

    @property
    def selected_categories(self) -> tuple[str, ...]:
        """Return the selected categories in selection order."""
        return tuple(self._categories)

    @property
    def criteria(self) -> SearchCriteria:
        """Return an immutable snapshot of the query and selection."""
        return SearchCriteria(query=self._query, categories=tuple(self._categories))

    @property
    def has_active_filters(self) -> bool:
        """Return whether a query or a category selection is in effect."""
        return bool(self._query) or bool(self._categories)

    def set_search_query(self, query: str) -> None:
        """Replace the free-text query."""
        self._update(query, self._categories)

    def set_selected_categories(self, categories: Iterable[str]) -> None:
        """Replace the whole selection; repeated categories keep their first position."""
        self._update(self._query, list(dict.fromkeys(categories)))

    def toggle_category(self, category: str) -> None:
        """Deselect ``category`` when selected, otherwise append it to the selection."""
        if category in self._categories:
            updated = [selected for selected in self._categories if selected != category]
        else:
            updated = [*self._categories, category]
        self._update(self._query, updated)

    def reset(self) -> None:
        """Clear the query and the selection in one step."""
        self._update("", [])

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for criteria changes and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _update(self, query: str, categories: list[str]) -> None:
        if query == self._query and categories == self._categories:
            return
        self._query = query
        self._categories = categories
        criteria = self.criteria
        for listener in list(self._listeners):
            listener(criteria)


__all__ = ["Listener", "SearchCriteria", "SearchFilterState"]
