"""Stale-while-revalidate cache for the organization list.

Every fetch is numbered when it is issued. A completed fetch is published only if no
later-issued fetch has already been published, so a slow response can never replace a
newer list. Readers always see the latest published ``Snapshot``.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from philanthrohub.directory.models import Organization
from philanthrohub.errors import TransientFetchError

LOGGER = logging.getLogger(__name__)

Fetcher = Callable[[], Sequence[Organization]]
Scheduler = Callable[[Callable[[], None]], None]


@dataclass(frozen=True, slots=True)
class Snapshot:
    """A published organization list.

    Attributes:
        organizations: Organizations in listing order.
        sequence: Issue number of the fetch that produced the list.
        fetched_at: Clock reading when the fetch completed.
    """

    organizations: tuple[Organization, ...]
    sequence: int
    fetched_at: float


@dataclass(frozen=True, slots=True)
class QueryResult:
    """What a reader sees when it asks for the organization list.

    Attributes:
        organizations: Latest published list, or the last known one after a failure.
        is_loading: No list has been published and no fetch has failed yet.
        error: Failure of the most recent fetch, if it failed.
        updated_at: Clock reading of the published list, if any.
        is_stale: The published list is older than the stale window.
    """

    organizations: tuple[Organization, ...] = ()
    is_loading: bool = False
    error: Optional[TransientFetchError] = None
    updated_at: Optional[float] = None
    is_stale: bool = False

    @property
    def is_error(self) -> bool:
        """Return whether the most recent fetch failed."""
        return self.error is not None


def _run_in_thread(task: Callable[[], None]) -> None:
    threading.Thread(target=task, name="organizations-refresh", daemon=True).start()


class OrganizationsQuery:
    """Serve the organization list from cache while refreshing it in the background."""

    def __init__(
        self,
        fetch: Fetcher,
        *,
        stale_time: float = 60.0,
        refetch_interval: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
        scheduler: Scheduler = _run_in_thread,
    ) -> None:
        """Initialize the query.

        Args:
            fetch: Callable returning the full list or raising ``TransientFetchError``.
            stale_time: Seconds after which a read also triggers a background refresh.
            refetch_interval: Seconds between refreshes while polling.
            clock: Monotonic clock used for freshness checks.
            scheduler: Runs background refreshes; defaults to a daemon thread per refresh.
        """
        self._fetch = fetch
        self._stale_time = stale_time
        self._refetch_interval = refetch_interval
        self._clock = clock
        self._scheduler = scheduler
        self._lock = threading.Lock()
        self._snapshot: Optional[Snapshot] = None
        self._error: Optional[TransientFetchError] = None
        self._error_sequence = 0
        self._failed_at = 0.0
        self._issued = 0
        self._resolved = 0
        self._valid_after = 0
        self._background_pending = False
        self._listeners: list[Callable[[QueryResult], None]] = []
        self._stop_event = threading.Event()
        self._poller: Optional[threading.Thread] = None

    @property
    def snapshot(self) -> Optional[Snapshot]:
        """Return the latest published snapshot."""
        return self._snapshot

    def read(self) -> QueryResult:
        """Return the organization list for display.

        Fetches synchronously when nothing usable is cached (first read, first read after
        ``invalidate``, or a read after the only fetches so far failed). Otherwise the
        cached list is returned at once, and a background refresh is scheduled if it is
        stale. After a failed fetch, neither kind of retry happens until
        ``refetch_interval`` has passed since the failure.
        """
        with self._lock:
            must_fetch = self._resolved <= self._valid_after or (
                self._snapshot is None and self._error is not None and self._retry_due()
            )
        if must_fetch:
            self.refresh()

        result = self.peek()
        if result.is_stale:
            with self._lock:
                retry_due = self._retry_due()
            if retry_due:
                self._schedule_background_refresh()
        return result

    def peek(self) -> QueryResult:
        """Return the current result without fetching."""
        with self._lock:
            snapshot = self._snapshot
            error = self._error
        if snapshot is None:
            return QueryResult(is_loading=error is None, error=error)
        age = self._clock() - snapshot.fetched_at
        return QueryResult(
            organizations=snapshot.organizations,
            error=error,
            updated_at=snapshot.fetched_at,
            is_stale=age >= self._stale_time,
        )

    def refresh(self) -> bool:
        """Fetch the list now and publish it unless a later fetch already was.

        Returns:
            bool: True when the fetched list was published.
        """
        with self._lock:
            self._issued += 1
            sequence = self._issued

        try:
            organizations = tuple(self._fetch())
        except TransientFetchError as exc:
            with self._lock:
                published = self._snapshot.sequence if self._snapshot else 0
                superseded = sequence < published
                if not superseded and sequence > self._error_sequence:
                    self._error = exc
                    self._failed_at = self._clock()
                    self._error_sequence = sequence
                self._resolved = max(self._resolved, sequence)
            if superseded:
                LOGGER.debug("Ignoring failed fetch %d; fetch %d already published.", sequence, published)
                return False
            LOGGER.warning("Failed to refresh organizations: %s", exc)
            self._notify()
            return False

        with self._lock:
            self._resolved = max(self._resolved, sequence)
            if self._snapshot is not None and sequence < self._snapshot.sequence:
                LOGGER.debug(
                    "Discarding fetch %d; fetch %d already published.",
                    sequence,
                    self._snapshot.sequence,
                )
                return False
            self._snapshot = Snapshot(
                organizations=organizations,
                sequence=sequence,
                fetched_at=self._clock(),
            )
            if sequence > self._error_sequence:
                self._error = None
        LOGGER.debug("Published %d organizations from fetch %d.", len(organizations), sequence)
        self._notify()
        return True

    def invalidate(self) -> None:
        """Mark the cached list as outdated so the next ``read`` fetches before returning."""
        with self._lock:
            self._valid_after = self._issued

    def subscribe(self, listener: Callable[[QueryResult], None]) -> Callable[[], None]:
        """Call ``listener`` after every published list or failed fetch.

        Returns:
            Callable[[], None]: Removes the listener when called.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start_polling(self) -> None:
        """Refresh every ``refetch_interval`` seconds on a daemon thread until ``stop``.

        Raises:
            RuntimeError: If polling is already running.
        """
        if self._poller is not None:
            raise RuntimeError("Polling is already running.")
        self._stop_event.clear()
        self._poller = threading.Thread(target=self._poll, name="organizations-poller", daemon=True)
        self._poller.start()

    def stop(self) -> None:
        """Stop polling and wait briefly for the poller to exit."""
        self._stop_event.set()
        if self._poller is not None:
            self._poller.join(timeout=5)
            self._poller = None

    def _retry_due(self) -> bool:
        # Caller holds the lock.
        if self._error is None:
            return True
        return self._clock() - self._failed_at >= self._refetch_interval

    def _poll(self) -> None:
        while not self._stop_event.wait(self._refetch_interval):
            self.refresh()

    def _schedule_background_refresh(self) -> None:
        with self._lock:
            if self._background_pending:
                return
            self._background_pending = True

        def task() -> None:
            try:
                self.refresh()
            finally:
                with self._lock:
                    self._background_pending = False

        self._scheduler(task)

    def _notify(self) -> None:
        result = self.peek()
        for listener in list(self._listeners):
            listener(result)


__all__ = ["Fetcher", "OrganizationsQuery", "QueryResult", "Scheduler", "Snapshot"]
