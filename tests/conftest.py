"""Shared fixtures and test doubles."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

from philanthrohub.api import create_app
from philanthrohub.client import DirectoryClient, OrganizationService, OrganizationsQuery
from philanthrohub.directory import DirectoryStore, Organization

BASE_URL = "http://testserver"


class FakeResponse:
    """Minimal stand-in for ``requests.Response``."""

    def __init__(self, status_code: int, body: Any = None, *, invalid_json: bool = False) -> None:
        self.status_code = status_code
        self._body = body
        self._invalid_json = invalid_json

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._body


class StubSession:
    """Session double that answers every request through ``handler``."""

    def __init__(self, handler: Callable[[str, str, Any], FakeResponse]) -> None:
        self._handler = handler
        self.calls: list[tuple[str, str, Any]] = []
        self.closed = False

    def get(self, url: str, **_: Any) -> FakeResponse:
        self.calls.append(("GET", url, None))
        return self._handler("GET", url, None)

    def post(self, url: str, json: Any = None, **_: Any) -> FakeResponse:
        self.calls.append(("POST", url, json))
        return self._handler("POST", url, json)

    def close(self) -> None:
        self.closed = True


class AppSession:
    """Session double that forwards requests to an in-process FastAPI application."""

    def __init__(self, app: Any) -> None:
        self._client = TestClient(app)
        self.closed = False

    def get(self, url: str, **_: Any) -> FakeResponse:
        response = self._client.get(url)
        return FakeResponse(response.status_code, response.json())

    def post(self, url: str, json: Any = None, **_: Any) -> FakeResponse:
        response = self._client.post(url, json=json)
        return FakeResponse(response.status_code, response.json())

    def close(self) -> None:
        # The application outlives a single CLI invocation, so the transport stays open.
        self.closed = True


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def run_now(task: Callable[[], None]) -> None:
    """Scheduler that runs background refreshes inline."""
    task()


def make_organization(
    identifier: str,
    name: str,
    category: str,
    tags: list[str] | None = None,
    **extra: Any,
) -> Organization:
    return Organization(
        id=identifier,
        name=name,
        category=category,
        tags=tags if tags is not None else [category],
        **extra,
    )


@pytest.fixture
def relief_and_education() -> list[Organization]:
    """Return the Red Cross / EduFund pair used by the filtering scenarios."""
    return [
        make_organization("1", "Red Cross", "Disaster Relief", ["Relief", "Verified"]),
        make_organization("2", "EduFund", "Education", ["Education", "Verified"]),
    ]


@pytest.fixture
def store(relief_and_education: list[Organization]) -> DirectoryStore:
    return DirectoryStore(relief_and_education)


@pytest.fixture
def app_session(store: DirectoryStore) -> AppSession:
    return AppSession(create_app(store))


@pytest.fixture
def directory_client(app_session: AppSession) -> DirectoryClient:
    """Return a client talking to an in-process directory service."""
    service = OrganizationService(BASE_URL, session=app_session)
    return DirectoryClient(service, OrganizationsQuery(service.get_all, scheduler=run_now))


def env_with_home(tmp_path: Path) -> dict[str, str]:
    """Return environment variables pointing HOME to a temp directory.

    Args:
        tmp_path: Temporary directory provided by pytest.

    Returns:
        dict[str, str]: Environment mapping with HOME set and quiet logging.
    """
    env = dict(os.environ)
    env["HOME"] = str(tmp_path)
    env["PHILANTHROHUB__LOGGING__LEVEL"] = "ERROR"
    return env
