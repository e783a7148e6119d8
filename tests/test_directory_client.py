"""Directory client tests against the in-process service."""

from __future__ import annotations

import pytest
from conftest import FakeResponse, StubSession

from philanthrohub.client import DirectoryClient, OrganizationService
from philanthrohub.config.models import HubConfig
from philanthrohub.directory import OrganizationDraft, parse_application
from philanthrohub.errors import SubmissionError, ValidationError


def test_create_invalidates_cached_list(directory_client: DirectoryClient) -> None:
    before = directory_client.organizations()
    assert len(before.organizations) == 2

    created = directory_client.create_organization(OrganizationDraft(name="A", category="Health"))
    after = directory_client.organizations()

    assert after.organizations[0] == created
    assert len(after.organizations) == 3


def test_submit_invalidates_cached_list(directory_client: DirectoryClient) -> None:
    directory_client.organizations()
    application = parse_application(
        {
            "name": "Hope Trust",
            "website": "https://hope.org",
            "country": "Canada",
            "category": "Human Rights",
            "description": "Legal aid for refugees and asylum seekers.",
            "compliance": {"fcra": True},
            "contactEmail": "team@hope.org",
        }
    )

    created = directory_client.submit_application(application)

    assert created.tags == ["Human Rights", "Pending Verification"]
    assert directory_client.organizations().organizations[0].name == "Hope Trust"


def test_validation_failure_is_reraised_and_cache_kept(directory_client: DirectoryClient) -> None:
    directory_client.organizations()

    with pytest.raises(ValidationError):
        directory_client.create_organization({"name": "A"})

    assert len(directory_client.organizations().organizations) == 2


def test_submission_failure_is_reraised() -> None:
    session = StubSession(lambda method, url, body: FakeResponse(500, {"error": "boom"}))
    client = DirectoryClient.from_config(
        HubConfig(), service=OrganizationService("http://x", session=session)
    )

    with pytest.raises(SubmissionError):
        client.create_organization({"name": "A", "category": "Health"})

    client.close()
    assert session.closed


def test_from_config_uses_cache_settings() -> None:
    config = HubConfig.model_validate({"cache": {"stale_time_seconds": 5, "refetch_interval_seconds": 2}})
    session = StubSession(lambda method, url, body: FakeResponse(200, []))

    client = DirectoryClient.from_config(config, service=OrganizationService("http://x", session=session))

    assert client.query._stale_time == 5
    assert client.query._refetch_interval == 2
    assert client.organizations().organizations == ()
