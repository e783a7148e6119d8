"""Directory store tests."""

from __future__ import annotations

import pytest
from conftest import make_organization

from philanthrohub.directory import (
    PENDING_TAG,
    DirectoryStore,
    OrganizationDraft,
    parse_application,
    seed_organizations,
)
from philanthrohub.errors import ValidationError


def _application_payload() -> dict:
    return {
        "name": "Hope Trust",
        "website": "https://hope.org",
        "country": "India",
        "category": "Other",
        "otherCategory": "Arts & Culture",
        "description": "Bringing theatre workshops to rural schools.",
        "compliance": {"fcra": True},
        "contactEmail": "team@hope.org",
    }


def test_create_without_category_raises_and_leaves_list_unchanged(store: DirectoryStore) -> None:
    before = store.list_all()

    with pytest.raises(ValidationError) as excinfo:
        store.create(OrganizationDraft(name="A"))

    assert excinfo.value.message == "Name and category are required"
    assert set(excinfo.value.fields) == {"category"}
    assert store.list_all() == before


def test_create_with_empty_name_raises(store: DirectoryStore) -> None:
    with pytest.raises(ValidationError) as excinfo:
        store.create(OrganizationDraft(name="", category="Health"))

    assert set(excinfo.value.fields) == {"name"}
    assert len(store) == 2


def test_create_prepends_unverified_record_with_verified_tag(store: DirectoryStore) -> None:
    created = store.create(OrganizationDraft(name="A", category="Health"))

    listing = store.list_all()
    assert listing[0] == created
    assert created.verified is False
    assert created.tags == ["Health", "Verified"]
    assert created.description == ""
    assert created.image
    assert len(listing) == 3


def test_created_ids_are_unique(store: DirectoryStore) -> None:
    created = [store.create(OrganizationDraft(name=f"Org {n}", category="Health")) for n in range(3)]

    ids = [organization.id for organization in store.list_all()]
    assert len(ids) == len(set(ids))
    assert [organization.id for organization in created] == ["3", "4", "5"]


def test_next_id_skips_taken_identifiers() -> None:
    store = DirectoryStore([make_organization("2", "Solo", "Education")])

    created = store.create(OrganizationDraft(name="Next", category="Health"))

    assert created.id == "3"


def test_duplicate_ids_are_rejected() -> None:
    with pytest.raises(ValueError):
        DirectoryStore(
            [
                make_organization("1", "First", "Education"),
                make_organization("1", "Second", "Health"),
            ]
        )


def test_submit_marks_pending_and_resolves_other_category(store: DirectoryStore) -> None:
    application = parse_application(_application_payload())

    created = store.submit(application)

    assert store.list_all()[0] == created
    assert created.category == "Arts & Culture"
    assert created.tags == ["Arts & Culture", PENDING_TAG]
    assert created.verified is False
    assert created.country == "India"
    assert created.website == "https://hope.org"


def test_list_all_returns_a_copy(store: DirectoryStore) -> None:
    listing = store.list_all()
    listing.clear()

    assert len(store.list_all()) == 2


def test_seed_organizations_have_unique_ids_and_categories() -> None:
    seeded = seed_organizations()

    assert len({organization.id for organization in seeded}) == len(seeded)
    assert all(organization.category for organization in seeded)
    assert DirectoryStore(seeded).list_all() == seeded
