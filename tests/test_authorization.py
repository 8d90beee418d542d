import asyncio
import logging
import uuid
from types import SimpleNamespace

import pytest

from app.core.errors import NotFoundOrForbidden, ScopeIntegrityError, ScopeRequiredError
from app.repositories.listings import CityScope, OwnerScope
from app.services.authorization import (
    Identity,
    authorize_listing_write,
    ensure_listing_in_scope,
    get_owned_listing,
    require_city_scope,
)

CITY_1 = uuid.uuid4()
CITY_2 = uuid.uuid4()
ALICE = Identity(user_id=uuid.uuid4(), city_id=CITY_1, name="Alice Cruz")
BOB = Identity(user_id=uuid.uuid4(), city_id=CITY_1, name="Bob Santos")


class FakeListingRepository:
    """Stores listings in memory and applies the owner scope like the real repository."""

    def __init__(self, *listings):
        self.listings = {l.id: l for l in listings}
        self.scopes = []

    async def find_one_by_id_and_scope(self, listing_id, scope):
        self.scopes.append(scope)
        listing = self.listings.get(listing_id)
        if listing is None or listing.user_id != scope.user_id:
            return None
        return listing


def _listing(owner: Identity, city_id=None):
    return SimpleNamespace(id=uuid.uuid4(), user_id=owner.user_id, city_id=city_id or owner.city_id)


def test_city_scope_is_mandatory():
    with pytest.raises(ScopeRequiredError) as exc:
        require_city_scope(None)
    assert exc.value.status_code == 400
    assert exc.value.message == "cityId is required. Listings are scoped by city."


def test_city_scope_is_built_from_city_id():
    assert require_city_scope(CITY_1) == CityScope(city_id=CITY_1)


def test_owned_lookup_uses_owner_scope():
    listing = _listing(ALICE)
    repo = FakeListingRepository(listing)
    assert asyncio.run(get_owned_listing(repo, listing.id, ALICE)) is listing
    assert repo.scopes == [OwnerScope(user_id=ALICE.user_id, city_id=ALICE.city_id)]


def test_someone_elses_listing_looks_missing():
    listing = _listing(BOB)
    repo = FakeListingRepository(listing)

    with pytest.raises(NotFoundOrForbidden) as not_owned:
        asyncio.run(get_owned_listing(repo, listing.id, ALICE))
    with pytest.raises(NotFoundOrForbidden) as missing:
        asyncio.run(get_owned_listing(repo, uuid.uuid4(), ALICE))

    assert not_owned.value.status_code == missing.value.status_code == 404
    assert not_owned.value.message == missing.value.message


def test_city_mismatch_is_integrity_fault(caplog):
    listing = _listing(ALICE, city_id=CITY_2)
    with caplog.at_level(logging.ERROR, logger="app.services.authorization"):
        with pytest.raises(ScopeIntegrityError) as exc:
            ensure_listing_in_scope(listing, ALICE)
    assert exc.value.status_code == 500
    assert any(str(listing.id) in r.getMessage() for r in caplog.records)


def test_matching_city_passes():
    ensure_listing_in_scope(_listing(ALICE), ALICE)


def test_write_checks_ownership_before_city():
    # Bob's listing in another city must still read as "not found" to Alice.
    listing = _listing(BOB, city_id=CITY_2)
    repo = FakeListingRepository(listing)
    with pytest.raises(NotFoundOrForbidden):
        asyncio.run(authorize_listing_write(repo, listing.id, ALICE))


def test_write_on_owned_listing_in_other_city_fails():
    listing = _listing(ALICE, city_id=CITY_2)
    repo = FakeListingRepository(listing)
    with pytest.raises(ScopeIntegrityError):
        asyncio.run(authorize_listing_write(repo, listing.id, ALICE))
