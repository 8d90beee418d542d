import uuid

from conftest import listing_body, login, signup

LISTINGS = "/api/v1/listings"
MINE = "/api/v1/user/listings"


def _seller(client, catalog, city_id=None, email="ana@example.com", phone="09171234567"):
    return signup(client, city_id or catalog.city_a, email=email, phone=phone).json()["user"]


def _create(client, catalog, **overrides):
    r = client.post(MINE, json=listing_body(catalog.electronics, **overrides))
    assert r.status_code == 201, r.text
    return r.json()


def test_public_read_requires_city(client, catalog):
    r = client.get(LISTINGS)
    assert r.status_code == 400
    assert r.json()["error"] == "cityId is required. Listings are scoped by city."

    r = client.get(f"{LISTINGS}/{uuid.uuid4()}")
    assert r.status_code == 400
    assert r.json()["error"] == "cityId is required. Listings are scoped by city."


def test_public_read_is_scoped_to_city(client, catalog):
    _seller(client, catalog, catalog.city_a)
    in_a = _create(client, catalog, title="Desk lamp")
    _seller(client, catalog, catalog.city_b, email="ben@example.com", phone="09181234567")
    in_b = _create(client, catalog, title="Rice cooker")
    client.cookies.clear()

    a_titles = [l["title"] for l in client.get(LISTINGS, params={"cityId": str(catalog.city_a)}).json()]
    b_titles = [l["title"] for l in client.get(LISTINGS, params={"cityId": str(catalog.city_b)}).json()]
    assert a_titles == ["Desk lamp"]
    assert b_titles == ["Rice cooker"]

    ok = client.get(f"{LISTINGS}/{in_a['id']}", params={"cityId": str(catalog.city_a)})
    assert ok.status_code == 200
    assert ok.json()["user"]["firstName"] == "Ana"
    assert [i["position"] for i in ok.json()["images"]] == [0, 1]

    cross = client.get(f"{LISTINGS}/{in_b['id']}", params={"cityId": str(catalog.city_a)})
    assert cross.status_code == 404
    assert cross.json()["error"] == "Listing not found or does not belong to this city"


def test_public_filters_and_pagination(client, catalog):
    _seller(client, catalog)
    for i in range(3):
        _create(client, catalog, title=f"Phone {i}")
    _create(client, catalog, title="Sofa", categoryId=str(catalog.furniture))
    _create(client, catalog, title="Old TV", status="SOLD")
    city = str(catalog.city_a)

    active = client.get(LISTINGS, params={"cityId": city}).json()
    assert len(active) == 4
    assert all(l["status"] == "ACTIVE" for l in active)

    sold = client.get(LISTINGS, params={"cityId": city, "status": "SOLD"}).json()
    assert [l["title"] for l in sold] == ["Old TV"]

    furniture = client.get(LISTINGS, params={"cityId": city, "categoryId": str(catalog.furniture)}).json()
    assert [l["title"] for l in furniture] == ["Sofa"]

    assert len(client.get(LISTINGS, params={"cityId": city, "limit": 2}).json()) == 2
    assert len(client.get(LISTINGS, params={"cityId": city, "limit": 500}).json()) == 4
    assert len(client.get(LISTINGS, params={"cityId": city, "offset": -5}).json()) == 4
    assert len(client.get(LISTINGS, params={"cityId": city, "offset": 3}).json()) == 1


def test_unknown_status_is_rejected(client, catalog):
    r = client.get(LISTINGS, params={"cityId": str(catalog.city_a), "status": "ARCHIVED"})
    assert r.status_code == 400
    assert "status" in r.json()["details"]


def test_owned_endpoints_require_session(client, catalog):
    assert client.get(MINE).status_code == 401
    assert client.post(MINE, json=listing_body(catalog.electronics)).status_code == 401
    assert client.patch(f"{MINE}/{uuid.uuid4()}", json={"title": "x" * 5}).status_code == 401
    assert client.delete(f"{MINE}/{uuid.uuid4()}").json() == {"error": "Not authenticated"}


def test_create_stamps_owner_and_city(client, catalog):
    user = _seller(client, catalog)
    listing = _create(client, catalog, userId=str(uuid.uuid4()), cityId=str(catalog.city_b))
    assert listing["userId"] == user["id"]
    assert listing["cityId"] == str(catalog.city_a)
    assert listing["condition"] == "USED"
    assert listing["price"] == 8500
    assert listing["category"]["slug"] == "electronics"


def test_create_validates_enums_and_category(client, catalog):
    _seller(client, catalog)
    bad_condition = client.post(MINE, json=listing_body(catalog.electronics, condition="LIKE_NEW"))
    assert bad_condition.status_code == 400
    assert "condition" in bad_condition.json()["details"]

    bad_category = client.post(MINE, json=listing_body(uuid.uuid4()))
    assert bad_category.status_code == 400
    assert "categoryId" in bad_category.json()["details"]


def test_list_my_listings_only_returns_mine(client, catalog):
    _seller(client, catalog)
    mine = _create(client, catalog, title="My lamp")
    _seller(client, catalog, email="ben@example.com", phone="09181234567")
    _create(client, catalog, title="Ben's chair")
    login(client, "ana@example.com")

    assert [l["id"] for l in client.get(MINE).json()] == [mine["id"]]


def test_other_users_listing_is_not_found(client, catalog):
    _seller(client, catalog)
    _seller(client, catalog, email="bob@example.com", phone="09181234567")
    bobs = _create(client, catalog, title="Bob's bike")
    login(client, "ana@example.com")

    missing = client.get(f"{MINE}/{uuid.uuid4()}")
    not_mine = client.get(f"{MINE}/{bobs['id']}")
    assert not_mine.status_code == missing.status_code == 404
    assert not_mine.json() == missing.json()

    assert client.patch(f"{MINE}/{bobs['id']}", json={"title": "Stolen bike"}).status_code == 404
    assert client.delete(f"{MINE}/{bobs['id']}").status_code == 404

    login(client, "bob@example.com")
    assert client.get(f"{MINE}/{bobs['id']}").json()["title"] == "Bob's bike"


def test_update_and_delete_own_listing(client, catalog):
    _seller(client, catalog)
    listing = _create(client, catalog)

    r = client.patch(
        f"{MINE}/{listing['id']}",
        json={"title": "Mountain bike (sold)", "status": "SOLD", "images": ["https://img.example.com/new.jpg"]},
    )
    assert r.status_code == 200
    updated = r.json()
    assert updated["title"] == "Mountain bike (sold)"
    assert updated["status"] == "SOLD"
    assert updated["price"] == 8500
    assert [i["url"] for i in updated["images"]] == ["https://img.example.com/new.jpg"]

    assert client.delete(f"{MINE}/{listing['id']}").status_code == 204
    assert client.get(f"{MINE}/{listing['id']}").status_code == 404


def test_update_cannot_move_listing(client, catalog):
    user = _seller(client, catalog)
    listing = _create(client, catalog)
    r = client.patch(
        f"{MINE}/{listing['id']}",
        json={"title": "Renamed bike", "cityId": str(catalog.city_b), "userId": str(uuid.uuid4())},
    )
    assert r.status_code == 200
    assert r.json()["cityId"] == str(catalog.city_a)
    assert r.json()["userId"] == user["id"]


def test_update_in_mismatched_city_aborts_without_writing(client, catalog, move_user):
    user = _seller(client, catalog, catalog.city_a)
    listing = _create(client, catalog, title="Guitar")
    move_user(user["id"], catalog.city_b)
    login(client, "ana@example.com")

    r = client.patch(f"{MINE}/{listing['id']}", json={"title": "Guitar (price drop)", "price": 1})
    assert r.status_code == 500
    assert r.json() == {"error": "Listing does not belong to user's city"}

    assert client.delete(f"{MINE}/{listing['id']}").status_code == 500

    stored = client.get(f"{MINE}/{listing['id']}").json()
    assert stored["title"] == "Guitar"
    assert stored["price"] == 8500
    assert stored["cityId"] == str(catalog.city_a)


def test_new_listings_follow_owner_current_city(client, catalog, move_user):
    user = _seller(client, catalog, catalog.city_a)
    move_user(user["id"], catalog.city_b)
    login(client, "ana@example.com")
    assert _create(client, catalog)["cityId"] == str(catalog.city_b)
