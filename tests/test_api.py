import json

from conftest import auth_headers, make_ad, make_user

AD = {
    "title": "Oak Chair",
    "categoryName": "Chairs",
    "cityName": "Athens",
    "condition": "GOOD",
    "price": 80,
    "isAvailable": True,
    "description": "Solid oak",
}


def _post_ad(client, u, ad=None, files=None):
    return client.post(
        "/api/ads/save",
        data={"ad": json.dumps(ad or AD)},
        files=files,
        headers=auth_headers(u),
    )


# ---------- auth ----------

def test_register_and_login(client, static_data):
    body = {
        "username": "carol", "password": "Secret#123", "firstName": "Carol",
        "lastName": "K", "email": "carol@example.com", "phone": "123",
    }
    r = client.post("/api/auth/register", json=body)
    assert r.status_code == 201
    assert r.json()["username"] == "carol"
    assert r.json()["role"] == "USER"

    r = client.post("/api/auth/register", json=body)
    assert r.status_code == 409
    assert r.json()["code"] == "userAlreadyExists"

    r = client.post("/api/auth/login", json={"username": "carol", "password": "Secret#123"})
    assert r.status_code == 200
    assert r.json()["token"]
    assert r.json()["firstname"] == "Carol"


def test_register_validation_errors(client):
    r = client.post("/api/auth/register", json={"username": "x", "password": "weak"})
    assert r.status_code == 400
    data = r.json()
    assert data["code"] == "userValidationFailed"
    fields = {e["field"] for e in data["errors"]}
    assert {"password", "firstName", "lastName", "email", "phone"} <= fields


def test_login_with_bad_password(client, user):
    r = client.post("/api/auth/login", json={"username": "alice", "password": "nope"})
    assert r.status_code == 401
    assert r.json() == {"code": "userNotAuthorized", "description": "User not authorized"}


# ---------- ads ----------

def test_create_ad_requires_login(client, static_data):
    r = client.post("/api/ads/save", data={"ad": json.dumps(AD)})
    assert r.status_code == 401


def test_create_and_fetch_ad_with_image(client, user, static_data):
    r = _post_ad(client, user, files={"image": ("chair.png", b"png-bytes", "image/png")})
    assert r.status_code == 201
    created = r.json()
    assert created["imagePath"] == f"/uploads/ads/{created['id']}/image.png"
    assert created["category"] == {"id": static_data["Chairs"].id, "category": "Chairs"}
    assert created["city"]["cityName"] == "Athens"
    assert created["userFirstName"] == "Alice"

    r = client.get(f"/api/ads/{created['id']}")
    assert r.status_code == 200
    assert r.json()["title"] == "Oak Chair"


def test_create_ad_validation(client, user, static_data):
    r = _post_ad(client, user, ad={**AD, "title": "", "condition": "SHINY"})
    assert r.status_code == 400
    assert {e["field"] for e in r.json()["errors"]} == {"title", "condition"}

    r = client.post("/api/ads/save", data={"ad": "not json"}, headers=auth_headers(user))
    assert r.status_code == 400


def test_create_ad_unknown_category(client, user, static_data):
    r = _post_ad(client, user, ad={**AD, "categoryName": "Nonexistent"})
    assert r.status_code == 404
    assert r.json()["code"] == "categoryNotFound"


def test_create_ad_rejects_non_image(client, user, static_data):
    r = _post_ad(client, user, files={"image": ("notes.txt", b"hello", "text/plain")})
    assert r.status_code == 400
    assert r.json()["code"] == "imageInvalidArgument"


def test_update_and_delete_are_owner_only(client, db, user, other_user, admin, static_data):
    ad = make_ad(db, user, static_data["Chairs"], static_data["Athens"])
    payload = {"ad": json.dumps({**AD, "title": "Renamed"})}

    r = client.put(f"/api/ads/{ad.id}", data=payload, headers=auth_headers(other_user))
    assert r.status_code == 403
    assert r.json()["code"] == "adForbidden"

    r = client.put(f"/api/ads/{ad.id}", data=payload, headers=auth_headers(user))
    assert r.status_code == 200
    assert r.json()["title"] == "Renamed"

    r = client.delete(f"/api/ads/{ad.id}", headers=auth_headers(other_user))
    assert r.status_code == 403

    r = client.delete(f"/api/ads/{ad.id}", headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["code"] == "SUCCESS"
    assert client.get(f"/api/ads/{ad.id}").status_code == 404


def test_missing_ad(client):
    r = client.get("/api/ads/12345")
    assert r.status_code == 404
    assert r.json() == {"code": "adNotFound", "description": "Ad with ID 12345 not found"}


def test_listing_endpoints(client, db, user, other_user, static_data):
    make_ad(db, user, static_data["Chairs"], static_data["Athens"], title="Mine", price="10.00")
    make_ad(db, other_user, static_data["Tables"], static_data["Patras"], title="Theirs",
            price="20.00", is_available=False)

    assert [a["title"] for a in client.get("/api/ads/available").json()] == ["Mine"]
    assert [a["title"] for a in client.get(f"/api/ads/user/{other_user.id}").json()] == ["Theirs"]
    assert [a["title"] for a in client.get("/api/ads/my-ads", headers=auth_headers(user)).json()] == ["Mine"]

    r = client.get("/api/ads", params={"page": 0, "size": 1, "sortBy": "price", "sortDirection": "desc"})
    body = r.json()
    assert [a["title"] for a in body["data"]] == ["Theirs"]
    assert body["totalElements"] == 2
    assert body["totalPages"] == 2
    assert body["numberOfElements"] == 1


def test_sort_by_unknown_field(client):
    r = client.get("/api/ads", params={"sortBy": "bogus"})
    assert r.status_code == 400
    assert r.json()["code"] == "sortInvalidArgument"


def test_search_endpoints(client, db, user, other_user, static_data):
    make_ad(db, user, static_data["Chairs"], static_data["Athens"], title="Oak chair", price="60.00")
    make_ad(db, other_user, static_data["Chairs"], static_data["Patras"], title="Cheap chair", price="5.00")
    make_ad(db, other_user, static_data["Tables"], static_data["Athens"], title="Big table", price="600.00")

    r = client.post("/api/ads/search", json={"categoryName": "chairs"})
    assert [a["title"] for a in r.json()] == ["Oak chair", "Cheap chair"]

    r = client.post("/api/ads/search", json={"myAds": True}, headers=auth_headers(other_user))
    assert [a["title"] for a in r.json()] == ["Cheap chair", "Big table"]

    r = client.get("/api/ads/search/paginated",
                   params={"minPrice": 50, "maxPrice": 500, "page": 0, "pageSize": 10})
    body = r.json()
    assert [a["title"] for a in body["data"]] == ["Oak chair"]
    assert body["totalPages"] == 1

    r = client.get("/api/ads/search/paginated", params={"condition": "good", "cityName": "athens"})
    assert r.json()["totalElements"] == 2

    r = client.get("/api/ads/search/paginated", params={"condition": "shiny"})
    assert r.status_code == 400
    assert r.json()["code"] == "conditionInvalidArgument"


# ---------- users (admin) ----------

def test_user_admin_requires_admin_role(client, user):
    assert client.get("/api/users/paginated").status_code == 401
    r = client.get("/api/users/paginated", headers=auth_headers(user))
    assert r.status_code == 403
    assert r.json()["code"] == "userForbidden"


def test_user_admin_endpoints(client, db, admin, user, static_data):
    h = auth_headers(admin)

    body = client.get("/api/users/paginated/sorted",
                      params={"sortBy": "username", "sortDirection": "desc"}, headers=h).json()
    assert [u["username"] for u in body["data"]] == ["root", "alice"]

    r = client.post("/api/users/search", json={"email": "alice@example.com"}, headers=h)
    assert [u["username"] for u in r.json()] == ["alice"]

    r = client.put(f"/api/users/{user.id}/role", json={"role": "admin"}, headers=h)
    assert r.status_code == 200
    assert r.json()["role"] == "ADMIN"

    r = client.put(f"/api/users/{user.id}/role", json={"role": "KING"}, headers=h)
    assert r.status_code == 400

    make_ad(db, user, static_data["Chairs"], static_data["Athens"])
    r = client.delete("/api/users/alice", headers=h)
    assert r.status_code == 409
    assert r.json()["code"] == "userReferentialIntegrity"

    make_user(db, "temp")
    assert client.delete("/api/users/temp", headers=h).status_code == 200
    assert client.delete("/api/users/temp", headers=h).status_code == 404


# ---------- reference data ----------

def test_reference_data(client, static_data):
    assert client.get("/api/categories").json() == [
        {"id": static_data["Chairs"].id, "category": "Chairs"},
        {"id": static_data["Tables"].id, "category": "Tables"},
    ]
    assert [c["cityName"] for c in client.get("/api/cities").json()] == ["Athens", "Patras"]


# ---------- malformed input ----------

def _user_body(**overrides):
    body = {
        "username": "carol", "password": "Secret#123", "firstName": "Carol",
        "lastName": "K", "email": "carol@example.com", "phone": "123",
    }
    body.update(overrides)
    return body


def test_register_rejects_non_text_fields(client):
    r = client.post("/api/auth/register", json=_user_body(phone=6900000000, username=12345))
    assert r.status_code == 400
    data = r.json()
    assert data["code"] == "userValidationFailed"
    assert {e["field"] for e in data["errors"]} == {"phone", "username"}
    assert "Contact phone must be text." in [e["message"] for e in data["errors"]]


def test_login_rejects_non_text_username(client, user):
    r = client.post("/api/auth/login", json={"username": 42, "password": "Secret#123"})
    assert r.status_code == 400
    assert r.json()["code"] == "authValidationFailed"


def test_create_ad_rejects_numeric_title(client, user, static_data):
    r = _post_ad(client, user, ad={**AD, "title": 12345})
    assert r.status_code == 400
    assert r.json()["code"] == "adValidationFailed"
    assert [e["field"] for e in r.json()["errors"]] == ["title"]


def test_search_body_type_error_is_validation_failure(client):
    r = client.post("/api/ads/search", json={"minPrice": "abc"})
    assert r.status_code == 400
    data = r.json()
    assert data["code"] == "requestValidationFailed"
    assert [e["field"] for e in data["errors"]] == ["minPrice"]


def test_query_and_path_type_errors(client):
    r = client.get("/api/ads", params={"page": "abc"})
    assert r.status_code == 400
    assert r.json()["code"] == "requestValidationFailed"
    assert r.json()["errors"][0]["field"] == "page"

    r = client.get("/api/ads/abc")
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "ad_id"


def test_unknown_route_keeps_error_shape(client):
    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    assert r.json() == {"code": "notFound", "description": "Not Found"}

    r = client.patch("/api/categories")
    assert r.status_code == 405
    assert r.json()["code"] == "methodNotAllowed"


def test_users_cannot_be_sorted_by_password(client, admin):
    r = client.get("/api/users/paginated/sorted", params={"sortBy": "password"}, headers=auth_headers(admin))
    assert r.status_code == 400
    assert r.json()["code"] == "sortInvalidArgument"
