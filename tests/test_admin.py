import pytest
from sqlalchemy import event

from conftest import ADMIN_EMAIL, PASSWORD, auth_headers, login, signup
from database.connection import SessionLocal, engine
from models.rating import Rating
from models.store import Store
from services.user import list_users


def new_user_payload(**overrides):
    payload = {
        "name": "Admin Created Test Account",
        "email": "created@example.com",
        "password": PASSWORD,
        "address": "77 Sunset Boulevard",
        "role": "user",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def bare_owner(client, admin_token):
    response = client.post(
        "/api/admin/users",
        json=new_user_payload(email="bare.owner@example.com", role="store_owner"),
        headers=auth_headers(admin_token)
    )
    assert response.status_code == 201
    return response.json()


def test_admin_routes_reject_other_roles(client, user_token, owner_token):
    for token in (user_token, owner_token):
        response = client.get("/api/admin/stats", headers=auth_headers(token))
        assert response.status_code == 403
        assert response.json()["message"] == "Access denied. Requires role: admin"


def test_admin_routes_require_token(client):
    assert client.get("/api/admin/users").status_code == 401


def test_stats(client, admin_token, user_token, store_id):
    client.post(
        "/api/ratings",
        json={"store_id": store_id, "rating_value": 5},
        headers=auth_headers(user_token)
    )

    response = client.get("/api/admin/stats", headers=auth_headers(admin_token))

    assert response.status_code == 200
    assert response.json() == {"total_users": 3, "total_stores": 1, "total_ratings": 1}


def test_list_users_with_store_rating(client, admin_token, user_token, owner_signup, store_id):
    client.post(
        "/api/ratings",
        json={"store_id": store_id, "rating_value": 3},
        headers=auth_headers(user_token)
    )

    users = client.get("/api/admin/users", headers=auth_headers(admin_token)).json()

    by_email = {u["email"]: u for u in users}
    assert set(by_email) == {ADMIN_EMAIL, "user@example.com", "owner@example.com"}
    assert by_email["user@example.com"]["store"] is None
    owner_store = by_email["owner@example.com"]["store"]
    assert owner_store["id"] == store_id
    assert owner_store["average_rating"] == 3
    assert owner_store["total_ratings"] == 1


def test_list_users_filters(client, admin_token, user_signup, owner_signup):
    headers = auth_headers(admin_token)

    owners = client.get("/api/admin/users", params={"role": "store_owner"}, headers=headers).json()
    assert [u["email"] for u in owners] == ["owner@example.com"]

    by_address = client.get("/api/admin/users", params={"search": "baker street"}, headers=headers).json()
    assert [u["email"] for u in by_address] == ["user@example.com"]

    combined = client.get(
        "/api/admin/users",
        params={"search": "example.com", "role": "admin"},
        headers=headers
    ).json()
    assert [u["email"] for u in combined] == [ADMIN_EMAIL]


def test_list_users_rejects_unknown_role(client, admin_token):
    response = client.get("/api/admin/users", params={"role": "superuser"}, headers=auth_headers(admin_token))

    assert response.status_code == 400
    assert response.json()["details"]["errors"][0]["field"] == "role"


def test_get_user(client, admin_token, owner_signup, store_id):
    user_id = owner_signup["user"]["id"]

    response = client.get(f"/api/admin/users/{user_id}", headers=auth_headers(admin_token))

    assert response.status_code == 200
    assert response.json()["role"] == "store_owner"
    assert response.json()["store"]["id"] == store_id


def test_get_missing_user(client, admin_token):
    response = client.get("/api/admin/users/does-not-exist", headers=auth_headers(admin_token))

    assert response.status_code == 404
    assert response.json()["error_code"] == "ResourceNotFoundError"


@pytest.mark.parametrize("role", ["user", "store_owner", "admin"])
def test_create_user_any_role(client, admin_token, role):
    response = client.post(
        "/api/admin/users",
        json=new_user_payload(role=role),
        headers=auth_headers(admin_token)
    )

    assert response.status_code == 201
    assert response.json()["role"] == role
    assert login(client, "created@example.com").status_code == 200


def test_admin_created_owner_has_no_store(client, admin_token, bare_owner):
    detail = client.get(f"/api/admin/users/{bare_owner['id']}", headers=auth_headers(admin_token)).json()

    assert detail["store"] is None


def test_create_user_duplicate_email(client, admin_token, user_signup):
    response = client.post(
        "/api/admin/users",
        json=new_user_payload(email="user@example.com"),
        headers=auth_headers(admin_token)
    )

    assert response.status_code == 409


def test_create_user_validates(client, admin_token):
    response = client.post(
        "/api/admin/users",
        json=new_user_payload(password="password1"),
        headers=auth_headers(admin_token)
    )

    assert response.status_code == 400
    assert response.json()["details"]["errors"][0]["field"] == "password"


def test_delete_user_cascades(client, admin_token, owner_signup, user_token, store_id):
    client.post(
        "/api/ratings",
        json={"store_id": store_id, "rating_value": 4},
        headers=auth_headers(user_token)
    )

    response = client.delete(
        f"/api/admin/users/{owner_signup['user']['id']}",
        headers=auth_headers(admin_token)
    )

    assert response.status_code == 200
    assert response.json()["message"] == "User deleted successfully"
    session = SessionLocal()
    try:
        assert session.query(Store).count() == 0
        assert session.query(Rating).count() == 0
    finally:
        session.close()
    stats = client.get("/api/admin/stats", headers=auth_headers(admin_token)).json()
    assert stats == {"total_users": 2, "total_stores": 0, "total_ratings": 0}


def test_delete_missing_user(client, admin_token):
    response = client.delete("/api/admin/users/does-not-exist", headers=auth_headers(admin_token))

    assert response.status_code == 404


def test_list_stores(client, admin_token, store_id):
    stores = client.get("/api/admin/stores", headers=auth_headers(admin_token)).json()

    assert len(stores) == 1
    assert stores[0]["id"] == store_id
    assert stores[0]["owner"]["name"] == "Store Owner Test Account"
    assert "user_rating" not in stores[0]


def test_list_stores_search_matches_owner_email(client, admin_token, store_id):
    headers = auth_headers(admin_token)

    assert len(client.get("/api/admin/stores", params={"search": "owner@"}, headers=headers).json()) == 1
    assert len(client.get("/api/admin/stores", params={"search": "springfield"}, headers=headers).json()) == 1
    assert client.get("/api/admin/stores", params={"search": "nomatch"}, headers=headers).json() == []


def test_get_store(client, admin_token, store_id):
    response = client.get(f"/api/admin/stores/{store_id}", headers=auth_headers(admin_token))

    assert response.status_code == 200
    assert response.json()["name"] == "Springfield Corner Grocery"


def test_get_missing_store(client, admin_token):
    response = client.get("/api/admin/stores/does-not-exist", headers=auth_headers(admin_token))

    assert response.status_code == 404


def test_create_store(client, admin_token, bare_owner):
    response = client.post("/api/admin/stores", json={
        "name": "Brand New Admin Created Store",
        "address": "3 Station Approach",
        "owner_id": bare_owner["id"],
    }, headers=auth_headers(admin_token))

    assert response.status_code == 201
    store = response.json()
    assert store["owner"]["id"] == bare_owner["id"]
    assert store["average_rating"] == 0
    assert store["total_ratings"] == 0


def test_create_store_owner_checks(client, admin_token, user_signup, owner_signup):
    headers = auth_headers(admin_token)
    cases = {
        "does-not-exist": "Store owner not found",
        user_signup["user"]["id"]: "User must be a store owner",
        owner_signup["user"]["id"]: "Store owner already has a store",
    }
    for owner_id, message in cases.items():
        response = client.post("/api/admin/stores", json={
            "name": "Brand New Admin Created Store",
            "address": "3 Station Approach",
            "owner_id": owner_id,
        }, headers=headers)
        assert response.status_code == 400
        assert response.json()["message"] == message
        assert response.json()["details"]["field"] == "owner_id"


def test_create_store_validates_name(client, admin_token, bare_owner):
    response = client.post("/api/admin/stores", json={
        "name": "Tiny",
        "address": "3 Station Approach",
        "owner_id": bare_owner["id"],
    }, headers=auth_headers(admin_token))

    assert response.status_code == 400
    assert response.json()["details"]["errors"][0]["message"] == "Store name must be at least 20 characters"


def test_delete_store_cascades_ratings(client, admin_token, owner_token, user_token, store_id):
    client.post(
        "/api/ratings",
        json={"store_id": store_id, "rating_value": 2},
        headers=auth_headers(user_token)
    )

    response = client.delete(f"/api/admin/stores/{store_id}", headers=auth_headers(admin_token))

    assert response.status_code == 200
    assert response.json()["message"] == "Store deleted successfully"
    assert client.get("/api/ratings/mine", headers=auth_headers(user_token)).json() == []
    assert client.get("/api/stores/my-store", headers=auth_headers(owner_token)).status_code == 404


def test_delete_missing_store(client, admin_token):
    response = client.delete("/api/admin/stores/does-not-exist", headers=auth_headers(admin_token))

    assert response.status_code == 404


@pytest.mark.parametrize("name,message", [
    ("N" * 19, "Name must be at least 20 characters"),
    ("N" * 61, "Name must be at most 60 characters"),
])
def test_create_user_name_length(client, admin_token, name, message):
    response = client.post(
        "/api/admin/users",
        json=new_user_payload(name=name),
        headers=auth_headers(admin_token)
    )

    assert response.status_code == 400
    error = response.json()["details"]["errors"][0]
    assert error["field"] == "name"
    assert error["message"] == message
    assert login(client, "created@example.com").status_code == 401


def count_list_users_statements():
    statements = []

    def record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    session = SessionLocal()
    event.listen(engine, "before_cursor_execute", record)
    try:
        users = list_users(session)
    finally:
        event.remove(engine, "before_cursor_execute", record)
        session.close()
    return len(statements), users


def test_user_listing_query_count_does_not_grow_with_owners(client, owner_signup):
    one_owner, users = count_list_users_statements()
    assert users[0].store is not None

    for i in range(3):
        response = signup(
            client,
            f"owner{i}@example.com",
            name=f"Additional Store Owner {i:02d}",
            role="store_owner"
        )
        assert response.status_code == 201

    four_owners, users = count_list_users_statements()
    assert four_owners == one_owner
    assert len([u for u in users if u.store is not None]) == 4
