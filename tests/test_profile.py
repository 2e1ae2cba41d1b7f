from conftest import auth_headers


def test_get_profile(client, user_signup):
    response = client.get("/api/user/profile", headers=auth_headers(user_signup["access_token"]))

    assert response.status_code == 200
    profile = response.json()
    assert profile["id"] == user_signup["user"]["id"]
    assert profile["name"] == "Regular Test User Account"
    assert profile["address"] == "221B Baker Street, London"
    assert profile["role"] == "user"


def test_update_name_only(client, user_token):
    response = client.put(
        "/api/user/profile",
        json={"name": "  Renamed Regular User Account  "},
        headers=auth_headers(user_token)
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Renamed Regular User Account"
    assert response.json()["address"] == "221B Baker Street, London"


def test_update_address_only(client, user_token):
    response = client.put(
        "/api/user/profile",
        json={"address": "42 Wallaby Way, Sydney"},
        headers=auth_headers(user_token)
    )

    assert response.status_code == 200
    profile = client.get("/api/user/profile", headers=auth_headers(user_token)).json()
    assert profile["address"] == "42 Wallaby Way, Sydney"
    assert profile["name"] == "Regular Test User Account"


def test_update_rejects_short_name(client, user_token):
    response = client.put(
        "/api/user/profile",
        json={"name": "Shorty"},
        headers=auth_headers(user_token)
    )

    assert response.status_code == 400
    assert response.json()["details"]["errors"][0]["field"] == "name"


def test_empty_update_changes_nothing(client, user_token):
    response = client.put("/api/user/profile", json={}, headers=auth_headers(user_token))

    assert response.status_code == 200
    assert response.json()["name"] == "Regular Test User Account"


def test_profile_edit_ignores_role_and_email(client, user_token):
    response = client.put(
        "/api/user/profile",
        json={"role": "admin", "email": "other@example.com"},
        headers=auth_headers(user_token)
    )

    assert response.status_code == 200
    assert response.json()["role"] == "user"
    assert response.json()["email"] == "user@example.com"


def test_update_rejects_long_name(client, user_token):
    response = client.put(
        "/api/user/profile",
        json={"name": "N" * 61},
        headers=auth_headers(user_token)
    )

    assert response.status_code == 400
    assert response.json()["details"]["errors"][0]["message"] == "Name must be at most 60 characters"
    profile = client.get("/api/user/profile", headers=auth_headers(user_token)).json()
    assert profile["name"] == "Regular Test User Account"
