import pytest

from conftest import auth_headers, signup
from database.connection import SessionLocal
from models.rating import Rating


def rate(client, token, store_id, value):
    return client.post(
        "/api/ratings",
        json={"store_id": store_id, "rating_value": value},
        headers=auth_headers(token)
    )


def test_create_rating(client, user_signup, store_id):
    response = rate(client, user_signup["access_token"], store_id, 4)

    assert response.status_code == 201
    rating = response.json()
    assert rating["rating_value"] == 4
    assert rating["store_id"] == store_id
    assert rating["user_id"] == user_signup["user"]["id"]


def test_duplicate_rating_conflicts(client, user_token, store_id):
    rate(client, user_token, store_id, 4)

    response = rate(client, user_token, store_id, 2)
    assert response.status_code == 409
    assert response.json()["message"] == "You have already rated this store. Use PUT to update your rating."

    session = SessionLocal()
    try:
        ratings = session.query(Rating).filter(Rating.store_id == store_id).all()
        assert [r.rating_value for r in ratings] == [4]
    finally:
        session.close()


def test_rating_unknown_store(client, user_token):
    response = rate(client, user_token, "missing-store", 3)

    assert response.status_code == 404


@pytest.mark.parametrize("value", [0, 6, -1])
def test_rating_value_out_of_range(client, user_token, store_id, value):
    response = rate(client, user_token, store_id, value)

    assert response.status_code == 400
    assert response.json()["details"]["errors"][0]["field"] == "rating_value"


@pytest.mark.parametrize("value", [True, "5", 4.0, 3.5])
def test_rating_value_must_be_an_integer(client, user_token, store_id, value):
    response = rate(client, user_token, store_id, value)

    assert response.status_code == 400
    assert response.json()["details"]["errors"][0]["field"] == "rating_value"
    assert client.get("/api/ratings/mine", headers=auth_headers(user_token)).json() == []


@pytest.mark.parametrize("value", [True, "5", 4.0])
def test_rating_update_value_must_be_an_integer(client, user_token, store_id, value):
    rate(client, user_token, store_id, 2)

    response = client.put(
        f"/api/ratings/{store_id}",
        json={"rating_value": value},
        headers=auth_headers(user_token)
    )

    assert response.status_code == 400
    mine = client.get("/api/ratings/mine", headers=auth_headers(user_token)).json()
    assert mine[0]["rating_value"] == 2


def test_only_normal_users_rate(client, owner_token, admin_token, store_id):
    assert rate(client, owner_token, store_id, 5).status_code == 403
    assert rate(client, admin_token, store_id, 5).status_code == 403


def test_rating_requires_authentication(client, store_id):
    response = client.post("/api/ratings", json={"store_id": store_id, "rating_value": 3})

    assert response.status_code == 401


def test_update_rating(client, user_token, store_id):
    created = rate(client, user_token, store_id, 2).json()

    response = client.put(
        f"/api/ratings/{store_id}",
        json={"rating_value": 5},
        headers=auth_headers(user_token)
    )

    assert response.status_code == 200
    assert response.json()["id"] == created["id"]
    assert response.json()["rating_value"] == 5


def test_update_missing_rating(client, user_token, store_id):
    response = client.put(
        f"/api/ratings/{store_id}",
        json={"rating_value": 5},
        headers=auth_headers(user_token)
    )

    assert response.status_code == 404


def test_delete_rating_then_rate_again(client, user_token, store_id):
    rate(client, user_token, store_id, 1)

    response = client.delete(f"/api/ratings/{store_id}", headers=auth_headers(user_token))
    assert response.status_code == 200
    assert response.json()["message"] == "Rating deleted successfully"

    again = client.delete(f"/api/ratings/{store_id}", headers=auth_headers(user_token))
    assert again.status_code == 404

    assert rate(client, user_token, store_id, 3).status_code == 201


def test_my_ratings(client, user_token, store_id):
    assert client.get("/api/ratings/mine", headers=auth_headers(user_token)).json() == []

    rate(client, user_token, store_id, 3)

    ratings = client.get("/api/ratings/mine", headers=auth_headers(user_token)).json()
    assert len(ratings) == 1
    assert ratings[0]["store_id"] == store_id


def test_ratings_are_per_user(client, user_token, store_id):
    other = signup(client, "other@example.com", name="Another Regular Test User").json()

    assert rate(client, user_token, store_id, 5).status_code == 201
    assert rate(client, other["access_token"], store_id, 1).status_code == 201

    # Changing one user's rating leaves the other's alone
    client.put(f"/api/ratings/{store_id}", json={"rating_value": 4}, headers=auth_headers(user_token))
    mine = client.get("/api/ratings/mine", headers=auth_headers(other["access_token"])).json()
    assert mine[0]["rating_value"] == 1
