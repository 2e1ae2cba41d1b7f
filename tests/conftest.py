import os

# Settings are read at import time, so these must be in place before the app loads
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from database.base import Base
from database.connection import SessionLocal, engine, create_tables
from models.user import UserRole
from services.auth import create_user
from main import app

PASSWORD = "Password1!"
ADMIN_EMAIL = "admin@example.com"


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    create_tables()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def signup(client, email, name="Regular Test User Account", role="user",
           address="221B Baker Street, London", password=PASSWORD, **extra):
    payload = {
        "name": name,
        "email": email,
        "password": password,
        "address": address,
        "role": role,
        **extra,
    }
    return client.post("/api/auth/signup", json=payload)


def login(client, email, password=PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


@pytest.fixture
def admin_token(client):
    session = SessionLocal()
    try:
        create_user(
            db=session,
            name="Platform Administrator One",
            email=ADMIN_EMAIL,
            password=PASSWORD,
            address="1 Admin Plaza",
            role=UserRole.ADMIN
        )
    finally:
        session.close()
    response = login(client, ADMIN_EMAIL)
    assert response.status_code == 200
    return response.json()["access_token"]


@pytest.fixture
def user_signup(client):
    response = signup(client, "user@example.com")
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def user_token(user_signup):
    return user_signup["access_token"]


@pytest.fixture
def owner_signup(client):
    response = signup(
        client,
        "owner@example.com",
        name="Store Owner Test Account",
        role="store_owner",
        address="10 Market Street, Springfield",
        store_name="Springfield Corner Grocery"
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def owner_token(owner_signup):
    return owner_signup["access_token"]


@pytest.fixture
def store_id(client, owner_token):
    response = client.get("/api/stores/my-store", headers=auth_headers(owner_token))
    assert response.status_code == 200
    return response.json()["id"]
