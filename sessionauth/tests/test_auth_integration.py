from __future__ import annotations

from collections.abc import Iterator

import pytest
from flask import Flask
from flask.testing import FlaskClient
from sqlalchemy import create_engine, inspect
from sqlalchemy.pool import StaticPool

from sessionauth.app import create_app
from sessionauth.container import Container
from sessionauth.infrastructure.db import ENGINE, Base, SessionLocal
from sessionauth.infrastructure.db.models import Session, User
from sessionauth.scripts import block_user

COOKIE_PATH = "/api/v1/auth"
PASSWORD = "Passw0rd!"


@pytest.fixture()
def app() -> Iterator[Flask]:
    Base.metadata.drop_all(bind=ENGINE)
    app = create_app()
    yield app
    Base.metadata.drop_all(bind=ENGINE)


@pytest.fixture()
def client(app: Flask) -> Iterator[FlaskClient]:
    with app.test_client() as client:
        yield client


def _register(client: FlaskClient, username: str = "alice") -> str:
    response = client.post(
        "/api/v1/auth/register",
        json={"username": username, "email": f"{username}@example.com", "password": PASSWORD},
    )
    assert response.status_code == 201
    return response.get_json()["user_id"]


def _login(client: FlaskClient, login: str = "alice") -> dict:
    response = client.post(
        "/api/v1/auth/login",
        json={"login": login, "password": PASSWORD},
        headers={"User-Agent": "pytest-client"},
    )
    assert response.status_code == 200
    return response.get_json()


def _refresh_cookie(client: FlaskClient) -> str | None:
    cookie = client.get_cookie("refresh_token", path=COOKIE_PATH)
    return cookie.value if cookie else None


def test_full_session_lifecycle(client: FlaskClient) -> None:
    user_id = _register(client)

    duplicate = client.post(
        "/api/v1/auth/register",
        json={"username": "alice2", "email": "alice@example.com", "password": PASSWORD},
    )
    assert duplicate.status_code == 409
    assert duplicate.get_json()["error"] == "conflict"

    login = _login(client)
    assert login["user_id"] == user_id
    first_refresh = _refresh_cookie(client)
    assert first_refresh

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {login['access_token']}"})
    assert me.status_code == 200
    assert me.get_json() == {"user_id": user_id}

    refreshed = client.post("/api/v1/auth/refresh")
    assert refreshed.status_code == 200
    assert refreshed.get_json()["access_token"]
    second_refresh = _refresh_cookie(client)
    assert second_refresh and second_refresh != first_refresh

    client.set_cookie("refresh_token", first_refresh, path=COOKIE_PATH)
    replay = client.post("/api/v1/auth/refresh")
    assert replay.status_code == 401
    assert replay.get_json() == {"error": "unauthorized"}

    logout = client.post(
        "/api/v1/auth/logout",
        json={"session_id": login["session_id"]},
        headers={"Authorization": f"Bearer {login['access_token']}"},
    )
    assert logout.status_code == 204

    db = SessionLocal()
    try:
        assert db.query(User).count() == 1
        assert db.query(Session).count() == 0
    finally:
        db.close()


def test_login_failures_share_one_response(client: FlaskClient) -> None:
    _register(client)

    wrong_password = client.post(
        "/api/v1/auth/login", json={"login": "alice", "password": "Wrong0ne!"}
    )
    unknown_login = client.post(
        "/api/v1/auth/login", json={"login": "nobody", "password": PASSWORD}
    )

    assert wrong_password.status_code == unknown_login.status_code == 401
    assert wrong_password.get_json() == unknown_login.get_json() == {"error": "unauthorized"}


def test_register_validation_names_failing_rule(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "alice", "email": "alice@example.com", "password": "password"},
    )

    assert response.status_code == 422
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert payload["context"]["rule"] == "password_uppercase"


def test_malformed_payload_returns_422(client: FlaskClient) -> None:
    response = client.post("/api/v1/auth/login", json={"login": "alice"})

    assert response.status_code == 422
    assert "password" in response.get_json()["context"]["fields"]


def test_protected_routes_require_bearer(client: FlaskClient) -> None:
    assert client.get("/api/v1/auth/me").status_code == 401
    assert client.post("/api/v1/auth/logout-all").status_code == 401
    assert (
        client.get("/api/v1/auth/me", headers={"Authorization": "Bearer nonsense"}).status_code
        == 401
    )


def test_refresh_without_cookie_is_unauthorized(client: FlaskClient) -> None:
    assert client.post("/api/v1/auth/refresh").status_code == 401


def test_logout_all_revokes_every_device(app: Flask) -> None:
    laptop, phone = app.test_client(), app.test_client()
    _register(laptop)
    laptop_login = _login(laptop)
    _login(phone)

    response = laptop.post(
        "/api/v1/auth/logout-all",
        headers={"Authorization": f"Bearer {laptop_login['access_token']}"},
    )
    assert response.status_code == 204

    assert phone.post("/api/v1/auth/refresh").status_code == 401


def test_blocked_user_is_gated_even_with_valid_token(client: FlaskClient) -> None:
    _register(client)
    login = _login(client, "alice@example.com")
    headers = {"Authorization": f"Bearer {login['access_token']}"}
    assert client.get("/api/v1/auth/me", headers=headers).status_code == 200

    assert block_user.main(["alice"]) == 0

    blocked = client.get("/api/v1/auth/me", headers=headers)
    assert blocked.status_code == 401
    assert blocked.get_json() == {"error": "unauthorized"}

    assert block_user.main(["alice", "--unblock"]) == 0
    assert client.get("/api/v1/auth/me", headers=headers).status_code == 200


def test_block_user_unknown_login(app: Flask) -> None:
    assert block_user.main(["ghost"]) == 1


def test_health(client: FlaskClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_logout_of_another_device_keeps_own_cookie(app: Flask) -> None:
    laptop, phone = app.test_client(), app.test_client()
    _register(laptop)
    laptop_login = _login(laptop)
    phone_login = _login(phone)

    response = laptop.post(
        "/api/v1/auth/logout",
        json={"session_id": phone_login["session_id"]},
        headers={"Authorization": f"Bearer {laptop_login['access_token']}"},
    )
    assert response.status_code == 204
    assert _refresh_cookie(laptop)

    assert laptop.post("/api/v1/auth/refresh").status_code == 200
    assert phone.post("/api/v1/auth/refresh").status_code == 401


def test_login_with_oversized_client_headers(client: FlaskClient) -> None:
    _register(client)

    response = client.post(
        "/api/v1/auth/login",
        json={"login": "alice", "password": PASSWORD},
        headers={"User-Agent": "x" * 4096, "X-Forwarded-For": "9" * 500},
    )
    assert response.status_code == 200

    db = SessionLocal()
    try:
        stored = db.query(Session).one()
        assert len(stored.user_agent) == 512
        assert len(stored.client_ip) == 64
    finally:
        db.close()


def test_long_password_is_accepted(client: FlaskClient) -> None:
    password = PASSWORD + "x" * 1000
    registered = client.post(
        "/api/v1/auth/register",
        json={"username": "alice", "email": "alice@example.com", "password": password},
    )
    assert registered.status_code == 201

    login = client.post("/api/v1/auth/login", json={"login": "alice", "password": password})
    assert login.status_code == 200


def test_app_creates_schema_on_container_engine() -> None:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    try:
        app = create_app(Container(engine=engine))
        assert {"users", "sessions"} <= set(inspect(engine).get_table_names())

        with app.test_client() as client:
            _register(client)
            assert _login(client)["access_token"]
    finally:
        engine.dispose()
