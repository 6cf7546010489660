"""Authentication and ownership checks."""

from datetime import timedelta

from jose import jwt

from app.api.routes import auth_routes
from app.core.config import get_settings
from app.core.security import create_access_token


def test_register_and_login(client):
    """Registration creates the user and its profile; login returns a bearer token"""
    response = client.post(
        "/api/auth/register",
        json={"email": "Asha@Example.com", "password": "secret123", "full_name": "Asha"}
    )
    assert response.status_code == 201
    assert response.json()["success"] is True

    response = client.post("/api/auth/login", json={"email": "asha@example.com", "password": "secret123"})
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    headers = {"Authorization": f"Bearer {data['access_token']}"}

    me = client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["email"] == "asha@example.com"
    assert me.json()["user_id"] == data["user_id"]

    profile = client.get("/api/profile", headers=headers)
    assert profile.status_code == 200
    assert profile.json()["full_name"] == "Asha"


def test_register_duplicate_email(client):
    payload = {"email": "dup@example.com", "password": "secret123"}
    assert client.post("/api/auth/register", json=payload).status_code == 201

    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 400
    assert "already registered" in response.json()["detail"]


def test_register_short_password(client):
    response = client.post("/api/auth/register", json={"email": "x@example.com", "password": "123"})
    assert response.status_code == 422


def test_login_invalid_credentials(client, auth_headers):
    response = client.post("/api/auth/login", json={"email": "student@example.com", "password": "wrong-pass"})
    assert response.status_code == 401

    response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "secret123"})
    assert response.status_code == 401


def test_protected_route_requires_token(client):
    assert client.get("/api/learning-goals").status_code == 401
    response = client.get("/api/learning-goals", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_token_for_unknown_user_rejected(client):
    token = create_access_token("00000000-0000-0000-0000-000000000000")
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_update_profile(client, auth_headers):
    response = client.put("/api/profile", json={"full_name": "New Name"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["full_name"] == "New Name"


def test_other_users_rows_are_not_found(client, auth_headers, other_headers):
    """A row owned by someone else reads, updates and deletes as missing"""
    goal = client.post(
        "/api/learning-goals",
        json={"skill_name": "DSA", "topic_name": "Graphs"},
        headers=auth_headers
    ).json()

    assert client.get(f"/api/learning-goals/{goal['id']}", headers=other_headers).status_code == 404
    assert client.put(
        f"/api/learning-goals/{goal['id']}", json={"status": "completed"}, headers=other_headers
    ).status_code == 404
    assert client.delete(f"/api/learning-goals/{goal['id']}", headers=other_headers).status_code == 404
    assert client.get("/api/learning-goals", headers=other_headers).json()["total"] == 0

    # still intact for the owner
    owned = client.get(f"/api/learning-goals/{goal['id']}", headers=auth_headers)
    assert owned.status_code == 200
    assert owned.json()["status"] == "not_started"


def test_expired_and_foreign_tokens_rejected(client, auth_headers):
    user_id = client.get("/api/auth/me", headers=auth_headers).json()["user_id"]

    expired = create_access_token(user_id, expires_delta=timedelta(minutes=-1))
    assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"}).status_code == 401

    settings = get_settings()
    refresh = jwt.encode({"sub": user_id, "type": "refresh"}, settings.jwt_secret_key,
                         algorithm=settings.jwt_algorithm)
    assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {refresh}"}).status_code == 401


def test_register_race_on_same_email(client, monkeypatch):
    """The unique constraint still answers 400 when the pre-check misses a concurrent insert"""
    payload = {"email": "race@example.com", "password": "secret123"}
    assert client.post("/api/auth/register", json=payload).status_code == 201

    monkeypatch.setattr(auth_routes, "get_user_by_email", lambda db, email: None)
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"
