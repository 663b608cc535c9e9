import uuid
from datetime import timedelta

import pytest
from jose import jwt

from taskhub.utils.auth import (
    InvalidTokenError,
    TokenExpiredError,
    create_access_token,
    decode_access_token,
    generate_auth_token,
    get_password_hash,
    verify_password,
)

from tests.conftest import TEST_SECRET, auth_headers


def test_password_hash_round_trip():
    hashed = get_password_hash("Abcdef12!")
    assert hashed != "Abcdef12!"
    assert verify_password("Abcdef12!", hashed)
    assert not verify_password("Abcdef12?", hashed)


def test_generated_token_carries_id_and_role():
    user_id = uuid.uuid4()
    token = generate_auth_token(user_id, "admin", TEST_SECRET, 60)
    payload = decode_access_token(token, TEST_SECRET)
    assert payload["id"] == str(user_id)
    assert payload["role"] == "admin"
    assert "exp" in payload


def test_expired_token_is_rejected():
    token = create_access_token({"id": "x", "role": "user"}, TEST_SECRET, timedelta(seconds=-1))
    with pytest.raises(TokenExpiredError):
        decode_access_token(token, TEST_SECRET)


def test_token_signed_with_other_secret_is_rejected():
    token = create_access_token({"id": "x", "role": "user"}, "another-secret")
    with pytest.raises(InvalidTokenError):
        decode_access_token(token, TEST_SECRET)


def test_garbage_token_is_rejected():
    with pytest.raises(InvalidTokenError):
        decode_access_token("not.a.token", TEST_SECRET)


class TestAuthDependency:
    def test_missing_token(self, client):
        response = client.post("/api/v1/tasks", json={"title": "Write report"})
        assert response.status_code == 401
        assert response.json() == {"msg": "Access denied. No token provided."}

    def test_malformed_header(self, client):
        response = client.post(
            "/api/v1/tasks",
            json={"title": "Write report"},
            headers={"Authorization": "Token abc"},
        )
        assert response.status_code == 401

    def test_invalid_signature(self, client):
        token = generate_auth_token(uuid.uuid4(), "user", "another-secret", 60)
        response = client.get("/api/v1/projects", headers=auth_headers(token))
        assert response.status_code == 401
        assert response.json() == {"msg": "Invalid token."}

    def test_expired_token(self, client):
        token = create_access_token(
            {"id": str(uuid.uuid4()), "role": "user"}, TEST_SECRET, timedelta(minutes=-5)
        )
        response = client.get("/api/v1/projects", headers=auth_headers(token))
        assert response.status_code == 401
        assert response.json() == {"msg": "Token expired."}

    def test_token_without_identity(self, client):
        token = jwt.encode({"sub": "alice"}, TEST_SECRET, algorithm="HS256")
        response = client.get("/api/v1/projects", headers=auth_headers(token))
        assert response.status_code == 401

    def test_valid_token_reaches_handler(self, client, alice):
        _, token = alice
        response = client.get("/api/v1/projects", headers=auth_headers(token))
        assert response.status_code == 200
        assert response.json() == {"projects": [], "amount": 0}
