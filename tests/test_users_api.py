from taskhub.db import promote_to_admin
from taskhub.utils.auth import decode_access_token

from tests.conftest import DEFAULT_PASSWORD, TEST_SECRET, auth_headers


def test_register_returns_public_user_and_token(client, register_user):
    user, token = register_user("carol")
    assert user["username"] == "carol"
    assert user["email"] == "carol@example.com"
    assert user["role"] == "user"
    assert "password" not in user and "hashedPassword" not in user

    claims = decode_access_token(token, TEST_SECRET)
    assert claims["id"] == user["id"]
    assert claims["role"] == "user"


def test_register_rejects_weak_password(client):
    response = client.post(
        "/api/v1/users/register",
        json={"username": "dave", "email": "dave@example.com", "password": "abc"},
    )
    assert response.status_code == 400
    assert response.json() == {"msg": "Password should be at least 8 characters long"}


def test_register_rejects_duplicates(client, alice):
    response = client.post(
        "/api/v1/users/register",
        json={"username": "alice", "email": "other@example.com", "password": DEFAULT_PASSWORD},
    )
    assert response.status_code == 400
    assert response.json() == {"msg": "User already registered."}

    response = client.post(
        "/api/v1/users/register",
        json={"username": "alice2", "email": "alice@example.com", "password": DEFAULT_PASSWORD},
    )
    assert response.status_code == 400


def test_login(client, alice):
    response = client.post(
        "/api/v1/users/login", json={"email": "alice@example.com", "password": DEFAULT_PASSWORD}
    )
    assert response.status_code == 200
    token = response.json()["token"]
    assert client.get("/api/v1/users/me", headers=auth_headers(token)).json()["user"]["username"] == "alice"


def test_login_with_wrong_password(client, alice):
    response = client.post(
        "/api/v1/users/login", json={"email": "alice@example.com", "password": "wrong"}
    )
    assert response.status_code == 400
    assert response.json() == {"msg": "Invalid email or password."}


def test_login_requires_both_fields(client):
    response = client.post("/api/v1/users/login", json={"email": "alice@example.com"})
    assert response.status_code == 400
    assert response.json() == {"msg": '"password" is required'}


def test_update_profile(client, alice, bob):
    _, token = alice
    response = client.patch(
        "/api/v1/users/me", json={"username": "  alicia "}, headers=auth_headers(token)
    )
    assert response.status_code == 200
    assert response.json()["user"]["username"] == "alicia"

    response = client.patch(
        "/api/v1/users/me", json={"email": "bob@example.com"}, headers=auth_headers(token)
    )
    assert response.status_code == 400

    response = client.patch(
        "/api/v1/users/me", json={"password": DEFAULT_PASSWORD}, headers=auth_headers(token)
    )
    assert response.status_code == 400
    assert response.json() == {"msg": '"password" is not allowed'}


def test_delete_account_unassigns_tasks(client, alice, bob):
    _, alice_token = alice
    bob_user, bob_token = bob
    task = client.post(
        "/api/v1/tasks",
        json={"title": "Orphan", "assignedTo": bob_user["id"]},
        headers=auth_headers(alice_token),
    ).json()["task"]

    response = client.delete("/api/v1/users/me", headers=auth_headers(bob_token))
    assert response.status_code == 200
    assert response.json() == "User deleted successfully"

    assert client.get(f"/api/v1/tasks/{task['id']}").json()["task"]["assignedTo"] is None
    assert client.get("/api/v1/users/me", headers=auth_headers(bob_token)).status_code == 404


def test_admin_routes(client, alice, bob):
    _, alice_token = alice
    bob_user, _ = bob

    assert client.get("/api/v1/users", headers=auth_headers(alice_token)).status_code == 403

    # Promote through the database utility, then log in again for a fresh role claim
    client.portal.call(promote_to_admin, "alice@example.com")
    login = client.post(
        "/api/v1/users/login", json={"email": "alice@example.com", "password": DEFAULT_PASSWORD}
    )
    admin_token = login.json()["token"]

    listing = client.get("/api/v1/users", headers=auth_headers(admin_token)).json()
    assert listing["amount"] == 2
    assert {u["role"] for u in listing["users"]} == {"admin", "user"}

    response = client.delete(f"/api/v1/users/{bob_user['id']}", headers=auth_headers(admin_token))
    assert response.status_code == 200
    response = client.delete(f"/api/v1/users/{bob_user['id']}", headers=auth_headers(admin_token))
    assert response.status_code == 404


def test_health(client):
    response = client.get("/api/v1/")
    assert response.status_code == 200
    assert response.json() == {"msg": "Task manager API is running"}


def test_promote_unknown_email_returns_false(client):
    assert client.portal.call(promote_to_admin, "nobody@example.com") is False


def test_null_profile_fields_are_rejected(client, alice):
    _, token = alice
    response = client.patch("/api/v1/users/me", json={"username": None}, headers=auth_headers(token))
    assert response.status_code == 400
    assert response.json() == {"msg": '"username" must be a string'}

    response = client.patch("/api/v1/users/me", json={"email": None}, headers=auth_headers(token))
    assert response.status_code == 400

    profile = client.get("/api/v1/users/me", headers=auth_headers(token)).json()["user"]
    assert profile["username"] == "alice"
    assert profile["email"] == "alice@example.com"


def test_profile_patch_without_body_changes_nothing(client, alice):
    _, token = alice
    response = client.patch("/api/v1/users/me", headers=auth_headers(token))
    assert response.status_code == 200
    assert response.json()["user"]["username"] == "alice"
