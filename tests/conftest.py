"""
This file contains shared fixtures and configuration for the test suite.

Every test gets a fresh application bound to its own SQLite database file, so
tests never share state.
"""

from collections.abc import Callable, Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from taskhub.config import Settings

TEST_SECRET = "test-secret"
DEFAULT_PASSWORD = "Abcdef12!"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        TASKHUB_DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'taskhub_test.db'}",
        JWT_SECRET=TEST_SECRET,
    )


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    """
    Create a new application instance configured for the test database.
    """
    # Import the factory function here to ensure it's fresh for each test.
    from main import create_app

    return create_app(test_settings)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """
    Test client for making API requests. Entering the client runs the
    application's lifespan, which creates the tables.
    """
    with TestClient(app) as c:
        yield c


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register_user(client: TestClient) -> Callable[..., tuple[dict, str]]:
    """Register a user and return ``(user, token)``."""

    def _register(username: str, email: str | None = None, password: str = DEFAULT_PASSWORD):
        response = client.post(
            "/api/v1/users/register",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
            },
        )
        assert response.status_code == 201, response.text
        payload = response.json()
        return payload["user"], payload["token"]

    return _register


@pytest.fixture
def alice(register_user) -> tuple[dict, str]:
    return register_user("alice")


@pytest.fixture
def bob(register_user) -> tuple[dict, str]:
    return register_user("bob")
