"""
Shared fixtures: a fresh application on a temporary SQLite file,
seeded through the HTTP API with two users owning one todo each.
"""
from __future__ import annotations

from dataclasses import dataclass, field

import pytest
from fastapi.testclient import TestClient

from todo_api.app.core.config import Settings
from todo_api.app.core.db import Database
from todo_api.app.main import create_app

FIRST_USER = {"email": "andrew@example.com", "password": "userOnePass"}
SECOND_USER = {"email": "jen@example.com", "password": "userTwoPass"}


@dataclass
class SeededUser:
    id: str
    email: str
    password: str
    token: str


@dataclass
class SeedData:
    users: list[SeededUser] = field(default_factory=list)
    todos: list[dict] = field(default_factory=list)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway database with a cheap hash."""
    return Settings(
        database_url=str(tmp_path / "test.db"),
        secret_key="test-secret",
        password_hash_iterations=1000,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Test client with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app, client) -> Database:
    """The store handle used by the running application."""
    return app.state.db


def _signup(client: TestClient, credentials: dict) -> SeededUser:
    response = client.post("/users", json=credentials)
    assert response.status_code == 200, response.text
    body = response.json()
    return SeededUser(
        id=body["_id"],
        email=body["email"],
        password=credentials["password"],
        token=response.headers["x-auth"],
    )


@pytest.fixture
def seed(client) -> SeedData:
    """Two users; the first owns an open todo, the second a completed one."""
    data = SeedData()
    data.users = [_signup(client, FIRST_USER), _signup(client, SECOND_USER)]

    first = client.post(
        "/todos", json={"text": "First test todo"}, headers={"x-auth": data.users[0].token}
    )
    second = client.post(
        "/todos", json={"text": "Second test todo"}, headers={"x-auth": data.users[1].token}
    )
    data.todos = [first.json()["todo"], second.json()["todo"]]

    completed = client.patch(
        f"/todos/{data.todos[1]['_id']}",
        json={"completed": True},
        headers={"x-auth": data.users[1].token},
    )
    data.todos[1] = completed.json()["todo"]
    return data


def auth(user: SeededUser) -> dict:
    return {"x-auth": user.token}
