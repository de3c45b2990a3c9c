"""
Tests for signup, login, profile and logout.
"""
from __future__ import annotations

import json

from fastapi.testclient import TestClient

from todo_api.app.core.db import Database
from tests.conftest import SeedData, auth


def _stored_tokens(db: Database, user_id: str) -> list[dict]:
    with db.cursor() as cursor:
        row = cursor.execute("SELECT tokens FROM users WHERE id = ?", (user_id,)).fetchone()
    return json.loads(row["tokens"])


class TestMe:
    def test_returns_user_if_authenticated(self, client: TestClient, seed: SeedData):
        response = client.get("/users/me", headers=auth(seed.users[0]))
        assert response.status_code == 200
        assert response.json() == {"_id": seed.users[0].id, "email": seed.users[0].email}

    def test_returns_401_if_not_authenticated(self, client: TestClient, seed: SeedData):
        response = client.get("/users/me")
        assert response.status_code == 401
        assert response.content == b""


class TestSignup:
    def test_creates_user(self, client: TestClient, db: Database):
        """Signup returns the user and a token; the password is stored hashed."""
        response = client.post("/users", json={"email": "newUser@example.com", "password": "newUserPass"})
        assert response.status_code == 200
        assert response.headers["x-auth"]
        body = response.json()
        assert body["_id"]
        assert body["email"] == "newuser@example.com"
        assert set(body) == {"_id", "email"}

        with db.cursor() as cursor:
            row = cursor.execute(
                "SELECT password FROM users WHERE email = ?", ("newuser@example.com",)
            ).fetchone()
        assert row is not None
        assert row["password"] != "newUserPass"
        assert _stored_tokens(db, body["_id"]) == [{"access": "auth", "token": response.headers["x-auth"]}]

    def test_rejects_invalid_request(self, client: TestClient):
        response = client.post("/users", json={"email": "", "password": "a"})
        assert response.status_code == 400
        assert "x-auth" not in response.headers

    def test_rejects_invalid_email(self, client: TestClient):
        response = client.post("/users", json={"email": "not-an-email", "password": "secret123"})
        assert response.status_code == 400

    def test_rejects_short_password(self, client: TestClient):
        response = client.post("/users", json={"email": "short@example.com", "password": "12345"})
        assert response.status_code == 400

    def test_rejects_missing_fields(self, client: TestClient):
        response = client.post("/users", json={"email": "short@example.com"})
        assert response.status_code == 400

    def test_rejects_email_in_use(self, client: TestClient, seed: SeedData, db: Database):
        user = seed.users[0]
        response = client.post("/users", json={"email": user.email.upper(), "password": user.password})
        assert response.status_code == 400
        with db.cursor() as cursor:
            count = cursor.execute(
                "SELECT COUNT(*) AS count FROM users WHERE email = ?", (user.email,)
            ).fetchone()["count"]
        assert count == 1


class TestLogin:
    def test_logs_in_and_returns_token(self, client: TestClient, seed: SeedData, db: Database):
        user = seed.users[1]
        response = client.post("/users/login", json={"email": user.email, "password": user.password})
        assert response.status_code == 200
        token = response.headers["x-auth"]
        assert response.json()["_id"] == user.id

        tokens = _stored_tokens(db, user.id)
        assert len(tokens) == 2
        assert tokens[1] == {"access": "auth", "token": token}
        assert client.get("/users/me", headers={"x-auth": token}).status_code == 200

    def test_rejects_wrong_password(self, client: TestClient, seed: SeedData, db: Database):
        user = seed.users[1]
        response = client.post("/users/login", json={"email": user.email, "password": "invalidPassword"})
        assert response.status_code == 400
        assert "x-auth" not in response.headers
        assert len(_stored_tokens(db, user.id)) == 1

    def test_unknown_email_looks_like_wrong_password(self, client: TestClient, seed: SeedData):
        user = seed.users[1]
        wrong_password = client.post("/users/login", json={"email": user.email, "password": "invalidPassword"})
        unknown_email = client.post("/users/login", json={"email": "nobody@example.com", "password": "whatever"})
        assert unknown_email.status_code == 400
        assert "x-auth" not in unknown_email.headers
        assert unknown_email.json() == wrong_password.json()


class TestLogout:
    def test_removes_auth_token(self, client: TestClient, seed: SeedData, db: Database):
        user = seed.users[0]
        response = client.delete("/users/me/token", headers=auth(user))
        assert response.status_code == 200
        assert _stored_tokens(db, user.id) == []
        assert client.get("/todos", headers=auth(user)).status_code == 401

    def test_removes_only_the_token_used(self, client: TestClient, seed: SeedData, db: Database):
        user = seed.users[0]
        login = client.post("/users/login", json={"email": user.email, "password": user.password})
        second_token = login.headers["x-auth"]

        assert client.delete("/users/me/token", headers={"x-auth": second_token}).status_code == 200
        assert _stored_tokens(db, user.id) == [{"access": "auth", "token": user.token}]
        assert client.get("/users/me", headers={"x-auth": second_token}).status_code == 401
        assert client.get("/users/me", headers=auth(user)).status_code == 200


class TestScenario:
    def test_signup_todo_complete_logout(self, client: TestClient):
        signup = client.post("/users", json={"email": "a@example.com", "password": "secret123"})
        assert signup.status_code == 200
        headers = {"x-auth": signup.headers["x-auth"]}

        created = client.post("/todos", json={"text": "Buy milk"}, headers=headers)
        assert created.status_code == 200
        todo = created.json()["todo"]
        assert todo["text"] == "Buy milk"
        assert todo["completed"] is False

        patched = client.patch(f"/todos/{todo['_id']}", json={"completed": True}, headers=headers)
        assert patched.status_code == 200
        assert isinstance(patched.json()["todo"]["completedAt"], int)

        assert client.delete("/users/me/token", headers=headers).status_code == 200
        assert client.get("/todos", headers=headers).status_code == 401


class TestHealth:
    def test_root_returns_ok(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
