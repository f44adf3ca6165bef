"""Integration tests for /api/auth routes."""

from fastapi.testclient import TestClient

from backend.app.api.auth import parse_token
from backend.app.db.seed_dev import DEMO_USER


class TestLogin:
    """Test POST /api/auth/login."""

    def test_login_demo_user(self, client: TestClient) -> None:
        """The demo account is seeded at startup."""
        response = client.post(
            "/api/auth/login", json={"username": DEMO_USER.username, "password": DEMO_USER.password}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["user"] == {"username": "demo", "email": "demo@example.com"}
        assert parse_token(data["token"]) == "demo"

    def test_login_by_email(self, client: TestClient) -> None:
        response = client.post(
            "/api/auth/login", json={"username": DEMO_USER.email, "password": DEMO_USER.password}
        )

        assert response.status_code == 200
        assert response.json()["user"]["username"] == "demo"

    def test_login_wrong_password(self, client: TestClient) -> None:
        response = client.post("/api/auth/login", json={"username": "demo", "password": "nope"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    def test_login_missing_fields(self, client: TestClient) -> None:
        response = client.post("/api/auth/login", json={"username": "demo"})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing username or password"}

    def test_login_malformed_body(self, client: TestClient) -> None:
        response = client.post(
            "/api/auth/login", content=b"not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert "error" in response.json()


class TestRegister:
    """Test POST /api/auth/register."""

    def test_register_then_login(self, client: TestClient) -> None:
        response = client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "alice@example.com", "password": "secret"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "User created successfully"
        assert parse_token(data["token"]) == "alice"

        login = client.post("/api/auth/login", json={"username": "alice", "password": "secret"})
        assert login.status_code == 200

    def test_register_duplicate_username(self, client: TestClient) -> None:
        response = client.post(
            "/api/auth/register",
            json={"username": "demo", "email": "other@example.com", "password": "secret"},
        )

        assert response.status_code == 409
        assert response.json() == {"error": "User already exists"}

    def test_register_duplicate_email(self, client: TestClient) -> None:
        response = client.post(
            "/api/auth/register",
            json={"username": "other", "email": "demo@example.com", "password": "secret"},
        )

        assert response.status_code == 409

    def test_register_missing_fields(self, client: TestClient) -> None:
        response = client.post("/api/auth/register", json={"username": "bob"})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}


class TestMe:
    """Test GET /api/auth/me."""

    def test_me_with_valid_token(self, client: TestClient) -> None:
        token = client.post(
            "/api/auth/login", json={"username": "demo", "password": "password"}
        ).json()["token"]

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json() == {"username": "demo", "email": "demo@example.com"}

    def test_me_without_token(self, client: TestClient) -> None:
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert "error" in response.json()

    def test_me_with_garbage_token(self, client: TestClient) -> None:
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer %%%"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token"}
