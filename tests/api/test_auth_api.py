"""
Tests for the Authentication API routes and public endpoints.
"""


class TestAuthRoutes:
    """Tests for /api/v1/auth."""

    def test_register_login_me(self, client):
        registered = client.post(
            "/api/v1/auth/register",
            json={"email": "new@example.com", "password": "password123"},
        )
        assert registered.status_code == 201
        assert registered.json()["message"] == "User registered"
        user_id = registered.json()["userId"]

        login = client.post(
            "/api/v1/auth/login",
            json={"email": "new@example.com", "password": "password123"},
        )
        assert login.status_code == 200
        token = login.json()["access_token"]

        me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["id"] == user_id
        assert me.json()["email"] == "new@example.com"

    def test_duplicate_registration(self, client):
        payload = {"email": "dup@example.com", "password": "password123"}
        client.post("/api/v1/auth/register", json=payload)

        response = client.post("/api/v1/auth/register", json=payload)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "User already exists"

    def test_short_password_rejected(self, client):
        response = client.post(
            "/api/v1/auth/register", json={"email": "a@example.com", "password": "short"}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_overlong_password_rejected(self, client):
        response = client.post(
            "/api/v1/auth/register", json={"email": "long@example.com", "password": "x" * 100}
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"] == {"field": "password"}

    def test_bad_login(self, client):
        response = client.post(
            "/api/v1/auth/login", json={"email": "ghost@example.com", "password": "password123"}
        )
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"

    def test_refresh(self, client):
        tokens = client.post(
            "/api/v1/auth/register",
            json={"email": "r@example.com", "password": "password123"},
        ).json()

        response = client.post(
            "/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert response.status_code == 200
        assert response.json()["token_type"] == "bearer"


class TestPublicEndpoints:

    def test_root(self, client):
        assert client.get("/").json()["status"] == "healthy"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}
