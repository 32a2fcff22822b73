from thriftsy.extensions import db
from thriftsy.models.user import User


class TestSignup:
    """Test user registration"""

    def test_signup_success(self, client):
        response = client.post(
            "/api/auth/signup",
            json={
                "name": "New Shopper",
                "email": "New@Test.com",
                "password": "password123",
                "phone": "0909999999",
            },
        )

        assert response.status_code == 201
        assert response.json["token"]
        assert response.json["user"]["email"] == "new@test.com"
        assert response.json["user"]["role"] == "user"
        assert "password_hash" not in response.json["user"]

    def test_signup_duplicate_email(self, client, buyer_user):
        response = client.post(
            "/api/auth/signup",
            json={"name": "Dup", "email": "buyer@test.com", "password": "password123"},
        )

        assert response.status_code == 409
        assert "already registered" in response.json["error"]

    def test_signup_short_password(self, client):
        response = client.post(
            "/api/auth/signup",
            json={"name": "Short", "email": "short@test.com", "password": "123"},
        )

        assert response.status_code == 400
        assert "password" in response.json["messages"]

    def test_signup_missing_fields(self, client):
        response = client.post("/api/auth/signup", json={"email": "x@test.com"})

        assert response.status_code == 400
        assert "name" in response.json["messages"]


class TestSignin:
    """Test user login"""

    def test_signin_success(self, client, buyer_user):
        response = client.post(
            "/api/auth/signin", json={"email": "buyer@test.com", "password": "password123"}
        )

        assert response.status_code == 200
        assert response.json["token"]
        assert response.json["user"]["id"] == buyer_user.id

    def test_signin_wrong_password(self, client, buyer_user):
        response = client.post(
            "/api/auth/signin", json={"email": "buyer@test.com", "password": "nope"}
        )

        assert response.status_code == 401
        assert response.json["error"] == "Invalid email or password"

    def test_signin_unknown_email(self, client):
        response = client.post(
            "/api/auth/signin", json={"email": "ghost@test.com", "password": "password123"}
        )

        assert response.status_code == 401


class TestProfile:
    """Test the /api/users endpoints"""

    def test_get_me(self, client, buyer_headers, buyer_user):
        response = client.get("/api/users/me", headers=buyer_headers)

        assert response.status_code == 200
        assert response.json["user"]["email"] == buyer_user.email

    def test_get_me_requires_token(self, client):
        response = client.get("/api/users/me")

        assert response.status_code == 401
        assert "error" in response.json

    def test_get_me_invalid_token(self, client):
        response = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-token"})

        assert response.status_code == 401

    def test_update_me(self, client, buyer_headers):
        response = client.put(
            "/api/users/me", json={"name": "Renamed", "phone": "0123"}, headers=buyer_headers
        )

        assert response.status_code == 200
        assert response.json["user"]["name"] == "Renamed"
        assert response.json["user"]["phone"] == "0123"

    def test_change_password(self, client, buyer_headers, buyer_user):
        response = client.post(
            "/api/users/change-password",
            json={"currentPassword": "password123", "newPassword": "newpass456"},
            headers=buyer_headers,
        )

        assert response.status_code == 200
        user = db.session.get(User, buyer_user.id)
        assert user.check_password("newpass456")

    def test_change_password_accepts_old_password_key(self, client, buyer_headers):
        response = client.post(
            "/api/users/change-password",
            json={"oldPassword": "password123", "newPassword": "newpass456"},
            headers=buyer_headers,
        )

        assert response.status_code == 200

    def test_change_password_wrong_current(self, client, buyer_headers):
        response = client.post(
            "/api/users/change-password",
            json={"currentPassword": "wrong", "newPassword": "newpass456"},
            headers=buyer_headers,
        )

        assert response.status_code == 401
