"""
Tests for the authentication endpoints.

Tests cover:
- Registration status codes (201, 400, 409)
- Login status-code matrix and uniform failure responses
- Session cookie lifecycle (login, me, logout)
- Login rate limiting
- Profile updates
"""
from jobapp.auth.ids import decode_user_id
from jobapp.core.settings import settings
from jobapp.models import User
from tests.helpers import DEFAULT_PASSWORD, login


def registration(**overrides):
    payload = {
        "email": "new.user@example.com",
        "password": DEFAULT_PASSWORD,
        "forename": "New",
        "surname": "User",
    }
    payload.update(overrides)
    return payload


class TestRegister:
    """Tests for POST /api/auth/register."""

    def test_created(self, client):
        response = client.post("/api/auth/register", json=registration())

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "new.user@example.com"
        assert body["role"] == "Applicant"
        assert body["is_active"] is True
        assert "password" not in body
        assert "password_hash" not in body

    def test_id_is_encoded(self, client, db):
        response = client.post("/api/auth/register", json=registration())

        encoded = response.json()["id"]
        user = db.query(User).one()
        assert encoded != str(user.id)
        assert len(encoded) >= 8
        assert decode_user_id(encoded) == user.id

    def test_then_conflict(self, client, db):
        """Should give 201 then 409 without changing the first account."""
        first = client.post("/api/auth/register", json=registration())
        second = client.post(
            "/api/auth/register",
            json=registration(email="NEW.USER@example.com", forename="Changed"),
        )

        assert first.status_code == 201
        assert second.status_code == 409
        user = db.query(User).one()
        db.refresh(user)
        assert user.forename == "New"

    def test_validation_failure_lists_violations(self, client):
        response = client.post(
            "/api/auth/register",
            json=registration(email="user@example", password="short"),
        )

        assert response.status_code == 400
        violations = response.json()["violations"]
        fields = {v["field"] for v in violations}
        assert fields == {"email", "password"}
        messages = [v["message"] for v in violations if v["field"] == "password"]
        assert "Password must be at least 8 characters long" in messages

    def test_missing_fields(self, client):
        response = client.post("/api/auth/register", json={"email": "user@example.com"})

        assert response.status_code == 400
        codes = {v["code"] for v in response.json()["violations"]}
        assert codes == {"required"}

    def test_malformed_body_is_400(self, client):
        response = client.post(
            "/api/auth/register",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

    def test_wrong_type_is_400(self, client):
        response = client.post("/api/auth/register", json=registration(forename=["Ada"]))
        assert response.status_code == 400


class TestLogin:
    """Tests for POST /api/auth/login."""

    def test_success_sets_cookie(self, client, applicant):
        response = login(client, applicant.email)

        assert response.status_code == 200
        assert response.json()["email"] == applicant.email
        assert settings.session_cookie_name in response.cookies
        set_cookie = response.headers["set-cookie"].lower()
        assert "httponly" in set_cookie

    def test_email_is_case_insensitive(self, client, applicant):
        assert login(client, applicant.email.upper()).status_code == 200

    def test_updates_last_login(self, client, applicant):
        response = login(client, applicant.email)
        assert response.json()["last_login"] is not None

    def test_failure_matrix(self, client, applicant, user_factory):
        """Should give identical 401 responses for every credential failure."""
        inactive = user_factory(email="inactive@example.com", is_active=False)

        wrong_password = login(client, applicant.email, "Wrong123!")
        unknown_email = login(client, "ghost@example.com")
        inactive_account = login(client, inactive.email)

        for response in (wrong_password, unknown_email, inactive_account):
            assert response.status_code == 401
            assert response.json() == {"detail": "Invalid email or password"}
            assert settings.session_cookie_name not in response.cookies

    def test_malformed_input(self, client):
        assert login(client, "not-an-email", "x").status_code == 400
        assert client.post("/api/auth/login", json={}).status_code == 400

    def test_rate_limited(self, client, applicant):
        """Should answer 429 once an origin exceeds its attempts."""
        for _ in range(settings.login_max_attempts):
            login(client, applicant.email, "Wrong123!")

        response = login(client, applicant.email)

        assert response.status_code == 429
        assert "Retry-After" in response.headers


class TestSessionLifecycle:
    """Tests for /me and /logout."""

    def test_me_requires_session(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401

    def test_me_with_session(self, applicant_client, applicant):
        response = applicant_client.get("/api/auth/me")

        assert response.status_code == 200
        assert response.json()["email"] == applicant.email

    def test_unknown_cookie(self, client):
        client.cookies.set(settings.session_cookie_name, "forged-token")
        assert client.get("/api/auth/me").status_code == 401

    def test_logout_ends_session(self, applicant_client):
        token = applicant_client.cookies.get(settings.session_cookie_name)

        response = applicant_client.post("/api/auth/logout")
        assert response.status_code == 200

        # Replaying the old token must not work either
        applicant_client.cookies.set(settings.session_cookie_name, token)
        assert applicant_client.get("/api/auth/me").status_code == 401

    def test_logout_is_idempotent(self, client):
        assert client.post("/api/auth/logout").status_code == 200
        assert client.post("/api/auth/logout").status_code == 200

    def test_deactivated_account_loses_access(self, applicant_client, applicant, db):
        applicant.is_active = False
        db.commit()

        assert applicant_client.get("/api/auth/me").status_code == 401


class TestProfileUpdate:
    """Tests for PATCH /api/auth/me."""

    def test_updates_names(self, applicant_client):
        response = applicant_client.patch("/api/auth/me", json={"forename": "Augusta"})

        assert response.status_code == 200
        assert response.json()["forename"] == "Augusta"
        assert response.json()["surname"] == "Lovelace"

    def test_empty_update(self, applicant_client):
        assert applicant_client.patch("/api/auth/me", json={}).status_code == 400

    def test_role_cannot_be_changed(self, applicant_client):
        response = applicant_client.patch(
            "/api/auth/me",
            json={"forename": "Ada", "role": "Admin"},
        )
        assert response.json()["role"] == "Applicant"

    def test_requires_session(self, client):
        assert client.patch("/api/auth/me", json={"forename": "X"}).status_code == 401
