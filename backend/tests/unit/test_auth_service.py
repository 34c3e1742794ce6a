"""
Unit tests for AuthService and TokenService.

Tests registration rules, duplicate detection, login outcomes and
token round-trips.
"""

import pytest
from datetime import datetime, timedelta
from freezegun import freeze_time

from backend.src.config.settings import AppSettings
from backend.src.services.auth_service import AuthService
from backend.src.services.exceptions import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    ValidationError,
)
from backend.src.services.token_service import TokenService
from backend.src.utils.crypto import verify_password


@pytest.fixture
def settings():
    return AppSettings(
        JWT_SECRET_KEY="unit-test-secret-key-with-at-least-32-chars",
        JWT_TOKEN_EXPIRY_HOURS=2,
    )


@pytest.fixture
def auth_service(test_db_session, settings):
    """Create an AuthService instance for testing."""
    return AuthService(test_db_session, settings)


@pytest.fixture
def registration():
    def _data(**overrides):
        data = dict(
            username="jdoe",
            email="JDoe@Example.com",
            password="secret123",
            phone_number="0888123456",
            first_name="John",
            last_name="Doe",
        )
        data.update(overrides)
        return data

    return _data


class TestRegister:
    """Tests for user registration."""

    def test_register_hashes_password_and_lowercases_email(
        self, auth_service, registration
    ):
        user = auth_service.register(**registration())

        assert user.guid.startswith("usr_")
        assert user.email == "jdoe@example.com"
        assert user.role == "user"
        assert user.is_blocked is False
        assert user.password_hash != "secret123"
        assert verify_password("secret123", user.password_hash)

    @pytest.mark.parametrize("field,value", [
        ("password", "short1"),
        ("password", "12345678"),
        ("password", "a" * 31),
        ("phone_number", "1888123456"),
        ("phone_number", "08881234"),
        ("first_name", "J0hn"),
        ("last_name", "D" * 31),
        ("email", "not-an-email"),
        ("username", "x"),
    ])
    def test_register_rejects_invalid_field(self, auth_service, registration, field, value):
        with pytest.raises(ValidationError) as exc_info:
            auth_service.register(**registration(**{field: value}))

        assert exc_info.value.field == field

    @pytest.mark.parametrize("overrides", [
        {"email": "other@example.com", "phone_number": "0888000000"},
        {"username": "other", "phone_number": "0888000000"},
        {"username": "other", "email": "other@example.com"},
    ])
    def test_register_duplicate_conflicts(self, auth_service, registration, overrides):
        auth_service.register(**registration())

        with pytest.raises(ConflictError):
            auth_service.register(**registration(**overrides))


class TestLogin:
    """Tests for login."""

    def test_login_returns_token(self, auth_service, registration, settings):
        auth_service.register(**registration())

        user, token, expires_in = auth_service.login("jdoe@example.com", "secret123")

        assert user.username == "jdoe"
        assert expires_in == 2 * 3600
        claims = TokenService(settings).validate_token(token)
        assert claims["sub"] == user.guid
        assert claims["username"] == "jdoe"
        assert claims["role"] == "user"

    def test_login_wrong_password(self, auth_service, registration):
        auth_service.register(**registration())

        with pytest.raises(AuthenticationError):
            auth_service.login("jdoe@example.com", "wrongpass1")

    def test_login_unknown_email(self, auth_service):
        with pytest.raises(AuthenticationError):
            auth_service.login("nobody@example.com", "secret123")

    def test_login_blocked_user(self, auth_service, registration, test_db_session):
        user = auth_service.register(**registration())
        user.is_blocked = True
        test_db_session.commit()

        with pytest.raises(ForbiddenError):
            auth_service.login("jdoe@example.com", "secret123")


class TestTokenService:
    """Tests for JWT generation and validation."""

    def test_invalid_token_rejected(self, settings):
        assert TokenService(settings).validate_token("not.a.jwt") is None

    def test_token_signed_with_other_secret_rejected(self, settings, alice):
        other = AppSettings(JWT_SECRET_KEY="another-secret-key-with-at-least-32-chars")
        token, _ = TokenService(other).generate_token(alice)

        assert TokenService(settings).validate_token(token) is None

    def test_expired_token_rejected(self, settings, alice):
        with freeze_time(datetime.utcnow() - timedelta(hours=3)):
            token, _ = TokenService(settings).generate_token(alice)

        assert TokenService(settings).validate_token(token) is None
