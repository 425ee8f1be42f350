"""
Name: Auth Service Tests

Responsibilities:
  - register: uniqueness, role hint handling, password never stored in clear
  - login: identical failure for unknown email and wrong password
  - resolve_current_user: None on every "not authenticated" case
  - Storage failures propagate
"""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from gardenspace.crosscutting.exceptions import (
    AuthenticationError,
    ConflictError,
    StorageError,
    ValidationError,
)
from gardenspace.identity.auth_service import (
    INVALID_CREDENTIALS_MESSAGE,
    AuthService,
    strip_bearer,
)
from gardenspace.identity.users import User, UserRole

pytestmark = pytest.mark.unit


class TestRegister:
    def test_register_returns_token_and_public_user(self, auth_service, user_repository):
        result = auth_service.register("ana@example.com", "pw-123", "Ana Gómez")

        assert result.token
        assert result.user.email == "ana@example.com"
        assert result.user.full_name == "Ana Gómez"
        assert result.user.role == "user"
        assert result.user.avatar_url is None
        assert not hasattr(result.user, "password_hash")

        stored = user_repository.find_by_email("ana@example.com")
        assert stored is not None
        assert stored.id == result.user.id
        assert stored.password_hash != "pw-123"

    def test_register_duplicate_email_conflicts(self, auth_service):
        auth_service.register("ana@example.com", "pw-123", "Ana")

        with pytest.raises(ConflictError):
            auth_service.register("ana@example.com", "other", "Otra")

    def test_email_is_case_sensitive(self, auth_service):
        auth_service.register("ana@example.com", "pw-123", "Ana")
        result = auth_service.register("ANA@example.com", "pw-123", "Ana 2")
        assert result.user.email == "ANA@example.com"

    @pytest.mark.parametrize(
        "hint,expected",
        [
            ("admin", "admin"),
            ("  ADMIN ", "admin"),
            ("Admin", "admin"),
            ("user", "user"),
            ("owner", "user"),
            ("", "user"),
            (None, "user"),
        ],
    )
    def test_role_hint(self, auth_service, hint, expected):
        result = auth_service.register(f"{uuid4()}@example.com", "pw", "X", hint)
        assert result.user.role == expected

    @pytest.mark.parametrize(
        "email,password,full_name",
        [("", "pw", "Ana"), ("  ", "pw", "Ana"), ("a@b.c", "", "Ana"), ("a@b.c", "pw", " ")],
    )
    def test_missing_fields_fail_validation(self, auth_service, email, password, full_name):
        with pytest.raises(ValidationError):
            auth_service.register(email, password, full_name)

    def test_issued_token_resolves_to_registered_user(self, auth_service):
        registered = auth_service.register("ana@example.com", "pw-123", "Ana")

        current = auth_service.resolve_current_user(f"Bearer {registered.token}")

        assert current is not None
        assert current.user == registered.user
        assert current.token == registered.token


class TestLogin:
    def test_login_ok(self, auth_service):
        registered = auth_service.register("ana@example.com", "pw-123", "Ana")

        result = auth_service.login("ana@example.com", "pw-123")

        assert result.user.id == registered.user.id
        assert result.token

    def test_unknown_email_and_wrong_password_are_indistinguishable(self, auth_service):
        auth_service.register("ana@example.com", "pw-123", "Ana")

        with pytest.raises(AuthenticationError) as unknown:
            auth_service.login("nobody@example.com", "pw-123")
        with pytest.raises(AuthenticationError) as wrong:
            auth_service.login("ana@example.com", "nope")

        assert type(unknown.value) is type(wrong.value)
        assert unknown.value.message == wrong.value.message == INVALID_CREDENTIALS_MESSAGE

    def test_login_after_duplicate_attempt_uses_original_password(self, auth_service):
        auth_service.register("ana@example.com", "first", "Ana")
        with pytest.raises(ConflictError):
            auth_service.register("ana@example.com", "second", "Ana")

        assert auth_service.login("ana@example.com", "first").user.email == "ana@example.com"
        with pytest.raises(AuthenticationError):
            auth_service.login("ana@example.com", "second")


class TestResolveCurrentUser:
    @pytest.mark.parametrize(
        "header", [None, "", "Bearer ", "Bearer not-a-jwt", "garbage"]
    )
    def test_malformed_headers_return_none(self, auth_service, header):
        assert auth_service.resolve_current_user(header) is None

    def test_expired_token_returns_none(self, auth_service, clock):
        token = auth_service.register("ana@example.com", "pw", "Ana").token
        clock.advance(hours=2)
        assert auth_service.resolve_current_user(f"Bearer {token}") is None

    def test_tampered_signature_returns_none(self, auth_service):
        token = auth_service.register("ana@example.com", "pw", "Ana").token
        header, payload, signature = token.split(".")
        # R: se cambia el primer caracter; el último lleva bits de relleno.
        flipped = ("B" if signature[0] == "A" else "A") + signature[1:]
        tampered = f"{header}.{payload}.{flipped}"

        assert auth_service.resolve_current_user(f"Bearer {token}") is not None
        assert auth_service.resolve_current_user(f"Bearer {tampered}") is None

    def test_token_without_bearer_prefix_is_accepted(self, auth_service):
        token = auth_service.register("ana@example.com", "pw", "Ana").token
        assert auth_service.resolve_current_user(token) is not None

    def test_unknown_user_returns_none(self, token_codec, fast_hasher, user_repository, clock):
        ghost = User(
            id=uuid4(),
            email="ghost@example.com",
            password_hash="x",
            full_name="Ghost",
            role=UserRole.USER,
        )
        token = token_codec.issue(ghost).token
        service = AuthService(user_repository, fast_hasher, token_codec, clock=clock)

        assert service.resolve_current_user(f"Bearer {token}") is None

    def test_storage_failure_propagates(self, token_codec, fast_hasher, clock):
        users = MagicMock()
        users.find_by_id.side_effect = StorageError("db down")
        user = User(
            id=uuid4(),
            email="ana@example.com",
            password_hash="x",
            full_name="Ana",
            role=UserRole.USER,
        )
        token = token_codec.issue(user).token
        service = AuthService(users, fast_hasher, token_codec, clock=clock)

        with pytest.raises(StorageError):
            service.resolve_current_user(f"Bearer {token}")


class TestStripBearer:
    def test_strips_prefix(self):
        assert strip_bearer("Bearer abc") == "abc"

    def test_keeps_raw_token(self):
        assert strip_bearer("abc") == "abc"

    def test_empty_is_none(self):
        assert strip_bearer("Bearer   ") is None
        assert strip_bearer(None) is None
