"""Unit tests for UserService against the in-memory user repository."""

from unittest.mock import patch

import pytest

from src.fv_common.errors import (
    EmailExistsError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    UserNotFoundError,
)
from src.fv_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.fv_gateway.auth.password import hash_password
from src.fv_gateway.user.service import UserService


@pytest.fixture
def service(user_repo) -> UserService:
    return UserService(repo=user_repo)


class TestRegister:
    async def test_creates_user_and_issues_tokens(self, service, db, store) -> None:
        user, access, refresh = await service.register("Alice@Example.com", "Pass1word", "Alice", db)

        assert user.email == "alice@example.com"  # stored lowercased
        assert user.password_hash != "Pass1word"
        assert decode_token(access, "access")["sub"] == str(user.id)
        assert decode_token(refresh, "refresh")["sub"] == str(user.id)
        assert str(user.id) in store.users

    async def test_duplicate_email_raises_error(self, service, db, store) -> None:
        store.add_user(email="alice@example.com")
        with pytest.raises(EmailExistsError):
            await service.register("ALICE@example.com", "Pass1word", "Alice", db)


class TestLogin:
    async def test_unknown_email_raises_credentials_error(self, service, db) -> None:
        with pytest.raises(InvalidCredentialsError):
            await service.login("nobody@example.com", "Pass1word", db)

    async def test_wrong_password_raises_credentials_error(self, service, db, store) -> None:
        store.add_user(email="alice@example.com", password_hash=hash_password("Pass1word"))
        with pytest.raises(InvalidCredentialsError):
            await service.login("alice@example.com", "Wrong1pass", db)

    async def test_success_returns_user_and_token_pair(self, service, db, store) -> None:
        store.add_user(email="alice@example.com")
        with patch("src.fv_gateway.user.service.verify_password", return_value=True):
            user, access, refresh = await service.login("Alice@example.com", "Pass1word", db)

        assert user.email == "alice@example.com"
        assert access != refresh


class TestRefresh:
    async def test_returns_new_access_token(self, service, db, store) -> None:
        user = store.add_user()
        access = await service.refresh(create_refresh_token(str(user.id)), db)
        payload = decode_token(access, "access")
        assert payload["sub"] == str(user.id)
        assert payload["email"] == user.email

    async def test_invalid_refresh_token_raises_error(self, service, db) -> None:
        with pytest.raises(InvalidRefreshTokenError):
            await service.refresh("not.a.real.token", db)

    async def test_access_token_used_as_refresh_raises_error(self, service, db) -> None:
        with pytest.raises(InvalidRefreshTokenError):
            await service.refresh(create_access_token("user-123"), db)

    async def test_deleted_user_raises_error(self, service, db) -> None:
        with pytest.raises(InvalidRefreshTokenError):
            await service.refresh(create_refresh_token("gone"), db)


class TestGetUser:
    async def test_found(self, service, db, store) -> None:
        user = store.add_user()
        assert (await service.get_user(str(user.id), db)).id == user.id

    async def test_missing_raises(self, service, db) -> None:
        with pytest.raises(UserNotFoundError):
            await service.get_user("missing", db)
