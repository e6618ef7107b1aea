"""User service: register, login, refresh, lookup.

All DB operations use the injected AsyncSession. Transactions are managed
by the caller (router layer) via `async with db.begin()`.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

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
from src.fv_gateway.auth.password import hash_password, verify_password
from src.fv_gateway.user.db_models import UserModel
from src.fv_gateway.user.repository import UserRepository, UserRepositoryProtocol

logger = logging.getLogger(__name__)


class UserService:
    """Stateless service — instantiate once, reuse across requests."""

    def __init__(self, repo: UserRepositoryProtocol | None = None) -> None:
        self._repo: UserRepositoryProtocol = repo or UserRepository()

    async def register(
        self,
        email: str,
        password: str,
        name: str,
        db: AsyncSession,
    ) -> tuple[UserModel, str, str]:
        """Create a user and return (user, access_token, refresh_token).

        Emails are stored lowercased. The UNIQUE constraint on users.email is the
        final guard; this check only gives the common case a clean 409.
        """
        email = email.lower()
        if await self._repo.get_user_by_email(db, email) is not None:
            raise EmailExistsError()

        user = await self._repo.create_user(db, email, name, hash_password(password))
        logger.info("Registered user %s", user.id)
        return user, *self._issue_tokens(user)

    async def login(
        self,
        email: str,
        password: str,
        db: AsyncSession,
    ) -> tuple[UserModel, str, str]:
        """Authenticate and return (user, access_token, refresh_token).

        Unknown email and wrong password both raise InvalidCredentialsError,
        so the response does not reveal which emails are registered.
        """
        user = await self._repo.get_user_by_email(db, email.lower())
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        return user, *self._issue_tokens(user)

    async def refresh(self, refresh_token: str, db: AsyncSession) -> str:
        """Validate a refresh token and return a new access token."""
        payload = decode_token(refresh_token, expected_type="refresh")
        user = await self._repo.get_user_by_id(db, str(payload["sub"]))
        if user is None:
            raise InvalidRefreshTokenError()
        return create_access_token(str(user.id), user.email)

    async def get_user(self, user_id: str, db: AsyncSession) -> UserModel:
        user = await self._repo.get_user_by_id(db, user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    @staticmethod
    def _issue_tokens(user: UserModel) -> tuple[str, str]:
        user_id = str(user.id)
        return create_access_token(user_id, user.email), create_refresh_token(user_id)
