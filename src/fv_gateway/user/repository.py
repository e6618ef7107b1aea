"""User lookups shared by the auth service and the feature service."""

from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.fv_common.errors import EmailExistsError
from src.fv_common.ids import is_uuid
from src.fv_gateway.user.db_models import UserModel


class UserRepositoryProtocol(Protocol):
    async def get_user_by_id(self, db: AsyncSession, user_id: str) -> UserModel | None: ...

    async def get_user_by_email(self, db: AsyncSession, email: str) -> UserModel | None: ...

    async def create_user(
        self, db: AsyncSession, email: str, name: str, password_hash: str
    ) -> UserModel: ...


class UserRepository:
    async def get_user_by_id(self, db: AsyncSession, user_id: str) -> UserModel | None:
        if not is_uuid(user_id):
            return None
        result = await db.execute(select(UserModel).where(UserModel.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, db: AsyncSession, email: str) -> UserModel | None:
        result = await db.execute(select(UserModel).where(UserModel.email == email))
        return result.scalar_one_or_none()

    async def create_user(
        self, db: AsyncSession, email: str, name: str, password_hash: str
    ) -> UserModel:
        user = UserModel(email=email, name=name, password_hash=password_hash)
        db.add(user)
        try:
            await db.flush()  # populate id and server-side timestamps without committing
        except IntegrityError:
            # lost a concurrent registration race on uq users.email
            raise EmailExistsError() from None
        await db.refresh(user)
        return user
