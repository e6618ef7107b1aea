"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock or an in-memory fake that conforms to this Protocol.
Infrastructure layer provides the PostgreSQL implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.fv_feature.domain.models import Feature, FeaturePage


class FeatureRepositoryProtocol(Protocol):
    async def get_feature_by_id(
        self, db: AsyncSession, feature_id: str
    ) -> Feature | None: ...

    async def get_feature_with_author(
        self, db: AsyncSession, feature_id: str
    ) -> Feature | None: ...

    async def list_features(
        self,
        db: AsyncSession,
        status: str | None,
        sort: str,
        page: int,
        limit: int,
    ) -> FeaturePage: ...

    async def create_feature(
        self, db: AsyncSession, title: str, description: str, author_id: str
    ) -> Feature: ...

    async def update_status(
        self, db: AsyncSession, feature_id: str, status: str
    ) -> Feature | None: ...

    async def increment_vote_count(
        self, db: AsyncSession, feature_id: str, delta: int
    ) -> Feature | None: ...

    async def delete_feature(self, db: AsyncSession, feature_id: str) -> bool: ...
