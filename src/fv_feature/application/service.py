"""FeatureApplicationService — feature CRUD with read-through caching.

Reads (list, single feature) go cache first and repopulate on a miss. Writes
commit first and invalidate afterwards:

  create          → all list pages
  update_status   → the feature entry and all list pages
  delete          → the feature entry, all list pages and its vote stats
                    (votes are removed by ON DELETE CASCADE)

vote_count is never written here; only the vote service changes it.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.fv_cache.application.invalidation import CacheInvalidator
from src.fv_cache.domain.cache import CacheKeys, CacheProtocol, CacheTTL
from src.fv_cache.infrastructure.noop_cache import NoOpCache
from src.fv_common.enums import FeatureSort, FeatureStatus
from src.fv_common.errors import FeatureForbiddenError, FeatureNotFoundError, UserNotFoundError
from src.fv_feature.application.schemas import FeatureListResponse, FeatureResponse
from src.fv_feature.domain.models import Feature
from src.fv_feature.domain.repository import FeatureRepositoryProtocol
from src.fv_feature.infrastructure.persistence import FeatureRepository
from src.fv_gateway.user.repository import UserRepository, UserRepositoryProtocol

logger = logging.getLogger(__name__)


class FeatureApplicationService:
    def __init__(
        self,
        repo: FeatureRepositoryProtocol | None = None,
        user_repo: UserRepositoryProtocol | None = None,
        cache: CacheProtocol | None = None,
    ) -> None:
        self._repo: FeatureRepositoryProtocol = repo or FeatureRepository()
        self._user_repo: UserRepositoryProtocol = user_repo or UserRepository()
        self._cache: CacheProtocol = cache if cache is not None else NoOpCache()
        self._invalidator = CacheInvalidator(self._cache)

    async def create(
        self, db: AsyncSession, title: str, description: str, author_id: str
    ) -> FeatureResponse:
        try:
            if await self._user_repo.get_user_by_id(db, author_id) is None:
                raise UserNotFoundError(f"Author not found: {author_id}")
            feature = await self._repo.create_feature(db, title, description, author_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await self._invalidator.feature_lists()
        logger.info("Feature %s created by %s", feature.id, author_id)
        return FeatureResponse.from_domain(feature)

    async def list_features(
        self,
        db: AsyncSession,
        status: FeatureStatus | None = None,
        page: int = 1,
        limit: int = 10,
        sort: FeatureSort = FeatureSort.NEWEST,
    ) -> FeatureListResponse:
        status_value = status.value if status else None
        cache_key = CacheKeys.features_list(status_value, page, limit, sort.value)
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return FeatureListResponse.model_validate(cached)

        result = await self._repo.list_features(db, status_value, sort.value, page, limit)
        response = FeatureListResponse.from_domain(result)
        await self._cache.set(cache_key, response.model_dump(mode="json"), CacheTTL.FEATURES_LIST)
        return response

    async def get_feature(self, db: AsyncSession, feature_id: str) -> FeatureResponse:
        cache_key = CacheKeys.feature_by_id(feature_id)
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return FeatureResponse.model_validate(cached)

        feature = await self._repo.get_feature_with_author(db, feature_id)
        if feature is None:
            raise FeatureNotFoundError(feature_id)
        response = FeatureResponse.from_domain(feature)
        await self._cache.set(cache_key, response.model_dump(mode="json"), CacheTTL.FEATURE_BY_ID)
        return response

    async def update_status(
        self, db: AsyncSession, feature_id: str, status: FeatureStatus, actor_id: str
    ) -> FeatureResponse:
        try:
            await self._get_owned_feature(db, feature_id, actor_id, action="update")
            if await self._repo.update_status(db, feature_id, status.value) is None:
                raise FeatureNotFoundError(feature_id)
            # RETURNING carries no author; re-read so the shape matches get_feature
            updated = await self._repo.get_feature_with_author(db, feature_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await self._invalidator.feature(feature_id)
        return FeatureResponse.from_domain(updated)

    async def delete(self, db: AsyncSession, feature_id: str, actor_id: str) -> bool:
        try:
            await self._get_owned_feature(db, feature_id, actor_id, action="delete")
            if not await self._repo.delete_feature(db, feature_id):
                raise FeatureNotFoundError(feature_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await self._invalidator.votes(feature_id)
        logger.info("Feature %s deleted by %s", feature_id, actor_id)
        return True

    async def invalidate_cache(self) -> int:
        """Drop every cached feature entry and list page."""
        return await self._invalidator.all_features()

    async def _get_owned_feature(
        self, db: AsyncSession, feature_id: str, actor_id: str, action: str
    ) -> Feature:
        feature = await self._repo.get_feature_by_id(db, feature_id)
        if feature is None:
            raise FeatureNotFoundError(feature_id)
        if feature.author_id != str(actor_id):
            raise FeatureForbiddenError(action)
        return feature
