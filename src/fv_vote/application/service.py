"""VoteApplicationService — the vote ledger.

Keeps features.vote_count equal to (up votes - down votes) for every feature:

  new vote            → +1 (up) / -1 (down)
  same type again     → no-op, existing vote returned unchanged
  type change         → +2 (down→up) / -2 (up→down), one counter update
  removal             → -1 (removed up) / +1 (removed down)

The vote row mutation and the counter update share one transaction: the service
commits on success and rolls back on any error. Cache entries are invalidated only
after the commit, so a reader repopulating on a miss sees the committed state.

Concurrency:
  - the counter is changed with an atomic SQL increment (no read-modify-write here);
  - a lost first-vote race surfaces as VoteConflictError from the repository and is
    recovered by re-reading the winner's vote and taking the update path;
  - type changes are compare-and-swap; a lost CAS is retried, up to max_retries
    attempts in total, after which VoteContentionError (transient) is raised.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.fv_cache.application.invalidation import CacheInvalidator
from src.fv_cache.domain.cache import CacheKeys, CacheProtocol, CacheTTL
from src.fv_cache.infrastructure.noop_cache import NoOpCache
from src.fv_common.enums import VoteType
from src.fv_common.errors import (
    FeatureNotFoundError,
    VoteConflictError,
    VoteContentionError,
    VoteNotFoundError,
)
from src.fv_feature.domain.repository import FeatureRepositoryProtocol
from src.fv_feature.infrastructure.persistence import FeatureRepository
from src.fv_vote.application.schemas import VoteResponse, VoteStatsResponse
from src.fv_vote.domain.models import Vote, VoteStats
from src.fv_vote.domain.repository import VoteRepositoryProtocol
from src.fv_vote.infrastructure.persistence import VoteRepository

logger = logging.getLogger(__name__)


class VoteApplicationService:
    def __init__(
        self,
        vote_repo: VoteRepositoryProtocol | None = None,
        feature_repo: FeatureRepositoryProtocol | None = None,
        cache: CacheProtocol | None = None,
        max_retries: int | None = None,
    ) -> None:
        self._vote_repo: VoteRepositoryProtocol = vote_repo or VoteRepository()
        self._feature_repo: FeatureRepositoryProtocol = feature_repo or FeatureRepository()
        self._cache: CacheProtocol = cache if cache is not None else NoOpCache()
        self._invalidator = CacheInvalidator(self._cache)
        self._max_retries = settings.VOTE_MAX_RETRIES if max_retries is None else max_retries

    async def cast_vote(
        self, db: AsyncSession, feature_id: str, user_id: str, vote_type: VoteType | str
    ) -> VoteResponse:
        vote_type = VoteType(vote_type)
        try:
            vote, changed = await self._apply_vote(db, feature_id, user_id, vote_type)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        if changed:
            await self._invalidator.votes(feature_id)
        return VoteResponse.from_domain(vote)

    async def remove_vote(self, db: AsyncSession, feature_id: str, user_id: str) -> bool:
        try:
            # DELETE ... RETURNING: the delta comes from the row actually removed,
            # so two concurrent removals cannot both decrement the counter.
            removed = await self._vote_repo.delete_vote_by_user_and_feature(
                db, user_id, feature_id
            )
            if removed is None:
                raise VoteNotFoundError(feature_id)
            await self._apply_delta(db, feature_id, -VoteType(removed.type).weight)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await self._invalidator.votes(feature_id)
        return True

    async def get_vote_stats(self, db: AsyncSession, feature_id: str) -> VoteStatsResponse:
        cache_key = CacheKeys.vote_stats(feature_id)
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return VoteStatsResponse.model_validate(cached)

        feature = await self._feature_repo.get_feature_by_id(db, feature_id)
        if feature is None:
            raise FeatureNotFoundError(feature_id)

        counts = await self._vote_repo.aggregate_votes_by_type(db, feature_id)
        stats = VoteStats(
            feature_id=feature_id,
            upvotes=counts.get(VoteType.UP.value, 0),
            downvotes=counts.get(VoteType.DOWN.value, 0),
        )
        response = VoteStatsResponse.from_domain(stats)
        await self._cache.set(cache_key, response.model_dump(mode="json"), CacheTTL.VOTE_STATS)
        return response

    async def get_user_vote(
        self, db: AsyncSession, feature_id: str, user_id: str
    ) -> VoteResponse | None:
        vote = await self._vote_repo.get_vote_by_user_and_feature(db, user_id, feature_id)
        return VoteResponse.from_domain(vote) if vote else None

    async def _apply_vote(
        self, db: AsyncSession, feature_id: str, user_id: str, vote_type: VoteType
    ) -> tuple[Vote, bool]:
        """Returns (current vote, whether anything was written)."""
        feature = await self._feature_repo.get_feature_by_id(db, feature_id)
        if feature is None:
            raise FeatureNotFoundError(feature_id)

        for attempt in range(1, self._max_retries + 1):
            existing = await self._vote_repo.get_vote_by_user_and_feature(
                db, user_id, feature_id
            )

            if existing is None:
                try:
                    vote = await self._vote_repo.create_vote(
                        db, feature_id, user_id, vote_type.value
                    )
                except VoteConflictError:
                    logger.info(
                        "Concurrent first vote: user=%s feature=%s attempt=%d, retrying as update",
                        user_id, feature_id, attempt,
                    )
                    continue
                await self._apply_delta(db, feature_id, vote_type.weight)
                return vote, True

            if existing.type == vote_type.value:
                return existing, False

            updated = await self._vote_repo.update_vote_type(
                db, existing.id, vote_type.value, expected_type=existing.type
            )
            if updated is None:
                logger.info(
                    "Vote changed concurrently: user=%s feature=%s attempt=%d",
                    user_id, feature_id, attempt,
                )
                continue
            # Old contribution removed and new one added in a single update
            await self._apply_delta(db, feature_id, 2 * vote_type.weight)
            return updated, True

        logger.warning(
            "Giving up on contended vote: user=%s feature=%s attempts=%d",
            user_id, feature_id, self._max_retries,
        )
        raise VoteContentionError(feature_id, self._max_retries)

    async def _apply_delta(self, db: AsyncSession, feature_id: str, delta: int) -> None:
        updated = await self._feature_repo.increment_vote_count(db, feature_id, delta)
        if updated is None:
            # Feature deleted after the existence check; rollback undoes the vote write.
            raise FeatureNotFoundError(feature_id)
        logger.debug(
            "vote_count feature=%s delta=%+d now=%d", feature_id, delta, updated.vote_count
        )
