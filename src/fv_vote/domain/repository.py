"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock or an in-memory fake that conforms to this Protocol.
Infrastructure layer provides the PostgreSQL implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.fv_vote.domain.models import Vote


class VoteRepositoryProtocol(Protocol):
    async def get_vote_by_user_and_feature(
        self, db: AsyncSession, user_id: str, feature_id: str
    ) -> Vote | None: ...

    async def create_vote(
        self, db: AsyncSession, feature_id: str, user_id: str, vote_type: str
    ) -> Vote:
        """Insert a vote. Raises VoteConflictError if (user, feature) already voted."""
        ...

    async def update_vote_type(
        self, db: AsyncSession, vote_id: str, new_type: str, expected_type: str
    ) -> Vote | None:
        """Compare-and-swap: change the type only if it is still expected_type.

        Returns None when the vote is gone or its type was changed concurrently.
        """
        ...

    async def delete_vote_by_user_and_feature(
        self, db: AsyncSession, user_id: str, feature_id: str
    ) -> Vote | None:
        """Delete and return the removed vote, or None if there was none."""
        ...

    async def aggregate_votes_by_type(
        self, db: AsyncSession, feature_id: str
    ) -> dict[str, int]: ...
