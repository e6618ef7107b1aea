# tests/unit/test_vote_persistence.py
"""Unit tests for VoteRepository using MagicMock AsyncSession."""
import uuid
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.fv_common.errors import VoteConflictError
from src.fv_vote.infrastructure.persistence import VoteRepository

FEATURE_ID = str(uuid.uuid4())
USER_ID = str(uuid.uuid4())


def _make_vote_row(vote_type: str = "up"):
    row = MagicMock()
    row.id = uuid.uuid4()
    row.feature_id = uuid.UUID(FEATURE_ID)
    row.user_id = uuid.UUID(USER_ID)
    row.type = vote_type
    row.created_at = datetime.now(UTC)
    row.updated_at = datetime.now(UTC)
    return row


def _result(row=None, rows=None):
    result = MagicMock()
    result.fetchone.return_value = row
    result.fetchall.return_value = rows or []
    return result


@pytest.fixture
def db():
    return MagicMock()


class TestGetVote:
    @pytest.mark.asyncio
    async def test_found(self, db):
        db.execute = AsyncMock(return_value=_result(_make_vote_row("down")))
        vote = await VoteRepository().get_vote_by_user_and_feature(db, USER_ID, FEATURE_ID)
        assert vote.type == "down"
        assert vote.feature_id == FEATURE_ID
        assert vote.user_id == USER_ID

    @pytest.mark.asyncio
    async def test_malformed_ids_skip_query(self, db):
        db.execute = AsyncMock()
        assert await VoteRepository().get_vote_by_user_and_feature(db, "x", FEATURE_ID) is None
        db.execute.assert_not_awaited()


class TestCreateVote:
    @pytest.mark.asyncio
    async def test_inserted(self, db):
        db.execute = AsyncMock(return_value=_result(_make_vote_row("up")))
        vote = await VoteRepository().create_vote(db, FEATURE_ID, USER_ID, "up")
        assert vote.type == "up"
        assert "ON CONFLICT (user_id, feature_id) DO NOTHING" in str(db.execute.await_args.args[0])

    @pytest.mark.asyncio
    async def test_conflict_raises(self, db):
        db.execute = AsyncMock(return_value=_result(None))
        with pytest.raises(VoteConflictError):
            await VoteRepository().create_vote(db, FEATURE_ID, USER_ID, "up")


class TestUpdateVoteType:
    @pytest.mark.asyncio
    async def test_compare_and_swap_params(self, db):
        db.execute = AsyncMock(return_value=_result(_make_vote_row("down")))
        vote = await VoteRepository().update_vote_type(db, "v1", "down", expected_type="up")
        assert vote.type == "down"
        assert db.execute.await_args.args[1] == {
            "vote_id": "v1", "new_type": "down", "expected_type": "up",
        }

    @pytest.mark.asyncio
    async def test_lost_race_returns_none(self, db):
        db.execute = AsyncMock(return_value=_result(None))
        assert await VoteRepository().update_vote_type(db, "v1", "down", "up") is None


class TestDeleteVote:
    @pytest.mark.asyncio
    async def test_returns_removed_vote(self, db):
        db.execute = AsyncMock(return_value=_result(_make_vote_row("down")))
        removed = await VoteRepository().delete_vote_by_user_and_feature(db, USER_ID, FEATURE_ID)
        assert removed.type == "down"

    @pytest.mark.asyncio
    async def test_nothing_to_remove(self, db):
        db.execute = AsyncMock(return_value=_result(None))
        assert await VoteRepository().delete_vote_by_user_and_feature(db, USER_ID, FEATURE_ID) is None


class TestAggregate:
    @pytest.mark.asyncio
    async def test_counts_by_type(self, db):
        up = MagicMock(type="up", count=4)
        down = MagicMock(type="down", count=1)
        db.execute = AsyncMock(return_value=_result(rows=[up, down]))
        assert await VoteRepository().aggregate_votes_by_type(db, FEATURE_ID) == {"up": 4, "down": 1}

    @pytest.mark.asyncio
    async def test_missing_types_default_to_zero(self, db):
        db.execute = AsyncMock(return_value=_result(rows=[MagicMock(type="up", count=2)]))
        assert await VoteRepository().aggregate_votes_by_type(db, FEATURE_ID) == {"up": 2, "down": 0}
