"""VoteRepository — concrete implementation of VoteRepositoryProtocol.

One vote per (user_id, feature_id) is enforced by the uq_votes_user_feature
constraint, not by the service. The insert uses ON CONFLICT DO NOTHING so a lost
first-vote race yields zero rows (→ VoteConflictError) instead of aborting the
surrounding transaction with an IntegrityError.

Type changes and removals RETURN the row they touched, so the caller derives the
counter delta from what actually changed in the database.

Transaction ownership: The CALLER (application service) commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.fv_common.errors import VoteConflictError
from src.fv_common.ids import is_uuid
from src.fv_vote.domain.models import Vote

_VOTE_COLUMNS = "id, feature_id, user_id, type, created_at, updated_at"

_GET_VOTE_SQL = text(f"""
    SELECT {_VOTE_COLUMNS}
    FROM votes
    WHERE user_id = :user_id AND feature_id = :feature_id
""")

_INSERT_VOTE_SQL = text(f"""
    INSERT INTO votes (feature_id, user_id, type)
    VALUES (:feature_id, :user_id, :type)
    ON CONFLICT (user_id, feature_id) DO NOTHING
    RETURNING {_VOTE_COLUMNS}
""")

_UPDATE_VOTE_TYPE_SQL = text(f"""
    UPDATE votes
    SET type = :new_type
    WHERE id = :vote_id AND type = :expected_type
    RETURNING {_VOTE_COLUMNS}
""")

_DELETE_VOTE_SQL = text(f"""
    DELETE FROM votes
    WHERE user_id = :user_id AND feature_id = :feature_id
    RETURNING {_VOTE_COLUMNS}
""")

_AGGREGATE_VOTES_SQL = text("""
    SELECT type, COUNT(*) AS count
    FROM votes
    WHERE feature_id = :feature_id
    GROUP BY type
""")


def _row_to_vote(row: object) -> Vote:
    return Vote(
        id=str(row.id),  # type: ignore[attr-defined]
        feature_id=str(row.feature_id),  # type: ignore[attr-defined]
        user_id=str(row.user_id),  # type: ignore[attr-defined]
        type=row.type,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class VoteRepository:
    async def get_vote_by_user_and_feature(
        self, db: AsyncSession, user_id: str, feature_id: str
    ) -> Vote | None:
        if not (is_uuid(user_id) and is_uuid(feature_id)):
            return None
        result = await db.execute(
            _GET_VOTE_SQL, {"user_id": user_id, "feature_id": feature_id}
        )
        row = result.fetchone()
        return _row_to_vote(row) if row else None

    async def create_vote(
        self, db: AsyncSession, feature_id: str, user_id: str, vote_type: str
    ) -> Vote:
        result = await db.execute(
            _INSERT_VOTE_SQL,
            {"feature_id": feature_id, "user_id": user_id, "type": vote_type},
        )
        row = result.fetchone()
        if row is None:
            raise VoteConflictError(feature_id, user_id)
        return _row_to_vote(row)

    async def update_vote_type(
        self, db: AsyncSession, vote_id: str, new_type: str, expected_type: str
    ) -> Vote | None:
        result = await db.execute(
            _UPDATE_VOTE_TYPE_SQL,
            {"vote_id": vote_id, "new_type": new_type, "expected_type": expected_type},
        )
        row = result.fetchone()
        return _row_to_vote(row) if row else None

    async def delete_vote_by_user_and_feature(
        self, db: AsyncSession, user_id: str, feature_id: str
    ) -> Vote | None:
        if not (is_uuid(user_id) and is_uuid(feature_id)):
            return None
        result = await db.execute(
            _DELETE_VOTE_SQL, {"user_id": user_id, "feature_id": feature_id}
        )
        row = result.fetchone()
        return _row_to_vote(row) if row else None

    async def aggregate_votes_by_type(
        self, db: AsyncSession, feature_id: str
    ) -> dict[str, int]:
        counts = {"up": 0, "down": 0}
        if not is_uuid(feature_id):
            return counts
        result = await db.execute(_AGGREGATE_VOTES_SQL, {"feature_id": feature_id})
        for row in result.fetchall():
            counts[row.type] = row.count
        return counts
