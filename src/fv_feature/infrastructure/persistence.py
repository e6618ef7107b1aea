"""FeatureRepository — concrete implementation of FeatureRepositoryProtocol.

vote_count is only ever changed through increment_vote_count(), a single atomic
UPDATE ... SET vote_count = vote_count + :delta RETURNING. Concurrent voters on the
same feature serialize on the row lock, so no increment is lost.

Transaction ownership: The CALLER (application service) commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.fv_common.enums import FeatureSort
from src.fv_common.errors import InternalError
from src.fv_common.ids import is_uuid
from src.fv_feature.domain.models import Feature, FeatureAuthor, FeaturePage

_FEATURE_COLUMNS = """
    id, title, description, status, author_id, vote_count, created_at, updated_at
"""

_GET_FEATURE_SQL = text(f"""
    SELECT {_FEATURE_COLUMNS}
    FROM features
    WHERE id = :feature_id
""")

_GET_FEATURE_WITH_AUTHOR_SQL = text("""
    SELECT f.id, f.title, f.description, f.status, f.author_id, f.vote_count,
           f.created_at, f.updated_at,
           u.name AS author_name, u.email AS author_email
    FROM features f
    JOIN users u ON u.id = f.author_id
    WHERE f.id = :feature_id
""")

_INSERT_FEATURE_SQL = text(f"""
    INSERT INTO features (title, description, status, author_id)
    VALUES (:title, :description, 'pending', :author_id)
    RETURNING {_FEATURE_COLUMNS}
""")

_UPDATE_STATUS_SQL = text(f"""
    UPDATE features
    SET status = :status
    WHERE id = :feature_id
    RETURNING {_FEATURE_COLUMNS}
""")

_INCREMENT_VOTE_COUNT_SQL = text(f"""
    UPDATE features
    SET vote_count = vote_count + :delta
    WHERE id = :feature_id
    RETURNING {_FEATURE_COLUMNS}
""")

_DELETE_FEATURE_SQL = text("""
    DELETE FROM features
    WHERE id = :feature_id
    RETURNING id
""")

_COUNT_FEATURES_SQL = text("""
    SELECT COUNT(*) AS total
    FROM features
    WHERE (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
""")

# ORDER BY cannot be a bind parameter; only these whitelisted fragments are interpolated.
_ORDER_BY = {
    FeatureSort.VOTES.value: "f.vote_count DESC, f.created_at DESC, f.id",
    FeatureSort.NEWEST.value: "f.created_at DESC, f.id",
    FeatureSort.OLDEST.value: "f.created_at ASC, f.id",
}

_LIST_FEATURES_SQL = {
    sort: text(f"""
        SELECT f.id, f.title, f.description, f.status, f.author_id, f.vote_count,
               f.created_at, f.updated_at,
               u.name AS author_name, u.email AS author_email
        FROM features f
        JOIN users u ON u.id = f.author_id
        WHERE (CAST(:status AS TEXT) IS NULL OR f.status = CAST(:status AS TEXT))
        ORDER BY {order_by}
        LIMIT :limit OFFSET :offset
    """)
    for sort, order_by in _ORDER_BY.items()
}


def _row_to_feature(row: object) -> Feature:
    return Feature(
        id=str(row.id),  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        author_id=str(row.author_id),  # type: ignore[attr-defined]
        vote_count=row.vote_count,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_feature_with_author(row: object) -> Feature:
    feature = _row_to_feature(row)
    feature.author = FeatureAuthor(
        id=feature.author_id,
        name=row.author_name,  # type: ignore[attr-defined]
        email=row.author_email,  # type: ignore[attr-defined]
    )
    return feature


class FeatureRepository:
    """Concrete repository — every mutation is a single atomic statement."""

    async def get_feature_by_id(
        self, db: AsyncSession, feature_id: str
    ) -> Feature | None:
        if not is_uuid(feature_id):
            return None
        result = await db.execute(_GET_FEATURE_SQL, {"feature_id": feature_id})
        row = result.fetchone()
        return _row_to_feature(row) if row else None

    async def get_feature_with_author(
        self, db: AsyncSession, feature_id: str
    ) -> Feature | None:
        if not is_uuid(feature_id):
            return None
        result = await db.execute(_GET_FEATURE_WITH_AUTHOR_SQL, {"feature_id": feature_id})
        row = result.fetchone()
        return _row_to_feature_with_author(row) if row else None

    async def list_features(
        self,
        db: AsyncSession,
        status: str | None,
        sort: str,
        page: int,
        limit: int,
    ) -> FeaturePage:
        query = _LIST_FEATURES_SQL.get(sort, _LIST_FEATURES_SQL[FeatureSort.NEWEST.value])
        result = await db.execute(
            query,
            {"status": status, "limit": limit, "offset": (page - 1) * limit},
        )
        rows = result.fetchall()
        count_result = await db.execute(_COUNT_FEATURES_SQL, {"status": status})
        total = count_result.scalar_one()
        return FeaturePage(
            items=[_row_to_feature_with_author(row) for row in rows],
            total=total,
            page=page,
            limit=limit,
        )

    async def create_feature(
        self, db: AsyncSession, title: str, description: str, author_id: str
    ) -> Feature:
        result = await db.execute(
            _INSERT_FEATURE_SQL,
            {"title": title, "description": description, "author_id": author_id},
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Feature insert returned no rows — this should never happen")
        return _row_to_feature(row)

    async def update_status(
        self, db: AsyncSession, feature_id: str, status: str
    ) -> Feature | None:
        if not is_uuid(feature_id):
            return None
        result = await db.execute(
            _UPDATE_STATUS_SQL, {"feature_id": feature_id, "status": status}
        )
        row = result.fetchone()
        return _row_to_feature(row) if row else None

    async def increment_vote_count(
        self, db: AsyncSession, feature_id: str, delta: int
    ) -> Feature | None:
        if not is_uuid(feature_id):
            return None
        result = await db.execute(
            _INCREMENT_VOTE_COUNT_SQL, {"feature_id": feature_id, "delta": delta}
        )
        row = result.fetchone()
        return _row_to_feature(row) if row else None

    async def delete_feature(self, db: AsyncSession, feature_id: str) -> bool:
        if not is_uuid(feature_id):
            return False
        result = await db.execute(_DELETE_FEATURE_SQL, {"feature_id": feature_id})
        return result.fetchone() is not None
