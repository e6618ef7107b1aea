"""004: create votes table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE votes (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            feature_id      UUID            NOT NULL REFERENCES features(id) ON DELETE CASCADE,
            user_id         UUID            NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            type            VARCHAR(4)      NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_votes_user_feature UNIQUE (user_id, feature_id),
            CONSTRAINT ck_votes_type CHECK (type IN ('up', 'down'))
        );
    """)
    op.execute("CREATE INDEX idx_votes_feature_type ON votes (feature_id, type);")
    op.execute("""
        CREATE TRIGGER trg_votes_updated_at
            BEFORE UPDATE ON votes
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE votes IS 'At most one vote per (user, feature)';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS votes CASCADE;")
