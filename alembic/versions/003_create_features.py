"""003: create features table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE features (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            title           VARCHAR(200)    NOT NULL,
            description     VARCHAR(2000)   NOT NULL,
            status          VARCHAR(20)     NOT NULL DEFAULT 'pending',
            author_id       UUID            NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            vote_count      INTEGER         NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_features_status CHECK (
                status IN ('pending', 'in_progress', 'completed', 'rejected')
            ),
            CONSTRAINT ck_features_title_len CHECK (LENGTH(title) >= 1),
            CONSTRAINT ck_features_description_len CHECK (LENGTH(description) >= 1)
        );
    """)
    op.execute("CREATE INDEX idx_features_status ON features (status);")
    op.execute("CREATE INDEX idx_features_vote_count ON features (vote_count DESC, created_at DESC);")
    op.execute("CREATE INDEX idx_features_created_at ON features (created_at DESC);")
    op.execute("CREATE INDEX idx_features_author ON features (author_id);")
    op.execute("""
        CREATE TRIGGER trg_features_updated_at
            BEFORE UPDATE ON features
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute(
        "COMMENT ON COLUMN features.vote_count IS "
        "'Denormalized: up votes minus down votes, maintained by the vote service';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS features CASCADE;")
