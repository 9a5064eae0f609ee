"""007: create market_snapshots table

Revision ID: 007
Revises: 006
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE market_snapshots (
            id          VARCHAR(64)     PRIMARY KEY,
            battle_id   VARCHAR(64)     NOT NULL REFERENCES battles (id),
            odds        JSONB           NOT NULL,
            created_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute(
        "CREATE INDEX idx_market_snapshots_battle_time"
        " ON market_snapshots (battle_id, created_at DESC);"
    )
    op.execute(
        "COMMENT ON COLUMN market_snapshots.odds IS"
        " 'character id -> decimal odds as string';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS market_snapshots CASCADE;")
