"""005: create betting_pools table

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE betting_pools (
            id              BIGSERIAL       PRIMARY KEY,
            battle_id       VARCHAR(64)     NOT NULL REFERENCES battles (id),
            character_id    VARCHAR(64)     NOT NULL REFERENCES characters (id),
            total_volume    NUMERIC(36, 18) NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_betting_pools_battle_character UNIQUE (battle_id, character_id),
            CONSTRAINT ck_betting_pools_volume_gte_0 CHECK (total_volume >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_betting_pools_updated_at
            BEFORE UPDATE ON betting_pools
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS betting_pools CASCADE;")
