"""006: create bets table

Revision ID: 006
Revises: 005
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE bets (
            id              VARCHAR(64)     PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL REFERENCES users (id),
            battle_id       VARCHAR(64)     NOT NULL REFERENCES battles (id),
            character_id    VARCHAR(64)     NOT NULL REFERENCES characters (id),
            amount          NUMERIC(36, 18) NOT NULL,
            net_amount      NUMERIC(36, 18) NOT NULL,
            odds            NUMERIC(24, 18),
            status          VARCHAR(20)     NOT NULL DEFAULT 'PENDING',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            settled_at      TIMESTAMPTZ,
            CONSTRAINT ck_bets_amount_gt_0 CHECK (amount > 0),
            CONSTRAINT ck_bets_net_amount CHECK (net_amount > 0 AND net_amount <= amount),
            CONSTRAINT ck_bets_status CHECK (
                status IN ('PENDING', 'PENDING_LIQUIDITY', 'WON', 'LOST', 'CANCELLED')
            )
        );
    """)
    op.execute("CREATE INDEX idx_bets_battle_status ON bets (battle_id, status);")
    op.execute("CREATE INDEX idx_bets_user_time ON bets (user_id, created_at DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bets CASCADE;")
