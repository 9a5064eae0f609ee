"""004: create battles and battle_participants tables

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
        CREATE TABLE battles (
            id              VARCHAR(64)     PRIMARY KEY,
            title           VARCHAR(256)    NOT NULL,
            kind            VARCHAR(20)     NOT NULL,
            betting_mode    VARCHAR(20)     NOT NULL,
            start_time      TIMESTAMPTZ     NOT NULL,
            status          VARCHAR(20)     NOT NULL DEFAULT 'PENDING',
            winner_id       VARCHAR(64)     REFERENCES characters (id),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_battles_kind CHECK (kind IN ('TEAM_BATTLE', 'BATTLE_ROYALE')),
            CONSTRAINT ck_battles_betting_mode CHECK (betting_mode IN ('AMM', 'PARIMUTUEL')),
            CONSTRAINT ck_battles_status CHECK (
                status IN ('PENDING', 'ACTIVE', 'FINISHED', 'CANCELLED')
            ),
            CONSTRAINT ck_battles_winner_when_finished CHECK (
                status <> 'FINISHED' OR winner_id IS NOT NULL
            )
        );
    """)
    op.execute("CREATE INDEX idx_battles_status_start ON battles (status, start_time);")
    op.execute("""
        CREATE TRIGGER trg_battles_updated_at
            BEFORE UPDATE ON battles
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)

    op.execute("""
        CREATE TABLE battle_participants (
            battle_id       VARCHAR(64)     NOT NULL REFERENCES battles (id),
            character_id    VARCHAR(64)     NOT NULL REFERENCES characters (id),
            seat            SMALLINT        NOT NULL,
            PRIMARY KEY (battle_id, character_id),
            CONSTRAINT uq_battle_participants_seat UNIQUE (battle_id, seat),
            CONSTRAINT ck_battle_participants_seat_gte_0 CHECK (seat >= 0)
        );
    """)
    op.execute("COMMENT ON COLUMN battle_participants.seat IS '0 = side A, 1 = side B, ...';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS battle_participants CASCADE;")
    op.execute("DROP TABLE IF EXISTS battles CASCADE;")
