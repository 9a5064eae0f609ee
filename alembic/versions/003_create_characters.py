"""003: create characters table

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
        CREATE TABLE characters (
            id          VARCHAR(64)     PRIMARY KEY,
            name        VARCHAR(128)    NOT NULL,
            owner_id    VARCHAR(64)     NOT NULL REFERENCES users (id),
            created_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("CREATE INDEX idx_characters_owner ON characters (owner_id);")
    op.execute("""
        CREATE TRIGGER trg_characters_updated_at
            BEFORE UPDATE ON characters
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS characters CASCADE;")
