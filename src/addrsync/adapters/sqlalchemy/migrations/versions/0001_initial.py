"""Create event log and checkpoint tables.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from addrsync.adapters.sqlalchemy.mappings import UTCDateTime

revision: str = "0001_initial"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ENTITY_KINDS = ("POST_CODE", "ROAD", "ACCESS_ADDRESS", "UNIT_ADDRESS")


def upgrade() -> None:
    op.create_table(
        "address_event",
        sa.Column("position", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("event_type", sa.String(length=64), nullable=False),
        sa.Column(
            "entity_kind",
            sa.Enum(*ENTITY_KINDS, name="entitykind", native_enum=False, length=32),
            nullable=False,
        ),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("payload", sa.Text(), nullable=False),
        sa.Column("recorded_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("position", name=op.f("pk_address_event")),
    )
    with op.batch_alter_table("address_event", schema=None) as batch_op:
        batch_op.create_index(
            batch_op.f("ix_address_event_entity_id"), ["entity_id"], unique=False
        )

    op.create_table(
        "import_checkpoint",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("sequence", sa.BigInteger(), nullable=True),
        sa.Column("timestamp", UTCDateTime(), nullable=True),
        sa.Column("completed_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_import_checkpoint")),
    )


def downgrade() -> None:
    op.drop_table("import_checkpoint")
    with op.batch_alter_table("address_event", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_address_event_entity_id"))
    op.drop_table("address_event")
