"""create_registry_tables

Revision ID: 4c1d7e2a9b30
Revises:
Create Date: 2026-10-19 09:12:41.508317

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "4c1d7e2a9b30"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create registry_profiles and registry_events tables."""
    op.create_table(
        "registry_profiles",
        sa.Column("identity", sa.String(length=128), nullable=False),
        sa.Column("handle", sa.String(length=20), nullable=False),
        sa.Column("content_pointer", sa.String(length=512), nullable=False),
        sa.Column("roster_position", sa.Integer(), nullable=False),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("view_count >= 0", name="ck_registry_profiles_view_count"),
        sa.CheckConstraint("updated_at >= created_at", name="ck_registry_profiles_timestamps"),
        sa.PrimaryKeyConstraint("identity"),
        sa.UniqueConstraint("handle"),
        sa.UniqueConstraint("roster_position"),
    )
    op.create_table(
        "registry_events",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("kind", sa.String(length=20), nullable=False),
        sa.Column("identity", sa.String(length=128), nullable=False),
        sa.Column("actor", sa.String(length=128), nullable=True),
        sa.Column("payload", postgresql.JSONB(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("kind IN ('created', 'updated', 'view_recorded')"),
        sa.PrimaryKeyConstraint("id"),
    )
    # Per-profile history (newest first)
    op.create_index(
        "ix_registry_events_identity_created",
        "registry_events",
        ["identity", sa.text("created_at DESC")],
        unique=False,
    )


def downgrade() -> None:
    """Drop registry tables."""
    op.drop_index("ix_registry_events_identity_created", table_name="registry_events")
    op.drop_table("registry_events")
    op.drop_table("registry_profiles")
