"""Add exception_logs table for persisted log events.

Revision ID: 5a1f0c3e9b27
Revises:
Create Date: 2026-10-19 09:12:44.201377
"""

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

from alembic import op

# revision identifiers, used by Alembic.
revision = "5a1f0c3e9b27"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "exception_logs",
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("context", sa.String(length=128), nullable=False),
        sa.Column("severity", sa.String(length=10), nullable=False),
        sa.Column("metadata", JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("data", JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("cause", JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_exception_logs_timestamp_desc",
        "exception_logs",
        [sa.literal_column("timestamp DESC")],
        unique=False,
    )
    op.create_index(
        op.f("ix_exception_logs_timestamp"), "exception_logs", ["timestamp"], unique=False
    )
    op.create_index(
        op.f("ix_exception_logs_context"), "exception_logs", ["context"], unique=False
    )
    op.create_index(
        op.f("ix_exception_logs_severity"), "exception_logs", ["severity"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_exception_logs_severity"), table_name="exception_logs")
    op.drop_index(op.f("ix_exception_logs_context"), table_name="exception_logs")
    op.drop_index(op.f("ix_exception_logs_timestamp"), table_name="exception_logs")
    op.drop_index("idx_exception_logs_timestamp_desc", table_name="exception_logs")
    op.drop_table("exception_logs")
