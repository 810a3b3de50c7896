"""Initial vault schema: subject, subject_key, subject_processor

Revision ID: a3f1c9d2e7b4
Revises:
Create Date: 2026-10-17 10:12:41.503118

Erasure deletes subject_key and subject_processor rows only; subject rows
are retained with status 'erased'.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a3f1c9d2e7b4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create vault tables."""
    op.create_table(
        "subject",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("encrypted_personal_data", sa.Text(), nullable=True),
        sa.Column("direct_marketing", sa.Boolean(), nullable=False),
        sa.Column("email_communication", sa.Boolean(), nullable=False),
        sa.Column("research", sa.Boolean(), nullable=False),
        sa.Column("objection", postgresql.JSONB(none_as_null=True), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("erased_at", sa.DateTime(timezone=True), nullable=True),
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
        sa.CheckConstraint(
            "status IN ('active', 'erased')", name="subject_status_check"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_subject_status"), "subject", ["status"], unique=False)

    op.create_table(
        "subject_key",
        sa.Column("subject_id", sa.String(), nullable=False),
        sa.Column("key", sa.String(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["subject_id"], ["subject.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("subject_id"),
    )

    op.create_table(
        "subject_processor",
        sa.Column("subject_id", sa.String(), nullable=False),
        sa.Column("processor_id", sa.String(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["subject_id"], ["subject.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("subject_id", "processor_id"),
    )
    op.create_index(
        op.f("ix_subject_processor_processor_id"),
        "subject_processor",
        ["processor_id"],
        unique=False,
    )


def downgrade() -> None:
    """Drop vault tables."""
    op.drop_index(op.f("ix_subject_processor_processor_id"), table_name="subject_processor")
    op.drop_table("subject_processor")
    op.drop_table("subject_key")
    op.drop_index(op.f("ix_subject_status"), table_name="subject")
    op.drop_table("subject")
