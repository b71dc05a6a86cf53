"""Confirmation reminder queue.

Revision ID: 001_confirmation_queue
Revises:
Create Date: 2026-02-13

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001_confirmation_queue"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "confirmation_queue",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("clinic_id", sa.String(), nullable=False),
        sa.Column("appointment_id", sa.String(), nullable=False),
        sa.Column("stage", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("scheduled_at", sa.DateTime(), nullable=False),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("sent_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("appointment_id", "stage", name="uq_confirmation_queue_appointment_stage"),
    )
    op.create_index(op.f("ix_confirmation_queue_clinic_id"), "confirmation_queue", ["clinic_id"], unique=False)
    op.create_index(op.f("ix_confirmation_queue_appointment_id"), "confirmation_queue", ["appointment_id"], unique=False)
    op.create_index(op.f("ix_confirmation_queue_status"), "confirmation_queue", ["status"], unique=False)
    op.create_index(op.f("ix_confirmation_queue_scheduled_at"), "confirmation_queue", ["scheduled_at"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_confirmation_queue_scheduled_at"), table_name="confirmation_queue")
    op.drop_index(op.f("ix_confirmation_queue_status"), table_name="confirmation_queue")
    op.drop_index(op.f("ix_confirmation_queue_appointment_id"), table_name="confirmation_queue")
    op.drop_index(op.f("ix_confirmation_queue_clinic_id"), table_name="confirmation_queue")
    op.drop_table("confirmation_queue")
