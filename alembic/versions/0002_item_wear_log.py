"""item wear log

Revision ID: 0002_item_wear_log
Revises: 0001_init
Create Date: 2026-10-17
"""
from alembic import op
import sqlalchemy as sa

revision = "0002_item_wear_log"
down_revision = "0001_init"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "item_wear_log",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("item_id", sa.Uuid(as_uuid=True), sa.ForeignKey("wardrobe_items.id", ondelete="CASCADE"), nullable=False),
        sa.Column("worn_date", sa.Date(), nullable=False),
        sa.Column("source", sa.String(length=16), nullable=False, server_default="manual"),
        sa.Column("feedback_id", sa.Uuid(as_uuid=True), sa.ForeignKey("outfit_feedback.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )
    op.create_index("ix_item_wear_log_user_id", "item_wear_log", ["user_id"])
    op.create_index("ix_item_wear_log_item_id", "item_wear_log", ["item_id"])
    op.create_index("ix_item_wear_log_worn_date", "item_wear_log", ["worn_date"])


def downgrade() -> None:
    op.drop_table("item_wear_log")
