"""Back in stock: subscriptions, notification records, settings

Revision ID: 001
Revises:
Create Date: (run alembic upgrade head)

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "back_in_stock_subscriptions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("shop", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("product_id", sa.String(64), nullable=False),
        sa.Column("variant_id", sa.String(64), nullable=False, server_default=""),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("notified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("shop", "email", "product_id", "variant_id", name="uq_subscription_identity"),
    )
    op.create_index("ix_back_in_stock_subscriptions_shop", "back_in_stock_subscriptions", ["shop"], unique=False)
    # Eligibility query: shop + product, pending only, oldest first
    op.create_index(
        "ix_back_in_stock_subscriptions_eligible",
        "back_in_stock_subscriptions",
        ["shop", "product_id", "notified", "created_at"],
        unique=False,
    )

    op.create_table(
        "back_in_stock_notifications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("subscription_id", sa.Integer(), nullable=False),
        sa.Column("shop", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("product_id", sa.String(64), nullable=False),
        sa.Column("variant_id", sa.String(64), nullable=False, server_default=""),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("error", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_back_in_stock_notifications_subscription_id",
        "back_in_stock_notifications",
        ["subscription_id"],
        unique=False,
    )
    op.create_index("ix_back_in_stock_notifications_shop", "back_in_stock_notifications", ["shop"], unique=False)

    op.create_table(
        "back_in_stock_settings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("shop", sa.String(255), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("email_subject", sa.String(500), nullable=False),
        sa.Column("email_template", sa.Text(), nullable=False),
        sa.Column("button_text", sa.String(255), nullable=False),
        sa.Column("success_message", sa.String(500), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_back_in_stock_settings_shop", "back_in_stock_settings", ["shop"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_back_in_stock_settings_shop", table_name="back_in_stock_settings")
    op.drop_table("back_in_stock_settings")
    op.drop_index("ix_back_in_stock_notifications_shop", table_name="back_in_stock_notifications")
    op.drop_index("ix_back_in_stock_notifications_subscription_id", table_name="back_in_stock_notifications")
    op.drop_table("back_in_stock_notifications")
    op.drop_index("ix_back_in_stock_subscriptions_eligible", table_name="back_in_stock_subscriptions")
    op.drop_index("ix_back_in_stock_subscriptions_shop", table_name="back_in_stock_subscriptions")
    op.drop_table("back_in_stock_subscriptions")
