"""create pricing tables

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-18 09:12:41.204117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "product",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("sku", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("brand", sa.String(length=120), nullable=False, server_default=""),
        sa.Column("product_type", sa.String(length=40), nullable=False, server_default="water"),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("primary_image", sa.String(length=500), nullable=True),
        sa.Column("gift_with_purchase_product_id", sa.Integer(), nullable=True),
        sa.Column("gift_with_purchase_quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("gift_with_purchase_auto_add", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_product_sku", "product", ["sku"], unique=True)

    op.create_table(
        "tier_pricing",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("product_id", sa.Integer(), nullable=True),
        sa.Column("sku", sa.String(length=64), nullable=True),
        sa.Column("category_id", sa.Integer(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_tier_pricing_product_id", "tier_pricing", ["product_id"])
    op.create_index("ix_tier_pricing_sku", "tier_pricing", ["sku"])
    op.create_index("ix_tier_pricing_category_id", "tier_pricing", ["category_id"])

    op.create_table(
        "tier_pricing_tier",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "tier_pricing_id",
            sa.Integer(),
            sa.ForeignKey("tier_pricing.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("min_quantity", sa.Integer(), nullable=False),
        sa.Column("max_quantity", sa.Integer(), nullable=True),
        sa.Column("discount_percentage", sa.Numeric(5, 2), nullable=True),
        sa.Column("discount_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("fixed_price", sa.Numeric(12, 2), nullable=True),
    )
    op.create_index("ix_tier_pricing_tier_tier_pricing_id", "tier_pricing_tier", ["tier_pricing_id"])

    op.create_table(
        "b2b_account",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("company_name", sa.String(length=255), nullable=False),
        sa.Column("contact_email", sa.String(length=255), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("pricing_tier", sa.String(length=20), nullable=False, server_default="standard"),
        sa.Column("payment_terms", sa.String(length=20), nullable=False, server_default="prepay"),
        sa.Column("discount_percentage", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("credit_limit", sa.Numeric(12, 2), nullable=True),
        sa.Column("credit_used", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("suspension_reason", sa.String(length=500), nullable=True),
        sa.Column("rejection_reason", sa.String(length=500), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "deal",
        sa.Column("iddeal", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("dealdiscription", sa.String(length=100), nullable=False),
        sa.Column("startprice", sa.Numeric(12, 2), nullable=False),
        sa.Column("endprice", sa.Numeric(12, 2), nullable=False),
        sa.Column("units", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reward_auto_add", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("validFrom", sa.DateTime(), nullable=True),
        sa.Column("validTo", sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_deal_startprice", "deal", ["startprice"])
    op.create_index("ix_deal_active", "deal", ["active"])

    op.create_table(
        "deal_reward_sku",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "deal_id",
            sa.Integer(),
            sa.ForeignKey("deal.iddeal", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sku", sa.String(length=64), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("price_override", sa.Numeric(12, 2), nullable=True),
    )
    op.create_index("ix_deal_reward_sku_deal_id", "deal_reward_sku", ["deal_id"])

    op.create_table(
        "order_discounts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("disc_code", sa.String(length=20), nullable=False),
        sa.Column("disc_perc", sa.Numeric(5, 2), nullable=True),
        sa.Column("disc_amt", sa.Numeric(12, 2), nullable=True),
        sa.Column("disc_from_amt", sa.Numeric(12, 2), nullable=False),
        sa.Column("disc_to_amt", sa.Numeric(12, 2), nullable=False),
        sa.Column("disc_status", sa.String(length=1), nullable=False, server_default="A"),
        sa.Column("disc_once_only", sa.String(length=1), nullable=False, server_default="N"),
        sa.Column("disc_valid_from", sa.String(length=8), nullable=False),
        sa.Column("disc_valid_to", sa.String(length=8), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("disc_code", name="uq_order_discounts_code"),
    )
    op.create_index("ix_order_discounts_disc_code", "order_discounts", ["disc_code"])
    op.create_index("ix_order_discounts_disc_status", "order_discounts", ["disc_status"])

    op.create_table(
        "product_discounts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("disc_code", sa.String(length=20), nullable=False),
        sa.Column("disc_type", sa.String(length=20), nullable=False),
        sa.Column("disc_perc", sa.Numeric(5, 2), nullable=True),
        sa.Column("disc_amt", sa.Numeric(12, 2), nullable=True),
        sa.Column("target_type", sa.String(length=20), nullable=False, server_default="global"),
        sa.Column("target_id", sa.Integer(), nullable=True),
        sa.Column("target_product_type", sa.String(length=20), nullable=True),
        sa.Column("disc_from_amt", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("disc_to_amt", sa.Numeric(12, 2), nullable=False, server_default="9999.99"),
        sa.Column("disc_status", sa.String(length=1), nullable=False, server_default="A"),
        sa.Column("disc_valid_from", sa.String(length=8), nullable=False),
        sa.Column("disc_valid_to", sa.String(length=8), nullable=False),
        sa.Column("disc_once_only", sa.String(length=1), nullable=False, server_default="N"),
        sa.Column("disc_free_shipping", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("disc_multi_by_qty", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("disc_compoundable", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("disc_allow_on_forms", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("disc_notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(length=255), nullable=False, server_default="system@local"),
        *_timestamps(),
        sa.UniqueConstraint("disc_code", name="uq_product_discounts_code"),
    )
    op.create_index("ix_product_discounts_disc_code", "product_discounts", ["disc_code"])
    op.create_index("ix_product_discounts_disc_status", "product_discounts", ["disc_status"])
    op.create_index("ix_product_discounts_target_type", "product_discounts", ["target_type"])


def downgrade() -> None:
    op.drop_table("product_discounts")
    op.drop_table("order_discounts")
    op.drop_table("deal_reward_sku")
    op.drop_table("deal")
    op.drop_table("b2b_account")
    op.drop_table("tier_pricing_tier")
    op.drop_table("tier_pricing")
    op.drop_table("product")
