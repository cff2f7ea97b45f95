"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "dealership",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=150), nullable=False),
    )
    op.create_index("ix_dealership_name", "dealership", ["name"])

    op.create_table(
        "role",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=50), nullable=False),
    )
    op.create_index("ix_role_name", "role", ["name"], unique=True)

    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(length=80), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=250), nullable=True),
        sa.Column("dealership_id", sa.Integer(), sa.ForeignKey("dealership.id"), nullable=False),
        sa.Column("role_id", sa.Integer(), sa.ForeignKey("role.id"), nullable=False),
        sa.Column("skills", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_user_username", "user", ["username"], unique=True)
    op.create_index("ix_user_full_name", "user", ["full_name"])
    op.create_index("ix_user_dealership_id", "user", ["dealership_id"])
    op.create_index("ix_user_role_id", "user", ["role_id"])
    op.create_index("ix_user_is_active", "user", ["is_active"])

    op.create_table(
        "user_tokens",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("access_key", sa.String(length=250), nullable=True),
        sa.Column("refresh_key", sa.String(length=250), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_user_tokens_user_id", "user_tokens", ["user_id"])
    op.create_index("ix_user_tokens_access_key", "user_tokens", ["access_key"])
    op.create_index("ix_user_tokens_refresh_key", "user_tokens", ["refresh_key"])

    op.create_table(
        "customer",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("dni", sa.String(length=20), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=150), nullable=True),
        sa.Column("phone", sa.String(length=30), nullable=True),
        sa.Column("email", sa.String(length=150), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_customer_dni", "customer", ["dni"], unique=True)
    op.create_index("ix_customer_last_name", "customer", ["last_name"])
    op.create_index("ix_customer_active", "customer", ["active"])

    op.create_table(
        "vehicle_category",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=80), nullable=False),
    )

    op.create_table(
        "vehicle",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("plate", sa.String(length=20), nullable=True),
        sa.Column("brand", sa.String(length=80), nullable=True),
        sa.Column("model", sa.String(length=80), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("color", sa.String(length=40), nullable=True),
        sa.Column("mileage", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("fuel", sa.String(length=40), nullable=True),
        sa.Column("transmission", sa.String(length=40), nullable=True),
        sa.Column("doors", sa.Integer(), nullable=True),
        sa.Column("entry_date", sa.Date(), nullable=True),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("vehicle_category.id", ondelete="SET NULL"), nullable=True),
    )
    op.create_index("ix_vehicle_plate", "vehicle", ["plate"], unique=True)
    op.create_index("ix_vehicle_entry_date", "vehicle", ["entry_date"])
    op.create_index("ix_vehicle_category_id", "vehicle", ["category_id"])

    op.create_table(
        "repair_order",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("vehicle_id", sa.Integer(), sa.ForeignKey("vehicle.id"), nullable=False),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customer.id"), nullable=False),
        sa.Column("created_by_boss_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("assigned_mechanic_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="PENDING"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("start_at", sa.DateTime(), nullable=True),
        sa.Column("end_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_repair_order_vehicle_id", "repair_order", ["vehicle_id"])
    op.create_index("ix_repair_order_customer_id", "repair_order", ["customer_id"])
    op.create_index("ix_repair_order_created_by_boss_id", "repair_order", ["created_by_boss_id"])
    op.create_index("ix_repair_order_assigned_mechanic_id", "repair_order", ["assigned_mechanic_id"])
    op.create_index("ix_repair_order_status", "repair_order", ["status"])
    op.create_index("ix_repair_order_end_at", "repair_order", ["end_at"])

    op.create_table(
        "sale_proposal",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customer.id"), nullable=False),
        sa.Column("vehicle_id", sa.Integer(), sa.ForeignKey("vehicle.id"), nullable=False),
        sa.Column("seller_user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("dealership_id", sa.Integer(), sa.ForeignKey("dealership.id"), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="ACTIVE"),
    )
    op.create_index("ix_sale_proposal_customer_id", "sale_proposal", ["customer_id"])
    op.create_index("ix_sale_proposal_vehicle_id", "sale_proposal", ["vehicle_id"])
    op.create_index("ix_sale_proposal_seller_user_id", "sale_proposal", ["seller_user_id"])
    op.create_index("ix_sale_proposal_dealership_id", "sale_proposal", ["dealership_id"])
    op.create_index("ix_sale_proposal_status", "sale_proposal", ["status"])

    op.create_table(
        "sale",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("proposal_id", sa.Integer(), sa.ForeignKey("sale_proposal.id"), nullable=False),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customer.id"), nullable=False),
        sa.Column("vehicle_id", sa.Integer(), sa.ForeignKey("vehicle.id"), nullable=False),
        sa.Column("seller_user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("dealership_id", sa.Integer(), sa.ForeignKey("dealership.id"), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("sale_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_sale_proposal_id", "sale", ["proposal_id"], unique=True)
    op.create_index("ix_sale_customer_id", "sale", ["customer_id"])
    op.create_index("ix_sale_vehicle_id", "sale", ["vehicle_id"])
    op.create_index("ix_sale_seller_user_id", "sale", ["seller_user_id"])
    op.create_index("ix_sale_dealership_id", "sale", ["dealership_id"])
    op.create_index("ix_sale_sale_date", "sale", ["sale_date"])


def downgrade() -> None:
    op.drop_table("sale")
    op.drop_table("sale_proposal")
    op.drop_table("repair_order")
    op.drop_table("vehicle")
    op.drop_table("vehicle_category")
    op.drop_table("customer")
    op.drop_table("user_tokens")
    op.drop_table("user")
    op.drop_table("role")
    op.drop_table("dealership")
