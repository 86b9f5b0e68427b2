"""Create member, delivery, item, orders and order_item tables.

Revision ID: 001_create_shop_tables
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_create_shop_tables"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _address_columns() -> list[sa.Column]:
    return [
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("street", sa.String(255), nullable=True),
        sa.Column("zipcode", sa.String(20), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "member",
        sa.Column("member_id", sa.BigInteger(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        *_address_columns(),
        sa.PrimaryKeyConstraint("member_id", name="pk_member"),
    )

    op.create_table(
        "delivery",
        sa.Column("delivery_id", sa.BigInteger(), nullable=False),
        *_address_columns(),
        sa.Column("status", sa.String(20), nullable=False),
        sa.PrimaryKeyConstraint("delivery_id", name="pk_delivery"),
    )

    op.create_table(
        "item",
        sa.Column("item_id", sa.BigInteger(), nullable=False),
        sa.Column("dtype", sa.String(31), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("stock_quantity", sa.Integer(), nullable=False),
        sa.Column("author", sa.String(255), nullable=True),
        sa.Column("isbn", sa.String(255), nullable=True),
        sa.Column("artist", sa.String(255), nullable=True),
        sa.Column("etc", sa.String(255), nullable=True),
        sa.Column("director", sa.String(255), nullable=True),
        sa.Column("actor", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("item_id", name="pk_item"),
    )

    op.create_table(
        "orders",
        sa.Column("order_id", sa.BigInteger(), nullable=False),
        sa.Column("member_id", sa.BigInteger(), nullable=False),
        sa.Column("delivery_id", sa.BigInteger(), nullable=False),
        sa.Column("order_date", sa.DateTime(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.PrimaryKeyConstraint("order_id", name="pk_orders"),
        sa.ForeignKeyConstraint(["member_id"], ["member.member_id"], name="fk_orders_member_id_member"),
        sa.ForeignKeyConstraint(["delivery_id"], ["delivery.delivery_id"], name="fk_orders_delivery_id_delivery"),
        sa.UniqueConstraint("delivery_id", name="uq_orders_delivery_id"),
    )
    op.create_index("ix_orders_member_id", "orders", ["member_id"])

    op.create_table(
        "order_item",
        sa.Column("order_item_id", sa.BigInteger(), nullable=False),
        sa.Column("order_id", sa.BigInteger(), nullable=False),
        sa.Column("item_id", sa.BigInteger(), nullable=False),
        sa.Column("order_price", sa.Integer(), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("order_item_id", name="pk_order_item"),
        sa.ForeignKeyConstraint(["order_id"], ["orders.order_id"], name="fk_order_item_order_id_orders"),
        sa.ForeignKeyConstraint(["item_id"], ["item.item_id"], name="fk_order_item_item_id_item"),
    )
    op.create_index("ix_order_item_order_id", "order_item", ["order_id"])
    op.create_index("ix_order_item_item_id", "order_item", ["item_id"])


def downgrade() -> None:
    op.drop_index("ix_order_item_item_id", table_name="order_item")
    op.drop_index("ix_order_item_order_id", table_name="order_item")
    op.drop_table("order_item")
    op.drop_index("ix_orders_member_id", table_name="orders")
    op.drop_table("orders")
    op.drop_table("item")
    op.drop_table("delivery")
    op.drop_table("member")
