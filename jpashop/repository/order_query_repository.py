"""
DTO projections for orders with their line items.

Three shapes, all skipping entity materialization:

- find_order_query_dtos: orders, then one item query per order (1 + N)
- find_all_by_dto_optimization: orders, then every item in one IN query (2)
- find_all_by_dto_flat: one join, one row per line item; regroup with
  `group_flat_rows`
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import NamedTuple

from pydantic import Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jpashop.db.models import Address, Delivery, Item, Member, Order, OrderItem, OrderStatus
from jpashop.kernel.serialization import CamelModel


class OrderItemQueryDto(CamelModel):
    # Needed for grouping, not part of the response.
    order_id: int | None = Field(default=None, exclude=True)
    item_name: str
    order_price: int
    count: int


class OrderQueryDto(CamelModel):
    order_id: int
    name: str
    order_date: datetime
    order_status: OrderStatus
    address: Address | None = None
    order_items: list[OrderItemQueryDto] = Field(default_factory=list)


class OrderFlatDto(CamelModel):
    order_id: int
    name: str
    order_date: datetime
    order_status: OrderStatus
    address: Address | None = None

    item_name: str
    order_price: int
    count: int


def _order_rows_query():
    return (
        select(Order.id, Member.name, Order.order_date, Order.status, Delivery.address)
        .join(Order.member)
        .join(Order.delivery)
        .order_by(Order.id)
    )


def _order_item_rows_query():
    return (
        select(OrderItem.order_id, Item.name, OrderItem.order_price, OrderItem.count)
        .join(OrderItem.item)
        .order_by(OrderItem.id)
    )


async def _find_orders(session: AsyncSession) -> list[OrderQueryDto]:
    result = await session.execute(_order_rows_query())
    return [
        OrderQueryDto(
            order_id=order_id,
            name=name,
            order_date=order_date,
            order_status=status,
            address=address,
        )
        for order_id, name, order_date, status, address in result.all()
    ]


def _to_item_dtos(rows: Iterable) -> list[OrderItemQueryDto]:
    return [
        OrderItemQueryDto(order_id=order_id, item_name=item_name, order_price=order_price, count=count)
        for order_id, item_name, order_price, count in rows
    ]


async def _find_order_items(session: AsyncSession, order_id: int) -> list[OrderItemQueryDto]:
    result = await session.execute(_order_item_rows_query().where(OrderItem.order_id == order_id))
    return _to_item_dtos(result.all())


async def find_order_query_dtos(session: AsyncSession) -> list[OrderQueryDto]:
    """To-one columns in one query, then the item rows per order."""
    orders = await _find_orders(session)
    for order in orders:
        order.order_items = await _find_order_items(session, order.order_id)
    return orders


async def find_all_by_dto_optimization(session: AsyncSession) -> list[OrderQueryDto]:
    """To-one columns in one query, all item rows in a second IN query."""
    orders = await _find_orders(session)
    if not orders:
        return orders

    order_ids = [order.order_id for order in orders]
    result = await session.execute(_order_item_rows_query().where(OrderItem.order_id.in_(order_ids)))

    items_by_order: dict[int, list[OrderItemQueryDto]] = {order_id: [] for order_id in order_ids}
    for item in _to_item_dtos(result.all()):
        items_by_order[item.order_id].append(item)

    for order in orders:
        order.order_items = items_by_order[order.order_id]
    return orders


async def find_all_by_dto_flat(session: AsyncSession) -> list[OrderFlatDto]:
    """Order and item columns joined: one row per line item."""
    result = await session.execute(
        select(
            Order.id,
            Member.name,
            Order.order_date,
            Order.status,
            Delivery.address,
            Item.name,
            OrderItem.order_price,
            OrderItem.count,
        )
        .join(Order.member)
        .join(Order.delivery)
        .join(Order.order_items)
        .join(OrderItem.item)
        .order_by(Order.id, OrderItem.id)
    )
    return [
        OrderFlatDto(
            order_id=order_id,
            name=name,
            order_date=order_date,
            order_status=status,
            address=address,
            item_name=item_name,
            order_price=order_price,
            count=count,
        )
        for order_id, name, order_date, status, address, item_name, order_price, count in result.all()
    ]


class _OrderKey(NamedTuple):
    order_id: int
    name: str
    order_date: datetime
    order_status: OrderStatus
    address: Address | None


def group_flat_rows(rows: Iterable[OrderFlatDto]) -> list[OrderQueryDto]:
    """
    Fold flat rows back into one OrderQueryDto per order.

    Rows are grouped on every order-level field, not only `order_id`; rows
    from one join always agree on them. Line items keep row order and groups
    keep first-appearance order.
    """
    groups: dict[_OrderKey, list[OrderItemQueryDto]] = {}
    for row in rows:
        key = _OrderKey(row.order_id, row.name, row.order_date, row.order_status, row.address)
        groups.setdefault(key, []).append(
            OrderItemQueryDto(
                order_id=row.order_id,
                item_name=row.item_name,
                order_price=row.order_price,
                count=row.count,
            )
        )

    return [
        OrderQueryDto(
            order_id=key.order_id,
            name=key.name,
            order_date=key.order_date,
            order_status=key.order_status,
            address=key.address,
            order_items=items,
        )
        for key, items in groups.items()
    ]
