"""
Order entity queries.

Each function takes the caller's unit of work and returns Order entities
loaded with a different fetch shape:

- find_all: nothing but orders; every association stays lazy
- find_all_with_member_delivery: to-one associations joined in
- find_all_with_item: to-one associations plus the item collection joined in
- find_page_with_items: a page of orders, collections batch-fetched afterwards

Whatever a function does not load has to be touched inside the same session
(via `run_sync`) or it fails once the session is gone.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager, joinedload
from sqlalchemy.orm.attributes import set_committed_value

from jpashop.db.models import Member, Order, OrderItem, OrderStatus

logger = structlog.get_logger()

MAX_SEARCH_RESULTS = 1000


@dataclass
class OrderSearch:
    """Optional filters for `find_all`; empty means every order."""

    member_name: str | None = None
    order_status: OrderStatus | None = None


def _apply_search(query: Select, search: OrderSearch) -> Select:
    if search.order_status is not None:
        query = query.where(Order.status == search.order_status)
    if search.member_name:
        query = query.join(Order.member).where(Member.name.contains(search.member_name))
    return query


async def find_all(session: AsyncSession, search: OrderSearch | None = None) -> list[Order]:
    """Orders only. Member, delivery and items are loaded on first access.

    Capped at MAX_SEARCH_RESULTS rows, unlike the join queries below, so past
    that many orders the lazy endpoints (v1/v2) list fewer orders than v3+.
    """
    query = _apply_search(select(Order), search or OrderSearch())
    query = query.order_by(Order.id).limit(MAX_SEARCH_RESULTS)

    result = await session.execute(query)
    return list(result.scalars().all())


def _with_member_delivery() -> Select:
    return (
        select(Order)
        .join(Order.member)
        .join(Order.delivery)
        .options(contains_eager(Order.member), contains_eager(Order.delivery))
    )


async def find_all_with_member_delivery(
    session: AsyncSession,
    offset: int | None = None,
    limit: int | None = None,
) -> list[Order]:
    """Orders with member and delivery fetched in the same statement.

    Paging is safe here: to-one joins never multiply rows.
    """
    query = _with_member_delivery().order_by(Order.id)
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)

    result = await session.execute(query)
    return list(result.scalars().all())


async def find_all_with_item(session: AsyncSession) -> list[Order]:
    """Whole graph in one statement.

    The collection join yields one row per line item, so rows are
    de-duplicated by identity. Not pageable: a LIMIT would cut line items,
    not orders. Orders without items are not returned (inner join).
    """
    query = (
        select(Order)
        .join(Order.member)
        .join(Order.delivery)
        .join(Order.order_items)
        .join(OrderItem.item)
        .options(
            contains_eager(Order.member),
            contains_eager(Order.delivery),
            contains_eager(Order.order_items).contains_eager(OrderItem.item),
        )
        .order_by(Order.id, OrderItem.id)
    )

    result = await session.execute(query)
    return list(result.unique().scalars().all())


async def load_order_items_in_batches(
    session: AsyncSession,
    orders: list[Order],
    batch_size: int,
) -> None:
    """
    Populate `order_items` of every order with IN-list queries.

    Issues ceil(len(orders) / batch_size) statements instead of one per
    order. Items are joined in. The loaded lists are installed as committed
    state, so the collections count as loaded and never trigger a lazy load.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")
    if not orders:
        return

    items_by_order: dict[int, list[OrderItem]] = {order.id: [] for order in orders}
    order_ids = list(items_by_order)

    for start in range(0, len(order_ids), batch_size):
        chunk = order_ids[start : start + batch_size]
        result = await session.execute(
            select(OrderItem)
            .options(joinedload(OrderItem.item))
            .where(OrderItem.order_id.in_(chunk))
            .order_by(OrderItem.id)
        )
        for order_item in result.scalars():
            items_by_order[order_item.order_id].append(order_item)

    for order in orders:
        set_committed_value(order, "order_items", items_by_order[order.id])

    logger.debug(
        "Order items batch-fetched",
        orders=len(orders),
        batch_size=batch_size,
        batches=(len(order_ids) + batch_size - 1) // batch_size,
    )


async def find_page_with_items(
    session: AsyncSession,
    offset: int,
    limit: int,
    batch_size: int,
) -> list[Order]:
    """A page of fully loaded orders: to-one join, then batched collections."""
    orders = await find_all_with_member_delivery(session, offset=offset, limit=limit)
    await load_order_items_in_batches(session, orders, batch_size)
    return orders


async def osiv_test(session: AsyncSession) -> list[Order]:
    """Plain order list used by the open-session-in-view demonstrations."""
    result = await session.execute(select(Order).order_by(Order.id))
    return list(result.scalars().all())
