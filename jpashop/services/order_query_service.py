"""
Order graph initialization.

The async ORM refuses implicit IO, so lazy loads only run inside
`AsyncSession.run_sync`. The walkers here are plain sync functions meant for
that context:

    await session.run_sync(lambda _: initialize_order_graph(orders))

Every attribute touched costs one statement unless it is already in the
identity map, which is the 1 + N + N + N pattern the fetch-join queries
avoid.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from jpashop.db.client import get_db_session
from jpashop.db.models import Order
from jpashop.repository import order_repository

logger = structlog.get_logger()


def initialize_simple_order_graph(orders: Sequence[Order]) -> Sequence[Order]:
    """Load member and delivery of every order."""
    for order in orders:
        order.member.name
        order.delivery.address
    return orders


def initialize_order_graph(orders: Sequence[Order]) -> Sequence[Order]:
    """Load member, delivery, line items and their items of every order."""
    initialize_simple_order_graph(orders)
    for order in orders:
        for order_item in order.order_items:
            order_item.item.name
    return orders


async def osiv_test2() -> list[Order]:
    """
    Orders with the whole graph initialized before the unit of work closes.

    Callers get detached but fully loaded entities, so they work with
    open-session-in-view disabled.
    """
    async with get_db_session() as session:
        orders = await order_repository.osiv_test(session)
        await session.run_sync(lambda _: initialize_order_graph(orders))

    logger.debug("Order graph initialized in service scope", orders=len(orders))
    return orders
