"""
Sample data for demos and tests.

Two members, four books, two orders of two lines each.
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from jpashop.db.models import Address, Book, Delivery, Member, Order, OrderItem

logger = structlog.get_logger()


def _member(name: str, city: str, street: str, zipcode: str) -> Member:
    return Member(name=name, address=Address(city=city, street=street, zipcode=zipcode))


def _book(name: str, price: int, stock_quantity: int) -> Book:
    return Book(name=name, price=price, stock_quantity=stock_quantity)


def _delivery(member: Member) -> Delivery:
    return Delivery(address=member.address)


def build_sample_orders() -> list[Order]:
    """Build the demo object graph without touching the database."""
    user_a = _member("userA", "Seoul", "1", "1111")
    jpa1 = _book("JPA1 BOOK", 10000, 100)
    jpa2 = _book("JPA2 BOOK", 20000, 100)
    order_a = Order.create_order(
        user_a,
        _delivery(user_a),
        OrderItem.create_order_item(jpa1, 10000, 1),
        OrderItem.create_order_item(jpa2, 20000, 2),
    )

    user_b = _member("userB", "Busan", "2", "2222")
    spring1 = _book("SPRING1 BOOK", 20000, 200)
    spring2 = _book("SPRING2 BOOK", 40000, 300)
    order_b = Order.create_order(
        user_b,
        _delivery(user_b),
        OrderItem.create_order_item(spring1, 20000, 3),
        OrderItem.create_order_item(spring2, 40000, 4),
    )

    return [order_a, order_b]


async def seed_sample_orders(session: AsyncSession) -> list[Order]:
    """Persist the demo orders; the caller's unit of work commits."""
    orders = build_sample_orders()
    session.add_all(orders)
    await session.flush()
    logger.info("Sample orders seeded", order_ids=[order.id for order in orders])
    return orders
