"""
DTO projection for order summaries.

Selects exactly the columns the response needs, so no entity is
materialized: the result cannot be mutated back into storage and carries no
lazy state. The trade-off is reuse; the query is shaped for one endpoint.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jpashop.db.models import Address, Delivery, Member, Order, OrderStatus
from jpashop.kernel.serialization import CamelModel


class SimpleOrderQueryDto(CamelModel):
    order_id: int
    name: str
    order_date: datetime
    order_status: OrderStatus
    address: Address | None = None


async def find_order_dtos(session: AsyncSession) -> list[SimpleOrderQueryDto]:
    result = await session.execute(
        select(Order.id, Member.name, Order.order_date, Order.status, Delivery.address)
        .join(Order.member)
        .join(Order.delivery)
        .order_by(Order.id)
    )
    return [
        SimpleOrderQueryDto(
            order_id=order_id,
            name=name,
            order_date=order_date,
            order_status=status,
            address=address,
        )
        for order_id, name, order_date, status, address in result.all()
    ]
