"""
Simple order API: to-one fetch strategies.

Orders with member and delivery only (no line items):

- v1: entities, member and delivery forced open lazily
- v2: DTOs from lazy entities (1 + N + N statements)
- v3: DTOs from one join fetching member and delivery
- v4: DTO projection selecting only the response columns
"""

from __future__ import annotations

from datetime import datetime

import structlog
from fastapi import APIRouter

from jpashop.api.routes.common import Result, SimpleOrderEntity
from jpashop.db.client import get_db_session
from jpashop.db.models import Address, Order, OrderStatus
from jpashop.kernel.serialization import CamelModel
from jpashop.repository import order_repository, order_simple_query_repository
from jpashop.repository.order_repository import OrderSearch
from jpashop.repository.order_simple_query_repository import SimpleOrderQueryDto
from jpashop.services.order_query_service import initialize_simple_order_graph

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["Simple Orders"])


class SimpleOrderDto(CamelModel):
    order_id: int
    name: str
    order_date: datetime
    order_status: OrderStatus
    address: Address | None = None

    @classmethod
    def from_order(cls, order: Order) -> "SimpleOrderDto":
        return cls(
            order_id=order.id,
            name=order.member.name,
            order_date=order.order_date,
            order_status=order.status,
            address=order.delivery.address,
        )


@router.get("/v1/simple-orders", response_model=list[SimpleOrderEntity])
async def simple_orders_v1():
    """Entities with member and delivery forced open; items stay unloaded."""
    async with get_db_session() as session:
        orders = await order_repository.find_all(session, OrderSearch())
        await session.run_sync(lambda _: initialize_simple_order_graph(orders))
        response = [SimpleOrderEntity.model_validate(order) for order in orders]

    logger.info("Simple orders listed", strategy="v1", count=len(response))
    return response


@router.get("/v2/simple-orders", response_model=Result[list[SimpleOrderDto]])
async def simple_orders_v2():
    """DTOs from lazy entities; member and delivery load per order."""
    async with get_db_session() as session:
        orders = await order_repository.find_all(session, OrderSearch())
        collect = await session.run_sync(lambda _: [SimpleOrderDto.from_order(order) for order in orders])

    logger.info("Simple orders listed", strategy="v2", count=len(collect))
    return Result(data=collect)


@router.get("/v3/simple-orders", response_model=Result[list[SimpleOrderDto]])
async def simple_orders_v3():
    """DTOs from one statement joining member and delivery."""
    async with get_db_session() as session:
        orders = await order_repository.find_all_with_member_delivery(session)
        collect = [SimpleOrderDto.from_order(order) for order in orders]

    logger.info("Simple orders listed", strategy="v3", count=len(collect))
    return Result(data=collect)


@router.get("/v4/simple-orders", response_model=Result[list[SimpleOrderQueryDto]])
async def simple_orders_v4():
    """Column projection straight into DTOs; no entities involved."""
    async with get_db_session() as session:
        collect = await order_simple_query_repository.find_order_dtos(session)

    logger.info("Simple orders listed", strategy="v4", count=len(collect))
    return Result(data=collect)
