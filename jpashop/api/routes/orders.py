"""
Order API: to-many fetch strategies.

Each version returns the same logical list (orders with member, delivery
and line items) loaded a different way:

- v1: entities, graph forced open one lazy attribute at a time
- v2: DTOs, still lazy (1 + N member + N delivery + N items + item loads)
- v3: DTOs from one fetch-join statement (not pageable)
- v3.1: DTOs from a paged to-one join plus batched item loads
- v4: DTO projection, items queried per order (1 + N)
- v5: DTO projection, items in one IN query (2 statements)
- v6: DTO projection from one flat join, regrouped in memory

osiv1/osiv2 demonstrate lazy access after the unit of work has closed.
"""

from __future__ import annotations

from datetime import datetime

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jpashop.api.routes.common import OrderEntity, Result
from jpashop.config import get_settings
from jpashop.db.client import get_db_session, get_view_session
from jpashop.db.models import Address, Order, OrderItem, OrderStatus
from jpashop.kernel.serialization import CamelModel
from jpashop.repository import order_query_repository, order_repository
from jpashop.repository.order_query_repository import OrderQueryDto
from jpashop.repository.order_repository import OrderSearch
from jpashop.services import order_query_service
from jpashop.services.order_query_service import initialize_order_graph

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["Orders"])


class OrderItemDto(CamelModel):
    item_name: str
    order_price: int
    count: int

    @classmethod
    def from_order_item(cls, order_item: OrderItem) -> "OrderItemDto":
        return cls(
            item_name=order_item.item.name,
            order_price=order_item.order_price,
            count=order_item.count,
        )


class OrderDto(CamelModel):
    order_id: int
    name: str
    order_date: datetime
    order_status: OrderStatus
    address: Address | None = None
    order_items: list[OrderItemDto]

    @classmethod
    def from_order(cls, order: Order) -> "OrderDto":
        """Copy fields out of the graph; unloaded associations load here."""
        return cls(
            order_id=order.id,
            name=order.member.name,
            order_date=order.order_date,
            order_status=order.status,
            address=order.delivery.address,
            order_items=[OrderItemDto.from_order_item(order_item) for order_item in order.order_items],
        )


def _log_listed(strategy: str, rows: list) -> None:
    logger.info("Orders listed", strategy=strategy, count=len(rows))


@router.get("/v1/orders", response_model=list[OrderEntity])
async def orders_v1():
    """
    Entities straight to JSON.

    Every lazy association has to be forced open inside the session first,
    and the response shape is tied to the entity shape.
    """
    async with get_db_session() as session:
        orders = await order_repository.find_all(session, OrderSearch())
        await session.run_sync(lambda _: initialize_order_graph(orders))
        response = [OrderEntity.model_validate(order) for order in orders]

    _log_listed("v1", response)
    return response


@router.get("/v2/orders", response_model=Result[list[OrderDto]])
async def orders_v2():
    """DTOs built from lazy entities: one statement per association touched."""
    async with get_db_session() as session:
        orders = await order_repository.find_all(session, OrderSearch())
        collect = await session.run_sync(lambda _: [OrderDto.from_order(order) for order in orders])

    _log_listed("v2", collect)
    return Result(data=collect)


@router.get("/v3/orders", response_model=Result[list[OrderDto]])
async def orders_v3():
    """DTOs from a single fetch join over member, delivery, items and item."""
    async with get_db_session() as session:
        orders = await order_repository.find_all_with_item(session)
        collect = [OrderDto.from_order(order) for order in orders]

    _log_listed("v3", collect)
    return Result(data=collect)


@router.get("/v3.1/orders", response_model=Result[list[OrderDto]])
async def orders_v3_1(
    offset: int = Query(default=0, ge=0, description="Orders to skip"),
    limit: int = Query(default=100, ge=1, le=1000, description="Maximum orders to return"),
):
    """
    Paged DTOs.

    To-one associations are joined (safe to page); line items are fetched
    afterwards in IN-list batches of `default_batch_fetch_size`.
    """
    batch_size = get_settings().default_batch_fetch_size
    async with get_db_session() as session:
        orders = await order_repository.find_page_with_items(
            session, offset=offset, limit=limit, batch_size=batch_size
        )
        collect = [OrderDto.from_order(order) for order in orders]

    logger.info(
        "Orders listed",
        strategy="v3.1",
        count=len(collect),
        offset=offset,
        limit=limit,
        batch_size=batch_size,
    )
    return Result(data=collect)


@router.get("/v4/orders", response_model=Result[list[OrderQueryDto]])
async def orders_v4():
    """DTO projection; item rows queried once per order."""
    async with get_db_session() as session:
        collect = await order_query_repository.find_order_query_dtos(session)

    _log_listed("v4", collect)
    return Result(data=collect)


@router.get("/v5/orders", response_model=Result[list[OrderQueryDto]])
async def orders_v5():
    """DTO projection; item rows for every order in one IN query."""
    async with get_db_session() as session:
        collect = await order_query_repository.find_all_by_dto_optimization(session)

    _log_listed("v5", collect)
    return Result(data=collect)


@router.get("/v6/orders", response_model=Result[list[OrderQueryDto]])
async def orders_v6():
    """DTO projection from one flat join, regrouped per order in memory."""
    async with get_db_session() as session:
        flat_rows = await order_query_repository.find_all_by_dto_flat(session)

    collect = order_query_repository.group_flat_rows(flat_rows)
    logger.info("Orders listed", strategy="v6", count=len(collect), flat_rows=len(flat_rows))
    return Result(data=collect)


@router.get("/osiv1", response_model=list[OrderEntity])
async def orders_osiv(view_session: AsyncSession | None = Depends(get_view_session)):
    """
    Lazy access in the presentation layer.

    With `open_session_in_view` on, the request-scoped session is still open
    and the graph loads. With it off, the repository's unit of work has
    already closed and the first lazy access raises `DetachedInstanceError`
    (served as a 500).
    """
    if view_session is not None:
        orders = await order_repository.osiv_test(view_session)
        await view_session.run_sync(lambda _: initialize_order_graph(orders))
    else:
        async with get_db_session() as session:
            orders = await order_repository.osiv_test(session)
        initialize_order_graph(orders)

    response = [OrderEntity.model_validate(order) for order in orders]
    _log_listed("osiv1", response)
    return response


@router.get("/osiv2", response_model=list[OrderEntity])
async def orders_osiv2():
    """The service initializes the graph inside its own unit of work."""
    orders = await order_query_service.osiv_test2()
    response = [OrderEntity.model_validate(order) for order in orders]
    _log_listed("osiv2", response)
    return response
