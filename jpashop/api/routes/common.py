"""
Shared response shapes for the order routes.

- Result: the single-field `{"data": ...}` envelope
- *Entity views: the entity graph exposed as-is, for the endpoints that
  demonstrate returning entities instead of DTOs
"""

from __future__ import annotations

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel

from jpashop.db.models import Address, DeliveryStatus, OrderStatus
from jpashop.kernel.serialization import CamelModel

T = TypeVar("T")


class Result(BaseModel, Generic[T]):
    """Response envelope; keeps room for top-level fields next to `data`."""

    data: T


class MemberEntity(CamelModel):
    id: int
    name: str
    address: Address | None = None


class DeliveryEntity(CamelModel):
    id: int
    address: Address | None = None
    status: DeliveryStatus


class ItemEntity(CamelModel):
    id: int
    name: str
    price: int
    stock_quantity: int


class OrderItemEntity(CamelModel):
    id: int
    item: ItemEntity
    order_price: int
    count: int
    total_price: int


class SimpleOrderEntity(CamelModel):
    """Order with its to-one associations only."""

    id: int
    member: MemberEntity
    delivery: DeliveryEntity
    order_date: datetime
    status: OrderStatus


class OrderEntity(SimpleOrderEntity):
    """Order with the full graph, including line items."""

    order_items: list[OrderItemEntity]
    total_price: int
