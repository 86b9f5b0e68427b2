"""
DTO construction from transient entity graphs (no database involved).
"""

from __future__ import annotations

from datetime import datetime

import pytest

from jpashop.api.routes.orders import OrderDto, OrderItemDto
from jpashop.api.routes.simple_orders import SimpleOrderDto
from jpashop.db.models import Address, Book, Delivery, Member, Order, OrderItem, OrderStatus

ORDER_DATE = datetime(2024, 3, 1, 9, 30, 0)


def _order() -> Order:
    address = Address(city="Seoul", street="1", zipcode="1111")
    member = Member(id=10, name="A", address=address)
    book = Book(id=100, name="Book", price=1000, stock_quantity=10)
    pen = Book(id=101, name="Pen", price=500, stock_quantity=10)

    order = Order.create_order(
        member,
        Delivery(id=20, address=address),
        OrderItem.create_order_item(book, 1000, 2),
        OrderItem.create_order_item(pen, 500, 1),
    )
    order.id = 1
    order.order_date = ORDER_DATE
    return order


@pytest.mark.unit
def test_order_dto_copies_the_graph():
    dto = OrderDto.from_order(_order())

    assert dto.order_id == 1
    assert dto.name == "A"
    assert dto.order_date == ORDER_DATE
    assert dto.order_status == OrderStatus.ORDER
    assert dto.address == Address(city="Seoul", street="1", zipcode="1111")
    assert dto.order_items == [
        OrderItemDto(item_name="Book", order_price=1000, count=2),
        OrderItemDto(item_name="Pen", order_price=500, count=1),
    ]


@pytest.mark.unit
def test_order_dto_serializes_with_camel_case_names():
    payload = OrderDto.from_order(_order()).model_dump(by_alias=True, mode="json")

    assert payload == {
        "orderId": 1,
        "name": "A",
        "orderDate": "2024-03-01T09:30:00",
        "orderStatus": "ORDER",
        "address": {"city": "Seoul", "street": "1", "zipcode": "1111"},
        "orderItems": [
            {"itemName": "Book", "orderPrice": 1000, "count": 2},
            {"itemName": "Pen", "orderPrice": 500, "count": 1},
        ],
    }


@pytest.mark.unit
def test_simple_order_dto_leaves_items_out():
    payload = SimpleOrderDto.from_order(_order()).model_dump(by_alias=True, mode="json")

    assert payload == {
        "orderId": 1,
        "name": "A",
        "orderDate": "2024-03-01T09:30:00",
        "orderStatus": "ORDER",
        "address": {"city": "Seoul", "street": "1", "zipcode": "1111"},
    }


@pytest.mark.unit
def test_dto_accepts_wire_names():
    dto = SimpleOrderDto.model_validate(
        {
            "orderId": 7,
            "name": "B",
            "orderDate": "2024-03-01T09:30:00",
            "orderStatus": "CANCEL",
            "address": None,
        }
    )

    assert dto.order_id == 7
    assert dto.order_status == OrderStatus.CANCEL
    assert dto.address is None
