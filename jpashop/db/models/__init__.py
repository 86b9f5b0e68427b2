"""Database models."""

from jpashop.db.models.base import (
    Address,
    Base,
)
from jpashop.db.models.member import (
    Member,
)
from jpashop.db.models.delivery import (
    Delivery,
    DeliveryStatus,
)
from jpashop.db.models.item import (
    Album,
    Book,
    Item,
    Movie,
)
from jpashop.db.models.order import (
    Order,
    OrderItem,
    OrderStatus,
)

__all__ = [
    "Address",
    "Base",
    "Member",
    "Delivery",
    "DeliveryStatus",
    "Item",
    "Book",
    "Album",
    "Movie",
    "Order",
    "OrderItem",
    "OrderStatus",
]
