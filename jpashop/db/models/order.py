"""
Order Database Models

SQLAlchemy models for orders and their line items:
- Order: many-to-one Member, one-to-one Delivery, one-to-many OrderItem
- OrderItem: a priced, counted reference to an Item

Every association is lazy. Touching one outside an active session raises
`DetachedInstanceError`; touching one from async code outside `run_sync`
raises `MissingGreenlet`.
"""

import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer
from sqlalchemy.orm import relationship

from jpashop.db.models.base import Base, IdType
from jpashop.db.models.delivery import DeliveryStatus
from jpashop.kernel.errors import OrderCancellationError


class OrderStatus(str, enum.Enum):
    ORDER = "ORDER"
    CANCEL = "CANCEL"


class Order(Base):
    """
    A placed order.

    Invariant: exactly one member and one delivery. The item collection is
    ordered by line item id.
    """

    __tablename__ = "orders"

    id = Column("order_id", IdType, primary_key=True)
    member_id = Column(IdType, ForeignKey("member.member_id"), nullable=False, index=True)
    delivery_id = Column(IdType, ForeignKey("delivery.delivery_id"), nullable=False, unique=True)

    order_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    status = Column(
        Enum(OrderStatus, name="order_status", native_enum=False, length=20),
        nullable=False,
        default=OrderStatus.ORDER,
    )

    # Relationships
    member = relationship("Member", back_populates="orders")
    delivery = relationship("Delivery", back_populates="order", cascade="all")
    order_items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    @classmethod
    def create_order(cls, member, delivery, *order_items: "OrderItem") -> "Order":
        """Build a new order in ORDER status stamped with the current time."""
        order = cls(member=member, delivery=delivery)
        for order_item in order_items:
            order.add_order_item(order_item)
        order.status = OrderStatus.ORDER
        order.order_date = datetime.utcnow()
        return order

    def add_order_item(self, order_item: "OrderItem") -> None:
        self.order_items.append(order_item)

    def cancel(self) -> None:
        """Cancel the order and put every line item back into stock.

        Raises:
            OrderCancellationError: if the delivery has already completed.
        """
        if self.delivery.status == DeliveryStatus.COMP:
            raise OrderCancellationError(order_id=self.id)
        self.status = OrderStatus.CANCEL
        for order_item in self.order_items:
            order_item.cancel()

    @property
    def total_price(self) -> int:
        return sum(order_item.total_price for order_item in self.order_items)

    def __repr__(self) -> str:
        return f"<Order {self.id} ({self.status})>"


class OrderItem(Base):
    """One line of an order: item, price snapshot at order time, count."""

    __tablename__ = "order_item"

    id = Column("order_item_id", IdType, primary_key=True)
    order_id = Column(IdType, ForeignKey("orders.order_id"), nullable=False, index=True)
    item_id = Column(IdType, ForeignKey("item.item_id"), nullable=False, index=True)

    order_price = Column(Integer, nullable=False)
    count = Column(Integer, nullable=False)

    # Relationships
    order = relationship("Order", back_populates="order_items")
    item = relationship("Item")

    @classmethod
    def create_order_item(cls, item, order_price: int, count: int) -> "OrderItem":
        """Reserve `count` units of `item` at `order_price` each."""
        if count <= 0:
            raise ValueError("count must be positive")
        order_item = cls(item=item, order_price=order_price, count=count)
        item.remove_stock(count)
        return order_item

    def cancel(self) -> None:
        self.item.add_stock(self.count)

    @property
    def total_price(self) -> int:
        return self.order_price * self.count

    def __repr__(self) -> str:
        return f"<OrderItem {self.id} order={self.order_id} x{self.count}>"
