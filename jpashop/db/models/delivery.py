"""
Delivery Database Model
"""

import enum

from sqlalchemy import Column, Enum, String
from sqlalchemy.orm import composite, relationship

from jpashop.db.models.base import Address, Base, IdType


class DeliveryStatus(str, enum.Enum):
    READY = "READY"
    COMP = "COMP"


class Delivery(Base):
    """
    Shipping record for exactly one order.

    The foreign key lives on the order side; this is the inverse end.
    """

    __tablename__ = "delivery"

    id = Column("delivery_id", IdType, primary_key=True)

    city = Column(String(100), nullable=True)
    street = Column(String(255), nullable=True)
    zipcode = Column(String(20), nullable=True)
    address = composite(Address, city, street, zipcode)

    status = Column(
        Enum(DeliveryStatus, name="delivery_status", native_enum=False, length=20),
        nullable=False,
        default=DeliveryStatus.READY,
    )

    # Relationships
    order = relationship("Order", back_populates="delivery", uselist=False)

    def __repr__(self) -> str:
        return f"<Delivery {self.id} ({self.status})>"
