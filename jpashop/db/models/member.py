"""
Member Database Model
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import composite, relationship

from jpashop.db.models.base import Address, Base, IdType


class Member(Base):
    """
    A customer who places orders.

    Attributes:
        id: Surrogate key
        name: Display name
        address: Home address (embedded city/street/zipcode columns)
    """

    __tablename__ = "member"

    id = Column("member_id", IdType, primary_key=True)
    name = Column(String(255), nullable=False)

    city = Column(String(100), nullable=True)
    street = Column(String(255), nullable=True)
    zipcode = Column(String(20), nullable=True)
    address = composite(Address, city, street, zipcode)

    # Relationships
    orders = relationship("Order", back_populates="member")

    def __repr__(self) -> str:
        return f"<Member {self.id} {self.name}>"
