"""
Item Database Models

Catalogue items share one table; `dtype` discriminates the subtype:
- Book ("B"): author, isbn
- Album ("A"): artist, etc
- Movie ("M"): director, actor
"""

from sqlalchemy import Column, Integer, String

from jpashop.db.models.base import Base, IdType
from jpashop.kernel.errors import NotEnoughStockError


class Item(Base):
    """A sellable catalogue entry with a stock counter."""

    __tablename__ = "item"

    id = Column("item_id", IdType, primary_key=True)
    dtype = Column(String(31), nullable=False)

    name = Column(String(255), nullable=False)
    price = Column(Integer, nullable=False, default=0)
    stock_quantity = Column(Integer, nullable=False, default=0)

    # Subtype columns (single-table inheritance keeps them nullable)
    author = Column(String(255), nullable=True)
    isbn = Column(String(255), nullable=True)
    artist = Column(String(255), nullable=True)
    etc = Column(String(255), nullable=True)
    director = Column(String(255), nullable=True)
    actor = Column(String(255), nullable=True)

    __mapper_args__ = {
        "polymorphic_on": dtype,
        "polymorphic_identity": "I",
    }

    def add_stock(self, quantity: int) -> None:
        self.stock_quantity = (self.stock_quantity or 0) + quantity

    def remove_stock(self, quantity: int) -> None:
        """Take `quantity` units out of stock.

        Raises:
            NotEnoughStockError: if the remaining stock would go negative.
        """
        available = self.stock_quantity or 0
        rest = available - quantity
        if rest < 0:
            raise NotEnoughStockError(item_name=self.name, requested=quantity, available=available)
        self.stock_quantity = rest

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id} {self.name}>"


class Book(Item):
    __mapper_args__ = {"polymorphic_identity": "B"}


class Album(Item):
    __mapper_args__ = {"polymorphic_identity": "A"}


class Movie(Item):
    __mapper_args__ = {"polymorphic_identity": "M"}
