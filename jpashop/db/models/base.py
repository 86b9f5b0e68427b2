"""
Declarative base and embedded value types shared by the shop models.
"""

from dataclasses import dataclass

from sqlalchemy import BigInteger, Integer, MetaData
from sqlalchemy.orm import declarative_base

# Stable constraint names keep Alembic autogenerate diffs clean.
_NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=_NAMING_CONVENTION))

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
IdType = BigInteger().with_variant(Integer(), "sqlite")


@dataclass(frozen=True)
class Address:
    """
    Postal address embedded into member and delivery rows.

    Mapped with `sqlalchemy.orm.composite`, so it is an immutable value:
    replace it, never mutate it.
    """

    city: str | None = None
    street: str | None = None
    zipcode: str | None = None

    def __composite_values__(self) -> tuple[str | None, str | None, str | None]:
        return self.city, self.street, self.zipcode
