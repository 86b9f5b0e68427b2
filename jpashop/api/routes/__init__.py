"""API route modules."""

from . import (
    health,
    orders,
    simple_orders,
)

__all__ = [
    "health",
    "orders",
    "simple_orders",
]
