"""jpashop: order read API illustrating ORM fetch strategies."""

__version__ = "0.1.0"
