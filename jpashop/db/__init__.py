"""Database module."""

from .client import (
    close_db,
    create_schema,
    drop_schema,
    get_async_engine,
    get_db_session,
    get_view_session,
    init_db,
)
from .instrumentation import StatementCounter, count_statements

__all__ = [
    "init_db",
    "close_db",
    "create_schema",
    "drop_schema",
    "get_async_engine",
    "get_db_session",
    "get_view_session",
    "StatementCounter",
    "count_statements",
]
