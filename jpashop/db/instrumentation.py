"""
SQL statement counting.

A counter is bound to the current context with `count_statements()`; an
engine-level `before_cursor_execute` listener bumps whichever counter is
active. The async ORM runs its sync core in greenlets that inherit the
caller's context, so statements issued on behalf of a request land on that
request's counter.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine


@dataclass
class StatementCounter:
    count: int = 0
    statements: list[str] = field(default_factory=list)

    def record(self, statement: str) -> None:
        self.count += 1
        self.statements.append(statement)


_current_counter: ContextVar[StatementCounter | None] = ContextVar(
    "jpashop_statement_counter", default=None
)


@contextmanager
def count_statements() -> Iterator[StatementCounter]:
    """
    Count SQL statements executed in this context.

    Usage:
        with count_statements() as counter:
            await order_repository.find_all_with_item(session)
        assert counter.count == 1
    """
    counter = StatementCounter()
    token = _current_counter.set(counter)
    try:
        yield counter
    finally:
        _current_counter.reset(token)


def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    counter = _current_counter.get()
    if counter is not None:
        counter.record(statement)


def install_statement_counter(engine: AsyncEngine) -> None:
    """Attach the counting listener to an engine (idempotent)."""
    sync_engine = engine.sync_engine
    if not event.contains(sync_engine, "before_cursor_execute", _before_cursor_execute):
        event.listen(sync_engine, "before_cursor_execute", _before_cursor_execute)
