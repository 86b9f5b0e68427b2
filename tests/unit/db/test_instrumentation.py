from __future__ import annotations

import pytest
from sqlalchemy import event, text

from jpashop.db.instrumentation import _before_cursor_execute, count_statements, install_statement_counter

pytestmark = [pytest.mark.unit, pytest.mark.asyncio]


async def test_counts_statements_in_scope(database, db_session):
    with count_statements() as counter:
        await db_session.execute(text("SELECT 1"))
        await db_session.execute(text("SELECT 2"))

    assert counter.count == 2
    assert counter.statements == ["SELECT 1", "SELECT 2"]


async def test_statements_outside_scope_are_not_counted(database, db_session):
    with count_statements() as counter:
        pass
    await db_session.execute(text("SELECT 1"))

    assert counter.count == 0


async def test_nested_scopes_count_independently(database, db_session):
    with count_statements() as outer:
        await db_session.execute(text("SELECT 1"))
        with count_statements() as inner:
            await db_session.execute(text("SELECT 2"))
        await db_session.execute(text("SELECT 3"))

    assert inner.count == 1
    assert outer.count == 2


async def test_install_is_idempotent(database):
    from jpashop.db.client import get_async_engine

    engine = get_async_engine()
    install_statement_counter(engine)
    install_statement_counter(engine)

    assert event.contains(engine.sync_engine, "before_cursor_execute", _before_cursor_execute)
