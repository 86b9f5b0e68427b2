"""
Repository tests against in-memory SQLite.

Statement counts come from `count_statements()`; the seeded data holds two
orders with two line items each.
"""

from __future__ import annotations

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import MissingGreenlet
from sqlalchemy.orm.exc import DetachedInstanceError

from jpashop.db.client import get_db_session
from jpashop.db.instrumentation import count_statements
from jpashop.db.models import OrderStatus
from jpashop.repository import order_query_repository, order_repository, order_simple_query_repository
from jpashop.repository.order_repository import OrderSearch

pytestmark = [pytest.mark.unit, pytest.mark.asyncio]


class TestFindAll:
    async def test_returns_orders_by_id(self, seeded_orders, db_session):
        orders = await order_repository.find_all(db_session)

        assert [order.id for order in orders] == [1, 2]

    async def test_associations_stay_unloaded(self, seeded_orders, db_session):
        orders = await order_repository.find_all(db_session)

        unloaded = inspect(orders[0]).unloaded
        assert {"member", "delivery", "order_items"} <= unloaded

    async def test_filters_by_member_name(self, seeded_orders, db_session):
        orders = await order_repository.find_all(db_session, OrderSearch(member_name="B"))

        assert [order.id for order in orders] == [2]

    async def test_filters_by_status(self, seeded_orders, db_session):
        orders = await order_repository.find_all(db_session, OrderSearch(order_status=OrderStatus.CANCEL))

        assert orders == []

    async def test_lazy_access_outside_run_sync_is_refused(self, seeded_orders, db_session):
        orders = await order_repository.find_all(db_session)

        with pytest.raises(MissingGreenlet):
            orders[0].member.name

    async def test_lazy_access_after_close_fails(self, seeded_orders):
        async with get_db_session() as session:
            orders = await order_repository.find_all(session)

        with pytest.raises(DetachedInstanceError):
            orders[0].member


class TestFetchJoins:
    async def test_member_and_delivery_in_one_statement(self, seeded_orders, db_session):
        with count_statements() as counter:
            orders = await order_repository.find_all_with_member_delivery(db_session)
            names = [order.member.name for order in orders]
            cities = [order.delivery.address.city for order in orders]

        assert counter.count == 1
        assert names == ["userA", "userB"]
        assert cities == ["Seoul", "Busan"]

    async def test_member_delivery_join_pages(self, seeded_orders, db_session):
        orders = await order_repository.find_all_with_member_delivery(db_session, offset=1, limit=1)

        assert [order.id for order in orders] == [2]

    async def test_whole_graph_in_one_statement_without_duplicates(self, seeded_orders, db_session):
        with count_statements() as counter:
            orders = await order_repository.find_all_with_item(db_session)
            lines = [
                [(line.item.name, line.count) for line in order.order_items] for order in orders
            ]

        assert counter.count == 1
        assert [order.id for order in orders] == [1, 2]
        assert lines == [
            [("JPA1 BOOK", 1), ("JPA2 BOOK", 2)],
            [("SPRING1 BOOK", 3), ("SPRING2 BOOK", 4)],
        ]


class TestBatchFetch:
    @pytest.mark.parametrize(("batch_size", "expected"), [(100, 2), (2, 2), (1, 3)])
    async def test_collections_load_in_batches(self, seeded_orders, db_session, batch_size, expected):
        with count_statements() as counter:
            orders = await order_repository.find_page_with_items(
                db_session, offset=0, limit=100, batch_size=batch_size
            )
            lines = [[line.item.name for line in order.order_items] for order in orders]

        assert counter.count == expected
        assert lines == [["JPA1 BOOK", "JPA2 BOOK"], ["SPRING1 BOOK", "SPRING2 BOOK"]]

    async def test_loaded_collections_survive_the_session(self, seeded_orders):
        async with get_db_session() as session:
            orders = await order_repository.find_page_with_items(session, offset=0, limit=1, batch_size=10)

        assert [line.order_price for line in orders[0].order_items] == [10000, 20000]

    async def test_empty_page_issues_no_batch(self, seeded_orders, db_session):
        with count_statements() as counter:
            orders = await order_repository.find_page_with_items(db_session, offset=10, limit=5, batch_size=10)

        assert orders == []
        assert counter.count == 1

    async def test_batch_size_must_be_positive(self, seeded_orders, db_session):
        orders = await order_repository.find_all_with_member_delivery(db_session)

        with pytest.raises(ValueError):
            await order_repository.load_order_items_in_batches(db_session, orders, 0)


class TestDtoProjections:
    async def test_simple_projection_is_one_statement(self, seeded_orders, db_session):
        with count_statements() as counter:
            dtos = await order_simple_query_repository.find_order_dtos(db_session)

        assert counter.count == 1
        assert [(dto.order_id, dto.name, dto.address.city) for dto in dtos] == [
            (1, "userA", "Seoul"),
            (2, "userB", "Busan"),
        ]

    async def test_per_order_item_queries(self, seeded_orders, db_session):
        with count_statements() as counter:
            dtos = await order_query_repository.find_order_query_dtos(db_session)

        assert counter.count == 3
        assert [len(dto.order_items) for dto in dtos] == [2, 2]

    async def test_single_in_query_for_items(self, seeded_orders, db_session):
        with count_statements() as counter:
            dtos = await order_query_repository.find_all_by_dto_optimization(db_session)

        assert counter.count == 2
        assert [item.item_name for item in dtos[1].order_items] == ["SPRING1 BOOK", "SPRING2 BOOK"]

    async def test_flat_rows_one_per_line_item(self, seeded_orders, db_session):
        with count_statements() as counter:
            rows = await order_query_repository.find_all_by_dto_flat(db_session)

        assert counter.count == 1
        assert [(row.order_id, row.item_name) for row in rows] == [
            (1, "JPA1 BOOK"),
            (1, "JPA2 BOOK"),
            (2, "SPRING1 BOOK"),
            (2, "SPRING2 BOOK"),
        ]

    async def test_projections_agree(self, seeded_orders, db_session):
        per_order = await order_query_repository.find_order_query_dtos(db_session)
        batched = await order_query_repository.find_all_by_dto_optimization(db_session)
        flat = order_query_repository.group_flat_rows(await order_query_repository.find_all_by_dto_flat(db_session))

        assert per_order == batched == flat

    async def test_empty_store(self, database, db_session):
        assert await order_query_repository.find_all_by_dto_optimization(db_session) == []
        assert await order_query_repository.find_all_by_dto_flat(db_session) == []
