#!/usr/bin/env python3
"""
Seed the demo orders.

Creates two members, four books and two orders so every /api/*orders
endpoint has something to show:
- userA: JPA1 BOOK 10000 x1, JPA2 BOOK 20000 x2
- userB: SPRING1 BOOK 20000 x3, SPRING2 BOOK 40000 x4

Uses DATABASE_URL from the environment.
"""

from __future__ import annotations

import argparse
import asyncio

import structlog

from jpashop.db.client import close_db, create_schema, get_db_session, init_db
from jpashop.db.seed import seed_sample_orders

logger = structlog.get_logger()


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed demo orders")
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create tables first (skip when migrations already ran)",
    )
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    return parser.parse_args()


async def main() -> None:
    args = _parse_args()
    await init_db(args.database_url)
    try:
        if args.create_schema:
            await create_schema()
        async with get_db_session() as session:
            orders = await seed_sample_orders(session)
        logger.info("Demo orders seeded", orders=len(orders))
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
