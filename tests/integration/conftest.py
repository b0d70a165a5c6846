# tests/integration/conftest.py
import os

import pytest
import pytest_asyncio
from psycopg_pool import AsyncConnectionPool

from accounts.infrastructure.db import migrate

DATABASE_URL = os.environ.get("INTEGRATION_DATABASE_URL")


def pytest_collection_modifyitems(config, items):
    if DATABASE_URL:
        return
    skip = pytest.mark.skip(reason="INTEGRATION_DATABASE_URL not set")
    for item in items:
        if "integration" in item.nodeid.split("/"):
            item.add_marker(skip)


@pytest.fixture(scope="session")
def migrated_dsn() -> str:
    assert migrate.cmd_up(DATABASE_URL) == 0
    return DATABASE_URL


@pytest_asyncio.fixture
async def pool(migrated_dsn):
    p = AsyncConnectionPool(migrated_dsn, min_size=1, max_size=4, open=False)
    await p.open(wait=True, timeout=30)
    async with p.connection() as conn:
        await conn.execute("TRUNCATE users, outbox RESTART IDENTITY;")
    try:
        yield p
    finally:
        await p.close()
