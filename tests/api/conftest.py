import pytest
from fastapi.testclient import TestClient

from accounts.main import create_app
from accounts.presentation.dependencies import (
    get_certification_base_url,
    get_clock,
    get_db_pool,
    get_uow,
    get_verified_redirect_url,
)
from tests.fakes import FakePool, FakeUoW, seeded_users

CLOCK_MS = 1_700_000_000_000


@pytest.fixture()
def clock_ms() -> int:
    return CLOCK_MS


@pytest.fixture()
def db_pool() -> FakePool:
    return FakePool()


@pytest.fixture()
def app_and_uow(db_pool):
    app = create_app()
    uow = FakeUoW(seeded_users())

    app.dependency_overrides[get_uow] = lambda: uow
    app.dependency_overrides[get_db_pool] = lambda: db_pool
    app.dependency_overrides[get_clock] = lambda: (lambda: CLOCK_MS)
    app.dependency_overrides[get_certification_base_url] = lambda: "http://testserver"
    app.dependency_overrides[get_verified_redirect_url] = lambda: "http://frontend/"

    try:
        yield app, uow
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app_and_uow):
    app, _ = app_and_uow
    return TestClient(app, raise_server_exceptions=False)
