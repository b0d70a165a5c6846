import itertools

import pytest

from tests.fakes import FakeUoW, seeded_users


@pytest.fixture()
def uow():
    return FakeUoW(seeded_users())


@pytest.fixture()
def empty_uow():
    return FakeUoW()


@pytest.fixture()
def fixed_clock():
    return lambda: 1_700_000_000_000


@pytest.fixture(autouse=True)
def patch_code(monkeypatch):
    """
    Make certification codes deterministic (but still unique) in all tests.
    You can override in a specific test by re-monkeypatching.
    """
    from accounts.domain import services as domain_services

    counter = itertools.count(1)
    monkeypatch.setattr(
        domain_services,
        "generate_certification_code",
        lambda: f"cccccccc-cccc-cccc-cccc-{next(counter):012d}",
    )
    yield
