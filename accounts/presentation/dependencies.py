from typing import Callable

from psycopg_pool import AsyncConnectionPool

from accounts.domain.ports.unit_of_work import UnitOfWorkPort
from accounts.domain.services import current_millis
from accounts.infrastructure.db.pool import get_pool
from accounts.infrastructure.db.uow import PgUnitOfWork
from accounts.settings import get_settings


def get_db_pool() -> AsyncConnectionPool:
    return get_pool()


def get_uow() -> UnitOfWorkPort:
    return PgUnitOfWork(get_pool())


def get_clock() -> Callable[[], int]:
    return current_millis


def get_certification_base_url() -> str:
    return get_settings().certification_base_url


def get_verified_redirect_url() -> str:
    return get_settings().verified_redirect_url
