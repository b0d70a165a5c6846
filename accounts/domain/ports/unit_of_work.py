from __future__ import annotations

from types import TracebackType
from typing import Protocol, Type

from accounts.domain.ports.outbox_repository import OutboxRepositoryPort
from accounts.domain.ports.user_repository import UserRepositoryPort


class UnitOfWorkPort(Protocol):
    """
    Transaction boundary.

    Usage:
        async with uow as tx:
            user = await tx.db_users.find_by_id(user_id, for_update=True)
            user.login(now_ms)
            await tx.db_users.save(user)
            await tx.commit()

    Leaving the block without commit() (or with an exception) rolls back.
    """

    db_users: UserRepositoryPort
    outbox: OutboxRepositoryPort

    async def __aenter__(self) -> "UnitOfWorkPort":
        """Begin a new transaction."""

    async def __aexit__(
        self,
        exc_type: Type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """End the transaction, rolling back anything not committed."""

    async def commit(self) -> None:
        """Commit the transaction."""

    async def rollback(self) -> None:
        """Rollback the transaction."""
