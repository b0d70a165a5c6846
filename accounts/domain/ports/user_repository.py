from __future__ import annotations

from typing import Optional, Protocol

from accounts.domain.entities import UserAccount


class UserRepositoryPort(Protocol):
    async def find_by_email(self, email: str) -> Optional[UserAccount]:
        """
        Fetch user by (normalized) email regardless of status.
        Return None if not found.
        """

    async def find_by_id(
        self, user_id: int, *, for_update: bool = False
    ) -> Optional[UserAccount]:
        """
        Fetch user by id regardless of status. With for_update=True the row
        is locked until the surrounding transaction ends.
        Return None if not found.
        """

    async def insert(self, user: UserAccount) -> UserAccount:
        """
        Persist a new user and return it with its assigned id.
        Raise UserAlreadyExists on a duplicate email or certification code.
        """

    async def save(self, user: UserAccount) -> UserAccount:
        """
        Write back nickname, address, status and last_login_at of an existing user.
        Email and certification code are never rewritten.
        """
