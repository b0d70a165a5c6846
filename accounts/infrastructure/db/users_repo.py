from __future__ import annotations

from typing import Optional

import psycopg
from psycopg import errors as pg_errors

from accounts.domain.entities import UserAccount, UserStatus
from accounts.domain.errors import UserAlreadyExists, UserNotFound
from accounts.domain.ports.user_repository import UserRepositoryPort

_COLUMNS = "id, email, nickname, address, status, certification_code, last_login_at"


def _row_to_user(row: tuple) -> UserAccount:
    id_, email, nickname, address, status, certification_code, last_login_at = row
    return UserAccount(
        id=int(id_),
        email=str(email),
        nickname=str(nickname),
        address=address or "",
        status=UserStatus(status),
        certification_code=str(certification_code),
        last_login_at=last_login_at,
    )


class PgUserRepository(UserRepositoryPort):
    """
    Postgres implementation of UserRepositoryPort.

    NOTE:
    - This repo is constructed with an *active async connection* supplied by the UoW.
    - It does not commit; the UnitOfWork controls the transaction boundary.
    """

    def __init__(self, conn: psycopg.AsyncConnection) -> None:
        self._conn = conn

    async def find_by_email(self, email: str) -> Optional[UserAccount]:
        sql = f"SELECT {_COLUMNS} FROM users WHERE email = LOWER(TRIM(%s))"
        async with self._conn.cursor() as cur:
            await cur.execute(sql, (email,))
            row = await cur.fetchone()
        return _row_to_user(row) if row else None

    async def find_by_id(
        self, user_id: int, *, for_update: bool = False
    ) -> Optional[UserAccount]:
        sql = f"SELECT {_COLUMNS} FROM users WHERE id = %s"
        if for_update:
            sql += " FOR UPDATE"
        async with self._conn.cursor() as cur:
            await cur.execute(sql, (user_id,))
            row = await cur.fetchone()
        return _row_to_user(row) if row else None

    async def insert(self, user: UserAccount) -> UserAccount:
        sql = f"""
        INSERT INTO users (email, nickname, address, status, certification_code, last_login_at)
        VALUES (LOWER(TRIM(%s)), %s, %s, %s, %s, %s)
        RETURNING {_COLUMNS}
        """
        params = (
            user.email,
            user.nickname,
            user.address,
            user.status.value,
            user.certification_code,
            user.last_login_at,
        )
        try:
            async with self._conn.cursor() as cur:
                await cur.execute(sql, params)
                row = await cur.fetchone()
        except pg_errors.UniqueViolation as e:
            raise UserAlreadyExists() from e

        if not row:
            raise RuntimeError("insert into users returned no row")
        return _row_to_user(row)

    async def save(self, user: UserAccount) -> UserAccount:
        if user.id is None:
            raise ValueError("cannot save a user without id")
        sql = f"""
        UPDATE users
        SET nickname = %s,
            address = %s,
            status = %s,
            last_login_at = %s,
            updated_at = now()
        WHERE id = %s
        RETURNING {_COLUMNS}
        """
        params = (
            user.nickname,
            user.address,
            user.status.value,
            user.last_login_at,
            user.id,
        )
        async with self._conn.cursor() as cur:
            await cur.execute(sql, params)
            row = await cur.fetchone()
        if not row:
            raise UserNotFound()
        return _row_to_user(row)
