from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import psycopg
from psycopg_pool import AsyncConnectionPool

from accounts.application.create_user import CERTIFICATION_EMAIL_TOPIC
from accounts.domain.ports.email_port import EmailPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    base: int = 2  # seconds
    max_delay: int = 60  # seconds
    max_attempts: int = 8

    def compute_delay(self, attempts: int) -> int:
        # attempts already made before this failure
        delay = self.base * (2**attempts)
        return delay if delay < self.max_delay else self.max_delay

    def exhausted(self, attempts: int) -> bool:
        return attempts >= self.max_attempts


class OutboxDispatcher:
    """
    Polls the outbox table, claims due rows, sends them through the email
    port, and marks them dispatched, reschedules them, or gives up once the
    retry policy is exhausted.
    """

    def __init__(
        self,
        *,
        pool: AsyncConnectionPool,
        email_adapter: EmailPort,
        batch_size: int = 10,
        poll_interval: float = 1.0,
        retry_policy: RetryPolicy | None = None,
        processing_lease: int = 300,
    ) -> None:
        self.pool = pool
        self.email_adapter = email_adapter
        self.batch_size = batch_size
        self.poll_interval = poll_interval
        self.retry_policy = retry_policy or RetryPolicy()
        # seconds a claimed row may stay in 'processing' before it is reclaimed
        self.processing_lease = processing_lease

    async def run_forever(self) -> None:
        logger.info(
            "outbox dispatcher started",
            extra={"batch_size": self.batch_size, "poll_interval": self.poll_interval},
        )
        while True:
            try:
                processed = await self._process_once()
            except psycopg.Error:
                logger.exception("outbox iteration failed; retrying after poll interval")
                processed = 0
            if processed == 0:
                await asyncio.sleep(self.poll_interval)

    async def _process_once(self) -> int:
        """
        Claim up to batch_size due rows and handle each one.
        Returns the number of claimed rows.
        """
        batch = await self._claim_due_batch(self.batch_size)
        if not batch:
            return 0

        logger.info("claimed messages", extra={"count": len(batch)})
        for msg in batch:
            await self._handle(msg)
        return len(batch)

    async def _handle(self, msg: dict[str, Any]) -> None:
        msg_id = msg["id"]
        topic = msg["topic"]
        attempts = msg["attempts"]
        try:
            await self._dispatch(topic, msg["payload"], msg.get("idempotency_key"))
        except Exception as e:  # noqa: BLE001 - any send failure is retried
            new_attempts = attempts + 1
            if self.retry_policy.exhausted(new_attempts):
                logger.error(
                    "dispatch failed; giving up",
                    extra={"id": msg_id, "topic": topic, "attempts": new_attempts},
                )
                await self._mark_failed(msg_id, new_attempts, str(e))
                return
            delay = self.retry_policy.compute_delay(attempts)
            logger.warning(
                "dispatch failed; scheduling retry",
                extra={
                    "id": msg_id,
                    "topic": topic,
                    "attempts": new_attempts,
                    "retry_in_s": delay,
                },
            )
            await self._reschedule(msg_id, new_attempts, delay, str(e))
        else:
            await self._mark_dispatched(msg_id)

    async def _dispatch(
        self, topic: str, payload: dict[str, Any], idempotency_key: str | None = None
    ) -> None:
        if topic == CERTIFICATION_EMAIL_TOPIC:
            await self.email_adapter.send(
                to=payload["to"],
                subject=payload["subject"],
                body=payload["body"],
                idempotency_key=idempotency_key,
            )
            return

        raise RuntimeError(f"unknown topic: {topic}")

    async def _execute(self, sql: str, params: tuple) -> list[tuple]:
        async with self.pool.connection() as conn:
            async with conn.transaction():
                async with conn.cursor() as cur:
                    await cur.execute(sql, params)
                    if cur.description is None:
                        return []
                    return await cur.fetchall()

    async def _claim_due_batch(self, limit: int) -> list[dict[str, Any]]:
        """
        Atomically move up to `limit` due 'pending' rows, plus 'processing'
        rows whose lease ran out (worker died mid-send), into 'processing'
        and return them.
        """
        sql = """
        WITH claimed AS (
            SELECT id
            FROM outbox
            WHERE (status = 'pending' AND next_attempt_at <= NOW())
               OR (status = 'processing'
                   AND updated_at < NOW() - make_interval(secs => %s))
            ORDER BY created_at
            FOR UPDATE SKIP LOCKED
            LIMIT %s
        ),
        updated AS (
            UPDATE outbox o
            SET status = 'processing', updated_at = NOW()
            FROM claimed c
            WHERE o.id = c.id
            RETURNING o.id, o.topic, o.payload, o.attempts, o.idempotency_key
        )
        SELECT id, topic, payload, attempts, idempotency_key
        FROM updated
        ORDER BY id;
        """
        rows = await self._execute(sql, (self.processing_lease, limit))
        return [
            {
                "id": r[0],
                "topic": r[1],
                "payload": r[2] or {},
                "attempts": int(r[3] or 0),
                "idempotency_key": r[4],
            }
            for r in rows
        ]

    async def _mark_dispatched(self, msg_id: int) -> None:
        sql = """
        UPDATE outbox
        SET status = 'dispatched',
            last_error = NULL,
            updated_at = NOW()
        WHERE id = %s;
        """
        await self._execute(sql, (msg_id,))

    async def _reschedule(
        self, msg_id: int, attempts: int, delay_seconds: int, error: str
    ) -> None:
        sql = """
        UPDATE outbox
        SET status = 'pending',
            attempts = %s,
            last_error = %s,
            next_attempt_at = NOW() + make_interval(secs => %s),
            updated_at = NOW()
        WHERE id = %s;
        """
        await self._execute(sql, (attempts, error[:1000], delay_seconds, msg_id))

    async def _mark_failed(self, msg_id: int, attempts: int, error: str) -> None:
        sql = """
        UPDATE outbox
        SET status = 'failed',
            attempts = %s,
            last_error = %s,
            updated_at = NOW()
        WHERE id = %s;
        """
        await self._execute(sql, (attempts, error[:1000], msg_id))
