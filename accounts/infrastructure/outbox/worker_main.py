from __future__ import annotations

import asyncio
import logging
import signal
from contextlib import suppress

from accounts.infrastructure.db.pool import close_pool, open_pool
from accounts.infrastructure.email.http_smtp_adapter import HttpSmtpEmailAdapter
from accounts.infrastructure.http.client import close_http_client, open_http_client
from accounts.infrastructure.outbox.dispatcher import OutboxDispatcher, RetryPolicy
from accounts.logging import setup_logging
from accounts.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def build_dispatcher(settings: Settings, pool, email: HttpSmtpEmailAdapter) -> OutboxDispatcher:
    return OutboxDispatcher(
        pool=pool,
        email_adapter=email,
        batch_size=settings.outbox_batch_size,
        poll_interval=settings.outbox_poll_interval_ms / 1000,
        retry_policy=RetryPolicy(
            base=settings.outbox_retry_base_seconds,
            max_delay=settings.outbox_retry_max_delay_seconds,
            max_attempts=settings.outbox_max_attempts,
        ),
        processing_lease=settings.outbox_processing_lease_seconds,
    )


async def supervise(worker_task: asyncio.Task, stop: asyncio.Event) -> None:
    """
    Wait until either the stop event is set or the worker task ends.
    A worker that ends on its own re-raises its exception here.
    """
    stop_task = asyncio.create_task(stop.wait())
    done, _ = await asyncio.wait(
        {worker_task, stop_task}, return_when=asyncio.FIRST_COMPLETED
    )

    if worker_task in done:
        stop_task.cancel()
        with suppress(asyncio.CancelledError):
            await stop_task
        logger.error("worker: dispatcher stopped unexpectedly")
        worker_task.result()
        return

    worker_task.cancel()
    with suppress(asyncio.CancelledError):
        await worker_task


async def _run() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)

    pool = await open_pool()
    logger.info("worker: pool opened")

    email = HttpSmtpEmailAdapter(
        base_url=settings.smtp_base_url, client=await open_http_client()
    )
    dispatcher = build_dispatcher(settings, pool, email)

    stop = asyncio.Event()

    def _on_signal(*_: object) -> None:
        logger.info("worker: stop signal received")
        stop.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with suppress(NotImplementedError):
            loop.add_signal_handler(sig, _on_signal)

    try:
        await supervise(asyncio.create_task(dispatcher.run_forever()), stop)
    finally:
        await email.aclose()
        await close_http_client()
        await close_pool()
        logger.info("worker: stopped")


def main() -> None:
    asyncio.run(_run())


if __name__ == "__main__":
    main()
