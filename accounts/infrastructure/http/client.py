from __future__ import annotations

from typing import Optional

import httpx

from accounts.settings import get_settings

_client: Optional[httpx.AsyncClient] = None


async def open_http_client(timeout: float | None = None) -> httpx.AsyncClient:
    """
    Create the process-wide AsyncClient if needed and return it.
    Timeout defaults to settings.http_timeout_seconds.
    """
    global _client
    if _client is None:
        if timeout is None:
            timeout = get_settings().http_timeout_seconds
        _client = httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": "accounts-service"},
        )
    return _client


def get_http_client() -> httpx.AsyncClient:
    if _client is None:
        raise RuntimeError(
            "HTTP client not opened yet. Call open_http_client() at startup."
        )
    return _client


async def close_http_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
