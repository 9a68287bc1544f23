"""Shared resilience helpers for transient API failures and payload guards."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from aiohttp import ClientConnectionError, ClientResponseError, ServerTimeoutError

RETRYABLE_HTTP_STATUSES = {429, 500, 502, 503, 504}

_T = TypeVar("_T")


class CloudflareAPIError(Exception):
    """Cloudflare answered, but reported the call as unsuccessful."""

    def __init__(self, context: str, errors: list[dict] | None = None) -> None:
        self.errors = list(errors or [])
        detail = "; ".join(
            f"{err.get('code', '?')}: {err.get('message', '')}".strip() for err in self.errors
        )
        super().__init__(f"{context} failed" + (f" ({detail})" if detail else ""))


def expect_dict(value: object, context: str) -> dict:
    if isinstance(value, dict):
        return value
    value_type = type(value).__name__
    raise ValueError(f"{context} has unexpected type '{value_type}'")


def cloudflare_result(payload: object, context: str) -> dict:
    """Unwrap the `result` object of a Cloudflare v4 envelope."""
    root = expect_dict(payload, f"{context} payload")
    if root.get("success") is not True:
        errors = root.get("errors")
        raise CloudflareAPIError(context, errors if isinstance(errors, list) else None)
    return expect_dict(root.get("result"), f"{context}.result")


def is_retryable_exception(exc: Exception) -> bool:
    return (
        isinstance(exc, (asyncio.TimeoutError, ClientConnectionError, ServerTimeoutError))
        or (isinstance(exc, ClientResponseError) and exc.status in RETRYABLE_HTTP_STATUSES)
    )


def retry_delay_seconds(attempt: int, retry_after: str | None = None) -> int:
    if retry_after:
        try:
            value = int(float(retry_after))
        except (TypeError, ValueError):
            value = 0
        if value > 0:
            return value
    return 2 ** attempt


async def run_with_retries(
    operation: Callable[[], Awaitable[_T]],
    *,
    max_attempts: int,
    on_retry: Callable[[int, int, int, Exception], None] | None = None,
) -> _T:
    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except Exception as exc:
            if attempt >= max_attempts or not is_retryable_exception(exc):
                raise
            retry_after = None
            if isinstance(exc, ClientResponseError) and exc.headers:
                retry_after = exc.headers.get("Retry-After")
            delay = retry_delay_seconds(attempt, retry_after)
            if on_retry is not None:
                on_retry(attempt, max_attempts, delay, exc)
            await asyncio.sleep(delay)
    raise RuntimeError("Unreachable retry exit")
