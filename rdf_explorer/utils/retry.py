"""Async exponential backoff retry for endpoint and index requests."""

from __future__ import annotations

import asyncio
import functools
import random
from collections.abc import Mapping
from typing import Any, Callable, TypeVar

from rdf_explorer.utils.logging import get_logger

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# 4xx responses that will not change on a second attempt (429 is retried).
CLIENT_ERROR_STATUS_CODES: tuple[int, ...] = (400, 401, 403, 404, 405, 406, 414, 415, 422)


def _status_of(exc: BaseException) -> int | None:
    return getattr(getattr(exc, "response", None), "status_code", None)


def _retry_after(exc: BaseException) -> float | None:
    """Seconds from a ``Retry-After`` header, when the server sent a numeric one."""
    headers = getattr(getattr(exc, "response", None), "headers", None)
    value = headers.get("Retry-After") if isinstance(headers, Mapping) else None
    if not isinstance(value, str):
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        return None


def async_retry(
    max_attempts: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 10.0,
    retryable_exceptions: tuple[type[Exception], ...] = (Exception,),
    non_retryable_status_codes: tuple[int, ...] = CLIENT_ERROR_STATUS_CODES,
) -> Callable[[F], F]:
    """Decorator for async callables with exponential backoff + jitter.

    Can also wrap a bound method at runtime when the attempt count comes
    from settings: ``async_retry(max_attempts=n)(self._post)``. A numeric
    ``Retry-After`` header on the failed response stretches the delay, up to
    ``max_delay``.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            last_exc: Exception | None = None
            for attempt in range(1, max(max_attempts, 1) + 1):
                try:
                    return await func(*args, **kwargs)
                except retryable_exceptions as exc:
                    last_exc = exc
                    status = _status_of(exc)
                    if status and status in non_retryable_status_codes:
                        logger.warning(
                            "retry_skipped_client_error",
                            func=func.__name__,
                            status=status,
                        )
                        raise

                    if attempt >= max_attempts:
                        raise

                    delay = min(base_delay * (2 ** (attempt - 1)), max_delay)
                    total_delay = delay + random.uniform(0, delay * 0.5)
                    retry_after = _retry_after(exc)
                    if retry_after is not None:
                        # Overloaded endpoints (429/503) say how long to back off.
                        total_delay = min(max(total_delay, retry_after), max_delay)
                    logger.warning(
                        "retry_attempt",
                        func=func.__name__,
                        attempt=attempt,
                        delay=round(total_delay, 2),
                        status=status,
                        error=str(exc),
                    )
                    await asyncio.sleep(total_delay)

            raise RuntimeError(f"Exhausted retries for {func.__name__}") from last_exc

        return wrapper  # type: ignore[return-value]

    return decorator
