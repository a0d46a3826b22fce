"""Retry decision logic, exponential backoff and a generic retry wrapper.

* :func:`is_retryable` -- decide whether a failed request may be retried.
* :func:`compute_backoff` -- the delay before the next attempt.
* :func:`retry_call` / :func:`async_retry_call` -- run a callable under a
  :class:`RetryPolicy`, re-invoking it while the predicate allows.

The transports compose these; nothing in this module knows about HTTP.
"""

from __future__ import annotations

import asyncio
import random
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from notionkit.errors import RETRYABLE_CODES, NotionKitError, NotionRequestError

T = TypeVar("T")

# Called before sleeping: (attempt number starting at 1, error, delay).
OnRetry = Callable[[int, Exception, float], None]


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how patiently to retry.

    Parameters
    ----------
    max_attempts:
        Total attempts, the first one included.
    base_delay:
        Delay in seconds before the first retry; doubled for each further
        retry.
    max_delay:
        Upper cap in seconds on a single delay.
    jitter:
        Randomly scale each delay to 50-100 % of its value.
    """

    max_attempts: int = 4
    base_delay: float = 1.0
    max_delay: float = 60.0
    jitter: bool = False

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")

    @classmethod
    def from_config(cls, config) -> RetryPolicy:
        return cls(
            max_attempts=config.retry_max_attempts,
            base_delay=config.retry_base_delay,
            max_delay=config.retry_max_delay,
            jitter=config.retry_jitter,
        )


def is_retryable(exc: BaseException) -> bool:
    """``True`` for request failures whose code is transient.

    Transport failures carry ``internal_server_error`` and are therefore
    retryable; ``invalid_json`` and every client error are not.
    """
    return isinstance(exc, NotionRequestError) and exc.code in RETRYABLE_CODES


def compute_backoff(
    attempt: int,
    base: float = 1.0,
    maximum: float = 60.0,
    jitter: bool = False,
    retry_after: float | None = None,
) -> float:
    """Compute the delay before the next attempt.

    The delay is ``base * 2 ** attempt`` capped at *maximum*, optionally
    scaled by jitter.  A server-provided ``Retry-After`` raises the delay
    to at least that many seconds.

    Parameters
    ----------
    attempt:
        Number of retries already performed (0 before the first retry).
    base:
        Base delay in seconds.
    maximum:
        Maximum delay cap in seconds.
    jitter:
        Whether to apply random jitter.
    retry_after:
        Value of the ``Retry-After`` header in seconds, if present.

    Returns
    -------
    float
        Delay in seconds.
    """
    delay = min(base * (2 ** attempt), maximum)
    if jitter:
        delay *= 0.5 + random.random() * 0.5
    if retry_after is not None and retry_after > delay:
        delay = retry_after
    return delay


def _delay_for(policy: RetryPolicy, retry_index: int, exc: Exception) -> float:
    retry_after = None
    if isinstance(exc, NotionKitError):
        retry_after = exc.context.get("retry_after")
    return compute_backoff(
        retry_index,
        base=policy.base_delay,
        maximum=policy.max_delay,
        jitter=policy.jitter,
        retry_after=retry_after,
    )


def retry_call(
    fn: Callable[[], T],
    policy: RetryPolicy,
    *,
    should_retry: Callable[[BaseException], bool] = is_retryable,
    sleep: Callable[[float], None] = time.sleep,
    on_retry: OnRetry | None = None,
) -> T:
    """Call *fn* until it succeeds, fails permanently or attempts run out.

    The last error is re-raised unchanged once *policy* is exhausted.
    """
    attempt = 1
    while True:
        try:
            return fn()
        except Exception as exc:
            if attempt >= policy.max_attempts or not should_retry(exc):
                raise
            delay = _delay_for(policy, attempt - 1, exc)
            if on_retry is not None:
                on_retry(attempt, exc, delay)
        sleep(delay)
        attempt += 1


async def async_retry_call(
    fn: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    should_retry: Callable[[BaseException], bool] = is_retryable,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    on_retry: OnRetry | None = None,
) -> T:
    """Async twin of :func:`retry_call`; *fn* returns a fresh awaitable per call."""
    attempt = 1
    while True:
        try:
            return await fn()
        except Exception as exc:
            if attempt >= policy.max_attempts or not should_retry(exc):
                raise
            delay = _delay_for(policy, attempt - 1, exc)
            if on_retry is not None:
                on_retry(attempt, exc, delay)
        await sleep(delay)
        attempt += 1
