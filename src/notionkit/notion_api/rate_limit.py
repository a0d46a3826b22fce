"""Token-bucket rate limiters shared by every request of a client.

Provides a thread-safe synchronous :class:`TokenBucket` and an async-safe
:class:`AsyncTokenBucket`.  Both hold at most *burst* tokens and are
refilled by a background worker that adds one token every
``1 / rate_rps`` seconds.  Callers never return tokens: :meth:`acquire`
takes one and the worker produces the next.

Waiters are served first come, first served, so no caller starves while
tokens are being produced.  A bucket is meant to be created once and
passed to every transport that should share its budget.
"""

from __future__ import annotations

import asyncio
import collections
import threading
import time

from notionkit.observability import get_logger

log = get_logger("notionkit.rate_limit")


def _validate(rate_rps: float, burst: int) -> None:
    if rate_rps <= 0:
        raise ValueError(f"rate_rps must be > 0, got {rate_rps}")
    if burst < 1:
        raise ValueError(f"burst must be >= 1, got {burst}")


class TokenBucket:
    """Thread-safe token bucket with a daemon refill thread.

    The refill thread starts at construction and runs until :meth:`close`.

    Parameters
    ----------
    rate_rps:
        Tokens added per second.
    burst:
        Maximum number of tokens the bucket can hold; it starts full.
    """

    def __init__(self, rate_rps: float, burst: int = 10) -> None:
        _validate(rate_rps, burst)
        self.rate: float = rate_rps
        self.burst: int = burst
        self.interval: float = 1.0 / rate_rps

        self._tokens = burst
        self._cond = threading.Condition()
        # Ticket numbers give waiters FIFO order.
        self._next_ticket = 0
        self._now_serving = 0

        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._refill_loop,
            name="notionkit-token-refill",
            daemon=True,
        )
        self._thread.start()

    @property
    def available(self) -> int:
        """Tokens currently in the bucket."""
        with self._cond:
            return self._tokens

    def _refill_loop(self) -> None:
        while not self._stop.wait(self.interval):
            with self._cond:
                if self._tokens < self.burst:
                    self._tokens += 1
                    self._cond.notify_all()

    def acquire(self) -> float:
        """Take one token, blocking until one is available.

        Returns the number of seconds the caller waited (``0.0`` when a
        token was available immediately).
        """
        start = time.monotonic()
        with self._cond:
            ticket = self._next_ticket
            self._next_ticket += 1
            while ticket != self._now_serving or self._tokens < 1:
                self._cond.wait()
            self._tokens -= 1
            self._now_serving += 1
            # Wake the next ticket holder in case a token is left over.
            self._cond.notify_all()
        return time.monotonic() - start

    def close(self) -> None:
        """Stop the refill thread.  Waiting callers are not released."""
        self._stop.set()
        self._thread.join(timeout=max(self.interval, 1.0))

    @property
    def closed(self) -> bool:
        return self._stop.is_set()

    def __enter__(self) -> TokenBucket:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class AsyncTokenBucket:
    """Async token bucket with a refill task on the running event loop.

    The refill task is started by :meth:`start` or lazily by the first
    :meth:`acquire`, and stopped by :meth:`aclose`.  If the task is found
    dead while the bucket is open it is restarted and a warning is logged.

    A token freed by the refill task is handed directly to the oldest
    waiter.  Cancelling a waiting :meth:`acquire` consumes no token: a
    token handed over at the moment of cancellation goes to the next
    waiter instead.

    Parameters
    ----------
    rate_rps:
        Tokens added per second.
    burst:
        Maximum number of tokens the bucket can hold; it starts full.
    """

    def __init__(self, rate_rps: float, burst: int = 10) -> None:
        _validate(rate_rps, burst)
        self.rate: float = rate_rps
        self.burst: int = burst
        self.interval: float = 1.0 / rate_rps

        self._tokens = burst
        self._waiters: collections.deque[asyncio.Future[None]] = collections.deque()
        self._task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def available(self) -> int:
        """Tokens currently in the bucket."""
        return self._tokens

    @property
    def waiting(self) -> int:
        """Number of callers queued for a token."""
        return sum(1 for fut in self._waiters if not fut.done())

    def start(self) -> None:
        """Start the refill task on the running loop if it is not running."""
        if self._closed:
            raise RuntimeError("AsyncTokenBucket is closed")
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(
                self._refill_loop(), name="notionkit-token-refill"
            )
        elif self._task.done():
            log.warning(
                "Rate limiter refill task died; restarting",
                extra={"extra_fields": {"op": "rate_limit", "rate_rps": self.rate}},
            )
            self._task = asyncio.get_running_loop().create_task(
                self._refill_loop(), name="notionkit-token-refill"
            )

    async def _refill_loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self._release_one()

    def _release_one(self) -> None:
        """Hand a token to the oldest live waiter, or store it."""
        while self._waiters:
            fut = self._waiters.popleft()
            if not fut.done():
                fut.set_result(None)
                return
        if self._tokens < self.burst:
            self._tokens += 1

    async def acquire(self) -> float:
        """Take one token, suspending until one is available.

        Returns the number of seconds the caller waited (``0.0`` when a
        token was available immediately).  While the bucket is open this
        never fails; it only waits.  Once :meth:`aclose` has been called the
        bucket is shut down for good: new calls raise :class:`RuntimeError`
        and so do calls still queued at that moment.
        """
        self.start()
        if self._tokens > 0 and not self._waiters:
            self._tokens -= 1
            return 0.0

        start = time.monotonic()
        fut: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(fut)
        try:
            await fut
        except asyncio.CancelledError:
            if fut.done() and not fut.cancelled():
                # The token was already handed to us; pass it on.
                self._release_one()
            else:
                try:
                    self._waiters.remove(fut)
                except ValueError:
                    pass
            raise
        return time.monotonic() - start

    async def aclose(self) -> None:
        """Cancel the refill task and fail queued callers with :class:`RuntimeError`."""
        self._closed = True
        while self._waiters:
            fut = self._waiters.popleft()
            if not fut.done():
                fut.set_exception(RuntimeError("AsyncTokenBucket is closed"))
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> AsyncTokenBucket:
        self.start()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()
