"""Inactivity tracking for the HTTP server.

The web UI pings the server periodically; when no ping arrives within the
timeout the watchdog invokes the shutdown handler installed by ``serve``.
"""

from __future__ import annotations

import asyncio
import contextlib
import time
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Callable

    from structlog.typing import FilteringBoundLogger

__all__ = ["ServerSession"]


class ServerSession:
    """Last-ping bookkeeping plus the watchdog task that enforces the timeout.

    Attributes:
        timeout: Seconds without a ping before the session expires.
        check_interval: Seconds between watchdog checks.
    """

    __slots__: Final = (
        "_clock",
        "_last_ping",
        "_logger",
        "_on_timeout",
        "_task",
        "check_interval",
        "timeout",
    )

    timeout: float
    check_interval: float
    _clock: Callable[[], float]
    _last_ping: float
    _logger: FilteringBoundLogger | None
    _on_timeout: Callable[[], None] | None
    _task: asyncio.Task[None] | None

    def __init__(
        self,
        *,
        timeout: float = 900.0,
        check_interval: float = 60.0,
        logger: FilteringBoundLogger | None = None,
        on_timeout: Callable[[], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the session; the inactivity timer starts immediately.

        Args:
            timeout: Seconds without a ping before the session expires.
            check_interval: Seconds between watchdog checks.
            logger: Optional logger for lifecycle events.
            on_timeout: Called once when the watchdog sees an expired session.
            clock: Monotonic time source, injectable for tests.
        """
        self.timeout = timeout
        self.check_interval = check_interval
        self._logger = logger
        self._on_timeout = on_timeout
        self._clock = clock
        self._last_ping = clock()
        self._task = None

    def ping(self) -> None:
        """Record activity, resetting the inactivity timer."""
        self._last_ping = self._clock()
        if self._logger is not None:
            self._logger.debug("session_ping")

    @property
    def idle_seconds(self) -> float:
        """Seconds since the last ping."""
        return self._clock() - self._last_ping

    def is_expired(self) -> bool:
        """Whether the session has been idle for at least the timeout."""
        return self.idle_seconds >= self.timeout

    def set_timeout_handler(self, handler: Callable[[], None]) -> None:
        """Install the callback invoked when the session expires."""
        self._on_timeout = handler

    async def watch(self) -> None:
        """Check for expiry every ``check_interval`` seconds until it happens."""
        while True:
            await asyncio.sleep(self.check_interval)
            if self.is_expired():
                break

        if self._logger is not None:
            self._logger.info("session_timeout", idle_seconds=self.idle_seconds)
        if self._on_timeout is not None:
            self._on_timeout()

    def start(self) -> None:
        """Start the watchdog on the running event loop."""
        if self._task is None:
            self._task = asyncio.create_task(self.watch())
            if self._logger is not None:
                self._logger.info(
                    "session_started",
                    timeout=self.timeout,
                    check_interval=self.check_interval,
                )

    async def stop(self) -> None:
        """Cancel the watchdog and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        _ = task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        if self._logger is not None:
            self._logger.info("session_stopped")
