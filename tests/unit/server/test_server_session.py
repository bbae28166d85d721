"""Unit tests for the server inactivity session."""

import asyncio

from cap_manager.server import ServerSession


class ManualClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestServerSession:
    def test_starts_fresh(self) -> None:
        clock = ManualClock()
        session = ServerSession(timeout=10, clock=clock)

        assert session.idle_seconds == 0
        assert not session.is_expired()

    def test_expires_after_timeout(self) -> None:
        clock = ManualClock()
        session = ServerSession(timeout=10, clock=clock)

        clock.now = 9.5
        assert not session.is_expired()
        clock.now = 10
        assert session.is_expired()

    def test_ping_resets_timer(self) -> None:
        clock = ManualClock()
        session = ServerSession(timeout=10, clock=clock)

        clock.now = 8
        session.ping()
        clock.now = 15

        assert session.idle_seconds == 7
        assert not session.is_expired()

    def test_watch_calls_handler_once_expired(self) -> None:
        clock = ManualClock()
        calls: list[float] = []
        session = ServerSession(timeout=10, check_interval=0, clock=clock)
        session.set_timeout_handler(lambda: calls.append(clock.now))
        clock.now = 11

        asyncio.run(session.watch())

        assert calls == [11]

    def test_watch_keeps_waiting_while_active(self) -> None:
        clock = ManualClock()
        fired: list[bool] = []

        async def scenario() -> None:
            session = ServerSession(
                timeout=10,
                check_interval=0,
                clock=clock,
                on_timeout=lambda: fired.append(True),
            )
            session.start()
            for _ in range(5):
                await asyncio.sleep(0)
            assert fired == []
            clock.now = 20
            await asyncio.wait_for(session._task, timeout=1)  # pyright: ignore[reportArgumentType]

        asyncio.run(scenario())

        assert fired == [True]

    def test_stop_cancels_watchdog(self) -> None:
        fired: list[bool] = []

        async def scenario() -> None:
            session = ServerSession(
                timeout=10, check_interval=60, on_timeout=lambda: fired.append(True)
            )
            session.start()
            await session.stop()
            await session.stop()

        asyncio.run(scenario())

        assert fired == []
