"""Tests for the live connection registry and its handles."""

from __future__ import annotations

import asyncio

import pytest

from app.domain.exceptions import ConnectionClosedError
from app.infrastructure.notifications import ConnectionHandle, ConnectionRegistry, monitor_liveness


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def test_register_replaces_and_closes_previous_handle() -> None:
    registry = ConnectionRegistry()
    first = ConnectionHandle(7)
    second = ConnectionHandle(7)

    assert registry.register(7, first) is None
    assert registry.register(7, second) is first

    assert first.closed
    assert not second.closed
    assert registry.lookup(7) is second
    assert len(registry) == 1


def test_stale_unregister_does_not_remove_replacement() -> None:
    registry = ConnectionRegistry()
    first = ConnectionHandle(7)
    second = ConnectionHandle(7)
    registry.register(7, first)
    registry.register(7, second)

    assert registry.unregister(7, first) is False
    assert registry.lookup(7) is second
    assert registry.unregister(7, second) is True
    assert registry.lookup(7) is None


def test_register_rejects_handle_for_other_recipient() -> None:
    registry = ConnectionRegistry()

    with pytest.raises(ValueError):
        registry.register(1, ConnectionHandle(2))

    assert len(registry) == 0


def test_reap_stale_drops_idle_and_closed_handles() -> None:
    clock = FakeClock()
    registry = ConnectionRegistry()
    idle = ConnectionHandle(1, clock=clock)
    busy = ConnectionHandle(2, clock=clock)
    closed = ConnectionHandle(3, clock=clock)
    for handle in (idle, busy, closed):
        registry.register(handle.recipient_id, handle)
    closed.close()

    clock.now += 120
    busy.mark_written()

    reaped = registry.reap_stale(90)

    assert set(reaped) == {idle, closed}
    assert idle.closed
    assert registry.recipients() == [2]


def test_close_all_closes_every_handle() -> None:
    registry = ConnectionRegistry()
    handles = [ConnectionHandle(recipient_id) for recipient_id in (1, 2, 3)]
    for handle in handles:
        registry.register(handle.recipient_id, handle)

    assert registry.close_all() == 3
    assert len(registry) == 0
    assert all(handle.closed for handle in handles)


def test_send_on_full_queue_closes_handle() -> None:
    handle = ConnectionHandle(1, max_queue_size=2)
    handle.send("a")
    handle.send("b")

    with pytest.raises(ConnectionClosedError):
        handle.send("c")

    assert handle.closed
    with pytest.raises(ConnectionClosedError):
        handle.send("d")


@pytest.mark.asyncio
async def test_next_frame_preserves_order_and_reports_idle() -> None:
    handle = ConnectionHandle(1)
    handle.send("first")
    handle.send("second")

    assert await handle.next_frame(0.1) == "first"
    assert await handle.next_frame(0.1) == "second"
    assert await handle.next_frame(0.01) is None


@pytest.mark.asyncio
async def test_close_wakes_waiting_consumer() -> None:
    handle = ConnectionHandle(1)
    waiter = asyncio.create_task(handle.next_frame(5))
    await asyncio.sleep(0)

    handle.close()
    handle.close()

    with pytest.raises(ConnectionClosedError):
        await waiter


@pytest.mark.asyncio
async def test_monitor_liveness_reaps_periodically() -> None:
    clock = FakeClock()
    registry = ConnectionRegistry()
    handle = ConnectionHandle(4, clock=clock)
    registry.register(4, handle)
    clock.now += 10

    monitor = asyncio.create_task(monitor_liveness(registry, interval=0.01, stale_after=5))
    try:
        for _ in range(50):
            if registry.lookup(4) is None:
                break
            await asyncio.sleep(0.01)
    finally:
        monitor.cancel()

    assert registry.lookup(4) is None
    assert handle.closed
