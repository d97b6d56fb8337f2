"""Testes dos agendadores de timers."""

from __future__ import annotations

import asyncio

import pytest

from guided_chat.infra.scheduler import AsyncioScheduler, ManualScheduler


def test_manual_scheduler_fires_in_due_order():
    scheduler = ManualScheduler()
    fired: list[str] = []
    scheduler.call_later(800, lambda: fired.append("late"))
    scheduler.call_later(500, lambda: fired.append("early"))
    scheduler.call_later(500, lambda: fired.append("early-second"))

    assert scheduler.advance(499) == 0
    assert scheduler.advance(1) == 2
    assert fired == ["early", "early-second"]
    scheduler.run_until_idle()
    assert fired == ["early", "early-second", "late"]
    assert scheduler.now_ms == 800


def test_cancelled_timer_never_fires():
    scheduler = ManualScheduler()
    fired: list[str] = []
    handle = scheduler.call_later(100, lambda: fired.append("x"))
    handle.cancel()

    assert scheduler.pending() == 0
    scheduler.run_until_idle()
    assert fired == []
    assert handle.cancelled()


def test_timers_scheduled_from_callbacks_fire():
    scheduler = ManualScheduler()
    fired: list[int] = []

    def chain() -> None:
        fired.append(scheduler.now_ms)
        if len(fired) < 3:
            scheduler.call_later(200, chain)

    scheduler.call_later(200, chain)
    scheduler.run_until_idle()
    assert fired == [200, 400, 600]


@pytest.mark.asyncio
async def test_asyncio_scheduler_runs_and_cancels():
    scheduler = AsyncioScheduler()
    fired: list[str] = []
    scheduler.call_later(10, lambda: fired.append("kept"))
    cancelled = scheduler.call_later(10, lambda: fired.append("dropped"))
    cancelled.cancel()

    await asyncio.sleep(0.05)
    assert fired == ["kept"]
    assert cancelled.cancelled()
