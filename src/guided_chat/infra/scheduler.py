"""Agendamento de timers do fluxo (digitação, avanço, colaboradores simulados).

- AsyncioScheduler: timers reais no event loop em execução
- ManualScheduler: relógio virtual para testes e replays determinísticos

Todo timer é cancelável; callbacks de timers cancelados nunca executam.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from guided_chat.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

TimerCallback = Callable[[], None]


class TimerHandle(ABC):
    """Handle de um timer agendado."""

    @abstractmethod
    def cancel(self) -> None:
        """Cancela o timer (idempotente)."""

    @abstractmethod
    def cancelled(self) -> bool:
        """True se o timer foi cancelado antes de disparar."""


class Scheduler(ABC):
    """Contrato mínimo de agendamento usado pelo ChatService."""

    @abstractmethod
    def call_later(self, delay_ms: int, callback: TimerCallback) -> TimerHandle:
        """Agenda `callback` para daqui a `delay_ms` milissegundos."""


class _AsyncioTimer(TimerHandle):
    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(Scheduler):
    """Agenda callbacks no event loop.

    Sem loop explícito, usa o loop em execução no momento do agendamento.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay_ms: int, callback: TimerCallback) -> TimerHandle:
        handle = self._get_loop().call_later(max(delay_ms, 0) / 1000, callback)
        return _AsyncioTimer(handle)


class ManualTimer(TimerHandle):
    __slots__ = ("due_ms", "callback", "_cancelled")

    def __init__(self, due_ms: int, callback: TimerCallback) -> None:
        self.due_ms = due_ms
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """Relógio virtual: timers só disparam via advance()/run_until_idle().

    Timers com o mesmo instante disparam na ordem de agendamento.
    """

    def __init__(self) -> None:
        self._now_ms = 0
        self._seq = itertools.count()
        self._queue: list[tuple[int, int, ManualTimer]] = []

    @property
    def now_ms(self) -> int:
        return self._now_ms

    def call_later(self, delay_ms: int, callback: TimerCallback) -> TimerHandle:
        timer = ManualTimer(self._now_ms + max(delay_ms, 0), callback)
        heapq.heappush(self._queue, (timer.due_ms, next(self._seq), timer))
        return timer

    def pending(self) -> int:
        """Quantidade de timers ainda não disparados nem cancelados."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled())

    def advance(self, delta_ms: int) -> int:
        """Avança o relógio disparando timers vencidos. Retorna quantos dispararam."""
        target = self._now_ms + delta_ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due_ms, _, timer = heapq.heappop(self._queue)
            if timer.cancelled():
                continue
            self._now_ms = due_ms
            timer.callback()
            fired += 1
        self._now_ms = target
        return fired

    def run_until_idle(self, max_ms: int = 600_000) -> int:
        """Dispara timers até a fila esvaziar (limite de segurança em `max_ms`)."""
        fired = 0
        deadline = self._now_ms + max_ms
        while self._queue:
            due_ms = self._queue[0][0]
            if due_ms > deadline:
                logger.warning(
                    "Manual scheduler stopped at deadline",
                    extra={"pending": self.pending(), "now_ms": self._now_ms},
                )
                break
            fired += self.advance(due_ms - self._now_ms)
        return fired
