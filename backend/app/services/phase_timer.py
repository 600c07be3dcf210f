"""Phase Timer - the inter-phase delay behind a swappable interface.

Invariants:
    - wait(0) returns without sleeping (still yields to the event loop once)
    - ManualPhaseTimer never releases a waiter before virtual time reaches its deadline
    - ManualPhaseTimer releases waiters in deadline order

Design Decisions:
    - Protocol + two implementations: production sleeps on the event loop,
      tests advance virtual time instead of sleeping
"""

import asyncio
import heapq
import itertools
from typing import Protocol


class PhaseTimer(Protocol):
    async def wait(self, delay_ms: int) -> None: ...


class AsyncioPhaseTimer:
    """Real delay via asyncio.sleep."""

    async def wait(self, delay_ms: int) -> None:
        await asyncio.sleep(max(delay_ms, 0) / 1000)


class ManualPhaseTimer:
    """Virtual clock: waiters park until advance() moves time past their deadline."""

    def __init__(self):
        self.now_ms = 0
        self._waiters: list[tuple[int, int, asyncio.Future]] = []
        self._counter = itertools.count()

    @property
    def pending(self) -> int:
        return sum(1 for _, _, fut in self._waiters if not fut.done())

    async def wait(self, delay_ms: int) -> None:
        if delay_ms <= 0:
            await asyncio.sleep(0)
            return
        future = asyncio.get_running_loop().create_future()
        heapq.heappush(
            self._waiters, (self.now_ms + delay_ms, next(self._counter), future),
        )
        await future

    async def advance(self, delta_ms: int) -> None:
        """Move virtual time forward and let released waiters run."""
        self.now_ms += delta_ms
        while self._waiters and self._waiters[0][0] <= self.now_ms:
            _, _, future = heapq.heappop(self._waiters)
            if not future.done():
                future.set_result(None)
        await _settle()


async def _settle(rounds: int = 20) -> None:
    """Yield repeatedly so woken tasks reach their next suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)
