from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import Callable, Protocol


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> None: ...


@dataclass(order=True)
class _Scheduled:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)


class FrameScheduler:
    """Fires deferred callbacks as elapsed time is fed in through `advance`.

    The pygame loop passes each frame's dt; tests advance it by hand. Callbacks
    due at the same time run in the order they were scheduled.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[_Scheduled] = []
        self._seq = 0

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        self._seq += 1
        heapq.heappush(self._queue, _Scheduled(due=self.now + max(0.0, delay), seq=self._seq, callback=callback))

    def advance(self, dt: float) -> int:
        self.now += max(0.0, dt)
        fired = 0
        while self._queue and self._queue[0].due <= self.now:
            item = heapq.heappop(self._queue)
            item.callback()
            fired += 1
        return fired

    @property
    def pending(self) -> int:
        return len(self._queue)
