"""
Virtual-time event engine.

Events are ordered by (time, seq): seq is a global insertion counter, so
events scheduled for the same virtual time fire in the order they were
scheduled. Nothing here sleeps; the clock jumps straight to the next event.
"""
import heapq
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass(order=True)
class EventHandle:
    time: float
    seq: int
    context: Any = field(compare=False)        # usually the target NodeId
    callback: Callable = field(compare=False)
    args: tuple = field(compare=False, default=())
    cancelled: bool = field(compare=False, default=False)
    fired: bool = field(compare=False, default=False)

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class EventScheduler:
    def __init__(self):
        self._queue: list[EventHandle] = []
        self._next_seq = 0
        self._now = 0.0
        self.dispatched = 0

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return sum(1 for ev in self._queue if ev.active)

    def schedule(self, delay: float, context, callback: Callable, *args) -> EventHandle:
        """Schedule callback(*args) at now + delay."""
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        ev = EventHandle(time=self._now + float(delay), seq=self._next_seq,
                         context=context, callback=callback, args=args)
        self._next_seq += 1
        heapq.heappush(self._queue, ev)
        return ev

    def cancel(self, handle: EventHandle | None):
        if handle is not None and handle.active:
            handle.cancelled = True

    def run(self, stop_time: float):
        """Dispatch every event at or before stop_time, then drop the rest."""
        while self._queue:
            ev = self._queue[0]
            if ev.time > stop_time:
                break
            heapq.heappop(self._queue)
            if ev.cancelled:
                continue
            self._now = ev.time
            ev.fired = True
            self.dispatched += 1
            ev.callback(*ev.args)

        dropped = 0
        for ev in self._queue:
            if ev.active:
                ev.cancelled = True
                dropped += 1
        if dropped:
            logger.debug("Discarding %d events scheduled after t=%s", dropped, stop_time)
        self._queue.clear()
        self._now = max(self._now, float(stop_time))
