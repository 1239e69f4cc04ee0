"""Cooperative timers over an injectable clock.

Nothing here runs in the background: the owner calls ``run_due()`` (or
``advance()`` on a virtual clock) and every due callback runs to completion
before the next one starts.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Union

logger = logging.getLogger(__name__)

Interval = Union[int, Callable[[], int]]


class Clock(ABC):
    @abstractmethod
    def now_ms(self) -> int: ...


class SystemClock(Clock):
    """Wall-clock epoch milliseconds."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


class VirtualClock(Clock):
    """Manually advanced clock for simulations and tests."""

    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms

    def now_ms(self) -> int:
        return self._now

    def advance(self, ms: int) -> None:
        self._now += ms

    def set(self, ms: int) -> None:
        self._now = ms


@dataclass
class _Timer:
    id: int
    name: str
    due: int
    callback: Callable[[int], None]
    interval: Interval | None = None

    def next_interval(self) -> int:
        value = self.interval() if callable(self.interval) else self.interval
        return max(1, int(value or 1))


class Scheduler:
    """Repeating and one-shot timers fired in due-time order."""

    def __init__(self, clock: Clock | None = None) -> None:
        self.clock = clock or SystemClock()
        self._timers: dict[int, _Timer] = {}
        self._next_id = 1

    def now(self) -> int:
        return self.clock.now_ms()

    # ── Registration ─────────────────────────────────────────────────

    def every(self, interval: Interval, callback: Callable[[int], None], name: str = "") -> int:
        """Fire ``callback(now)`` repeatedly.

        ``interval`` may be a callable; it is re-read after every firing so
        upgrades that shorten the period apply from the next one.
        """
        timer = _Timer(self._next_id, name, 0, callback, interval)
        timer.due = self.now() + timer.next_interval()
        return self._add(timer)

    def call_later(self, delay_ms: int, callback: Callable[[int], None], name: str = "") -> int:
        return self._add(_Timer(self._next_id, name, self.now() + delay_ms, callback))

    def cancel(self, timer_id: int | None) -> None:
        if timer_id is not None:
            self._timers.pop(timer_id, None)

    def is_scheduled(self, timer_id: int | None) -> bool:
        return timer_id in self._timers

    def pending(self) -> list[str]:
        return [t.name for t in sorted(self._timers.values(), key=lambda t: (t.due, t.id))]

    # ── Running ──────────────────────────────────────────────────────

    def run_due(self) -> int:
        """Fire every timer due at the current clock reading. Returns the count.

        A repeating timer fires at most once per call; missed periods are
        skipped rather than replayed.
        """
        now = self.now()
        due = sorted(
            (t for t in self._timers.values() if t.due <= now),
            key=lambda t: (t.due, t.id),
        )
        fired = 0
        for timer in due:
            # An earlier callback may have cancelled this one.
            if timer.id not in self._timers:
                continue
            if timer.interval is None:
                del self._timers[timer.id]
            timer.callback(now)
            fired += 1
            if timer.interval is not None and timer.id in self._timers:
                timer.due = self.now() + timer.next_interval()
        return fired

    def next_due(self) -> int | None:
        if not self._timers:
            return None
        return min(t.due for t in self._timers.values())

    def advance(self, ms: int) -> int:
        """Step a virtual clock forward, firing timers at their due times."""
        if not isinstance(self.clock, VirtualClock):
            raise TypeError("advance() requires a VirtualClock")
        end = self.clock.now_ms() + ms
        fired = 0
        while True:
            due = self.next_due()
            if due is None or due > end:
                break
            self.clock.set(max(due, self.clock.now_ms()))
            fired += self.run_due()
        self.clock.set(end)
        return fired

    def _add(self, timer: _Timer) -> int:
        self._timers[timer.id] = timer
        self._next_id += 1
        logger.debug("Scheduled %s (#%d) at %d", timer.name or "timer", timer.id, timer.due)
        return timer.id
