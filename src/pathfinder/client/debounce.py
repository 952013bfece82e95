from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, Generic, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay_sec: float, callback: Callable[[], None]) -> TimerHandle: ...


class ThreadingScheduler:
    """Runs callbacks on daemon ``threading.Timer`` threads."""

    def schedule(self, delay_sec: float, callback: Callable[[], None]) -> TimerHandle:
        timer = threading.Timer(delay_sec, callback)
        timer.daemon = True
        timer.start()
        return timer


class Debouncer(Generic[T]):
    """Coalesce a burst of triggers into one callback with the last value.

    Each ``trigger`` re-arms the timer; the callback fires once the window
    has passed without another trigger.
    """

    def __init__(
        self,
        window_ms: int,
        callback: Callable[[T], Any],
        scheduler: Scheduler | None = None,
    ):
        self.window_ms = window_ms
        self.callback = callback
        self.scheduler = scheduler or ThreadingScheduler()
        self._lock = threading.Lock()
        self._handle: TimerHandle | None = None
        self._value: T | None = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._handle is not None

    def trigger(self, value: T) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            self._generation += 1
            generation = self._generation
            self._value = value
            self._handle = self.scheduler.schedule(self.window_ms / 1000.0, lambda: self._fire(generation))

    def cancel(self) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            self._handle = None
            self._value = None
            self._generation += 1

    def flush(self) -> None:
        """Fire a pending call immediately."""
        with self._lock:
            if self._handle is None:
                return
            self._handle.cancel()
            self._disarm_locked()
            value = self._value
            self._value = None
        self._invoke(value)

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A timer that lost the race with trigger/cancel must not fire.
            if generation != self._generation or self._handle is None:
                return
            self._disarm_locked()
            value = self._value
            self._value = None
        self._invoke(value)

    def _disarm_locked(self) -> None:
        self._handle = None
        self._generation += 1

    def _invoke(self, value: T | None) -> None:
        try:
            self.callback(value)  # type: ignore[arg-type]
        except Exception:
            logger.exception("Debounced callback failed")
