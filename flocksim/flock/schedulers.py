"""
Tick schedulers

A scheduler calls on_tick at a fixed interval until stopped. FlockSimulation
is driven by one; which one decides the thread ticks run on:

- ThreadTickScheduler: dedicated daemon thread, no event loop needed
- QtTickScheduler: QTimer, ticks on the thread owning the timer (needs a
  running Qt event loop)
"""

import threading
import time
from typing import Callable, Optional

from PyQt5.QtCore import QObject, QTimer

from flocksim.utils.logger import logger

TickCallback = Callable[[], None]


class TickScheduler:
    """Interface for periodic tick drivers."""

    def start(self, interval_ms: int, on_tick: TickCallback) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError

    @property
    def is_running(self) -> bool:
        raise NotImplementedError


class ThreadTickScheduler(TickScheduler):
    """Fixed-rate ticks on a background thread."""

    def __init__(self, name: str = "flock-ticks"):
        self._name = name
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    def start(self, interval_ms: int, on_tick: TickCallback) -> None:
        if self.is_running:
            raise RuntimeError("Scheduler already running")
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            args=(interval_ms / 1000.0, on_tick),
            name=self._name,
        )
        self._thread.daemon = True
        self._thread.start()
        logger.sched(f"Tick thread started ({interval_ms}ms)")

    def _run(self, interval: float, on_tick: TickCallback) -> None:
        next_tick = time.monotonic() + interval
        while not self._stop_event.wait(max(0.0, next_tick - time.monotonic())):
            try:
                on_tick()
            except Exception as e:
                logger.error("Tick failed, stopping scheduler", component="SCHED",
                             details=f"{type(e).__name__}: {e}")
                raise

            next_tick += interval
            now = time.monotonic()
            if next_tick < now:
                # Fell behind; don't burst to catch up
                next_tick = now + interval

    def stop(self) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread is None:
            return
        # stop() may be called from inside a tick (e.g. a draw callback)
        if thread is not threading.current_thread():
            thread.join()
        self._thread = None
        logger.sched("Tick thread stopped")

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()


class QtTickScheduler(TickScheduler):
    """Ticks from a QTimer on the Qt thread that owns it."""

    def __init__(self, parent: Optional[QObject] = None):
        self._timer = QTimer(parent)
        self._on_tick: Optional[TickCallback] = None
        self._timer.timeout.connect(self._fire)

    def start(self, interval_ms: int, on_tick: TickCallback) -> None:
        self._on_tick = on_tick
        self._timer.setInterval(interval_ms)
        self._timer.start()
        logger.sched(f"Tick timer started ({interval_ms}ms)")

    def _fire(self) -> None:
        if self._on_tick is not None:
            self._on_tick()

    def stop(self) -> None:
        self._timer.stop()
        self._on_tick = None

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()
