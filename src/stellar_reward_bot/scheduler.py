import logging
import threading
import time
from typing import Callable, Optional

from .events import EventSink


class DistributionScheduler:
    """
    Invoke ``cycle`` every ``interval`` seconds on a worker thread.

    A tick that arrives while the previous cycle is still running is
    skipped, never queued, so at most one cycle runs at a time.
    """

    def __init__(self, cycle: Callable[[], object], interval: float, events: EventSink):
        self.cycle = cycle
        self.interval = interval
        self.events = events
        self._running = threading.Lock()
        self._stopped = threading.Event()
        self._worker: Optional[threading.Thread] = None
        self.ticks = 0

    @property
    def busy(self) -> bool:
        return self._running.locked()

    def _run_guarded(self) -> None:
        try:
            self.cycle()
        except Exception as e:
            self.events.emit("cycle_crashed", level=logging.ERROR, error=str(e) or type(e).__name__)
        finally:
            self._running.release()

    def tick(self) -> bool:
        self.ticks += 1
        if not self._running.acquire(blocking=False):
            self.events.emit("cycle_skipped", level=logging.WARNING, tick=self.ticks)
            return False
        self.events.emit("cycle_triggered", tick=self.ticks)
        self._worker = threading.Thread(
            target=self._run_guarded, name=f"distribution-{self.ticks}", daemon=True
        )
        self._worker.start()
        return True

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the most recent cycle finishes."""
        if self._worker is not None:
            self._worker.join(timeout)

    def stop(self) -> None:
        self._stopped.set()

    def run_forever(self) -> None:
        self.events.emit("scheduler_started", interval=self.interval)
        next_tick = time.monotonic()
        try:
            while not self._stopped.is_set():
                self.tick()
                next_tick += self.interval
                self._stopped.wait(max(0.0, next_tick - time.monotonic()))
        except KeyboardInterrupt:
            self.events.emit("scheduler_interrupted", level=logging.WARNING)
        finally:
            self.events.emit("scheduler_stopped", ticks=self.ticks)
