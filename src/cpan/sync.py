"""Synchronization helpers for the fan-out/fan-in install graph."""

from __future__ import annotations

import threading
from typing import Callable, Optional


class WaitGroup:
    """Countdown latch: ``add`` raises the count, ``done`` lowers it.

    ``wait`` blocks until the count reaches zero. A Request's completion
    handle is a WaitGroup holding exactly one pending signal; a processor's
    fan-in handle holds one per prerequisite it issued.
    """

    def __init__(self, count: int = 0):
        if count < 0:
            raise ValueError("negative WaitGroup count")
        self._count = count
        self._cond = threading.Condition()

    def add(self, delta: int = 1) -> None:
        with self._cond:
            if self._count + delta < 0:
                raise ValueError("negative WaitGroup count")
            self._count += delta
            if self._count == 0:
                self._cond.notify_all()

    def done(self) -> None:
        self.add(-1)

    @property
    def count(self) -> int:
        with self._cond:
            return self._count

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the count drops to zero.

        Returns:
            False if ``timeout`` elapsed first, True otherwise.
        """
        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout=timeout)


class Heartbeat:
    """Calls ``beat`` every ``interval`` seconds until stopped.

    Purely cosmetic; it never interrupts the work it reports on.
    """

    def __init__(self, interval: float, beat: Callable[[], None]):
        self._interval = interval
        self._beat = beat
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> "Heartbeat":
        if self._interval <= 0:
            return self
        self._thread = threading.Thread(target=self._run, name="heartbeat", daemon=True)
        self._thread.start()
        return self

    def stop(self) -> None:
        """Stop ticking; no beat is delivered once this returns."""
        self._stopped.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def _run(self) -> None:
        while not self._stopped.wait(self._interval):
            self._beat()
