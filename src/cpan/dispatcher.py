"""Admission queue consumer: deduplicates requests and spawns processors."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, Dict, Optional

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from .models import Request
from .progress import Progress
from .sync import WaitGroup

logger = logging.getLogger(__name__)

Spawner = Callable[[Request], None]

_STOP = object()


class RequestDispatcher:
    """Single consumer of the admission queue.

    The consumer thread is the only writer of ``admitted``, so the table needs
    no lock. A name is admitted at most once per dispatcher lifetime; any
    later request for it is signalled done straight away.

    Note that a deduplicated request reports success without looking at the
    outcome of the attempt that was admitted for the same name.
    """

    def __init__(
        self,
        spawn: Spawner,
        progress: Optional[Progress] = None,
        maxsize: int = Constants.QUEUE_SIZE,
    ):
        self._spawn = spawn
        self.progress = progress or Progress()
        self.queue: "queue.Queue[object]" = queue.Queue(maxsize=maxsize)
        self.admitted: Dict[str, WaitGroup] = {}
        self._thread: Optional[threading.Thread] = None

    def start(self) -> "RequestDispatcher":
        self._thread = threading.Thread(target=self._process_queue, name="dispatcher", daemon=True)
        self._thread.start()
        return self

    def submit(self, request: Request) -> None:
        """Enqueue a request; blocks while the queue is full."""
        self.queue.put(request)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Ask the consumer loop to exit once it drains what is queued."""
        if self._thread is None:
            return
        self.queue.put(_STOP)
        self._thread.join(timeout)
        self._thread = None

    def _process_queue(self) -> None:
        while True:
            item = self.queue.get()
            if item is _STOP:
                break
            self._dispatch(item)

    def _dispatch(self, request: Request) -> None:
        name = request.name
        self.progress.note("Working on %s", name)
        if name == Constants.EXCLUDED_NAME:
            self.progress.note("%s is not supported, skipping", name)
            self._skip(request)
            return
        if name in self.admitted:
            self.progress.note("%s has already been requested, skipping", name)
            self._skip(request)
            return

        self.admitted[name] = request.wait
        if is_debug_enabled(logger):
            logger.debug(
                "Request admitted",
                extra=extra_context(event="admit", component="dispatcher", package=name)
            )
        thread = threading.Thread(
            target=self._spawn, args=(request,), name=f"install-{name}", daemon=True
        )
        thread.start()

    @staticmethod
    def _skip(request: Request) -> None:
        request.dependency.succeeded = True
        request.wait.done()
