"""Ordered diagnostics channel owned by a scraper instance.

Producers only enqueue; a single consumer thread timestamps messages in the
order they were posted, records them in the history and, when verbose,
echoes them through the standard logger.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from queue import Queue
from typing import List

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
_STOP = object()


class DiagnosticsLog:
    """Multi-producer, single-consumer message log with a timestamped history."""

    def __init__(self, verbose: bool = True) -> None:
        self._verbose = verbose
        self._queue: Queue = Queue()
        self._history: List[str] = []
        self._history_lock = threading.Lock()
        self._closed = False
        # orders log/close so nothing is enqueued behind the stop marker
        self._state_lock = threading.Lock()
        self._worker = threading.Thread(target=self._consume, name="xtract-diagnostics", daemon=True)
        self._worker.start()

    @property
    def verbose(self) -> bool:
        return self._verbose

    def set_verbose(self, enabled: bool) -> None:
        self._verbose = enabled

    def log(self, message: str) -> None:
        with self._state_lock:
            if not self._closed:
                self._queue.put(message)
                return
        logger.debug("Diagnostics closed, dropping: %s", message)

    def flush(self) -> None:
        """Block until every message posted so far has been processed."""
        if self._worker.is_alive():
            self._queue.join()

    def history(self) -> List[str]:
        self.flush()
        with self._history_lock:
            return list(self._history)

    def close(self) -> None:
        with self._state_lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_STOP)
        self._worker.join()

    def _consume(self) -> None:
        while True:
            message = self._queue.get()
            try:
                if message is _STOP:
                    return
                stamped = f"{datetime.now().strftime(TIMESTAMP_FORMAT)} - {message}"
                with self._history_lock:
                    self._history.append(stamped)
                if self._verbose:
                    logger.info("%s", stamped)
            finally:
                self._queue.task_done()


__all__ = ["DiagnosticsLog", "TIMESTAMP_FORMAT"]
