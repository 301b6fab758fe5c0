from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..core.constants import DEFAULT_POLL_SECONDS
from .model import IngestionResult
from .service import MailIngestionService

logger = logging.getLogger(__name__)


class MailPoller:
    """Background worker: checks mail on every tick or explicit trigger.

    Ticks and triggers both end up in ``MailIngestionService.check_mail``,
    so they share its single-flight guard. A trigger that arrives while a
    run is in progress is dropped, not queued. ``stop`` keeps the worker from
    starting new runs; a run already underway is left to finish.
    """

    def __init__(
        self,
        service: MailIngestionService,
        *,
        interval_seconds: float = DEFAULT_POLL_SECONDS,
        on_result: Optional[Callable[[IngestionResult], None]] = None,
    ):
        self._service = service
        self._interval = float(interval_seconds)
        self._on_result = on_result
        self._wakeup = threading.Event()
        self._stopping = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_alive and not self._stopping.is_set():
            return

        if self._thread is not None or self._stopping.is_set():
            # a stopped worker that is still finishing keeps its own events
            self._wakeup = threading.Event()
            self._stopping = threading.Event()
        self._thread = threading.Thread(
            target=self._worker,
            args=(self._wakeup, self._stopping),
            name="mail-poller",
            daemon=True,
        )
        self._thread.start()
        logger.info("Mail poller started (every %.0f s)", self._interval)

    def trigger(self) -> None:
        if self._service.is_running:
            logger.info("Mail check already in progress, trigger ignored")
            return
        self._wakeup.set()

    def stop(self, *, wait: bool = False, timeout: Optional[float] = None) -> None:
        self._stopping.set()
        self._wakeup.set()
        if wait and self._thread is not None:
            self._thread.join(timeout)

    def _worker(self, wakeup: threading.Event, stopping: threading.Event) -> None:
        while not stopping.is_set():
            wakeup.wait(self._interval)
            wakeup.clear()
            if stopping.is_set():
                break

            result = self._service.check_mail()
            # triggers that raced with the run are not carried over
            wakeup.clear()
            if self._on_result is not None:
                try:
                    self._on_result(result)
                except Exception:
                    logger.exception("Mail result callback failed")
        logger.info("Mail poller stopped")
