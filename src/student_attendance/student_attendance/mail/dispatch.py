from __future__ import annotations

import queue
import threading
from concurrent.futures import Future
from typing import Callable, Optional, Protocol, TypeVar

T = TypeVar("T")


class Dispatcher(Protocol):
    """Runs a collection mutation on the context that owns the collections."""

    def invoke(self, fn: Callable[[], T]) -> T:
        raise NotImplementedError


class InlineDispatcher(Dispatcher):
    """Runs calls on the caller's thread (the repository lock does the rest)."""

    def invoke(self, fn: Callable[[], T]) -> T:
        return fn()


class OwnerThreadDispatcher(Dispatcher):
    """Marshals calls from worker threads onto one owner thread.

    The owner thread must call ``run_pending`` regularly. ``invoke`` blocks
    the worker until the owner has run the call and hands back its result
    or exception. Calls made on the owner thread itself run immediately.
    """

    def __init__(self, owner: Optional[threading.Thread] = None):
        self._owner_ident = (owner or threading.current_thread()).ident
        self._calls: "queue.Queue[tuple[Callable[[], object], Future]]" = queue.Queue()

    def invoke(self, fn: Callable[[], T], timeout: Optional[float] = None) -> T:
        if threading.get_ident() == self._owner_ident:
            return fn()

        future: Future = Future()
        self._calls.put((fn, future))
        return future.result(timeout)

    def run_pending(self) -> int:
        """Run queued calls; returns how many ran."""
        ran = 0
        while True:
            try:
                fn, future = self._calls.get_nowait()
            except queue.Empty:
                return ran
            if not future.set_running_or_notify_cancel():
                continue
            try:
                future.set_result(fn())
            except Exception as e:
                future.set_exception(e)
            ran += 1
