# webservice/core/fetch/dispatch.py
"""
Execution contexts for completion callbacks.

A dispatcher is any `Callable[[Callable[[], None]], None]`: it takes a thunk
and arranges for it to run somewhere. The fetcher posts success completions to
its designated "main" dispatcher so callers can touch UI-owned state without
their own locking.
"""

from __future__ import annotations

import asyncio
import logging
import queue
import threading
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)

Thunk = Callable[[], None]
Dispatcher = Callable[[Thunk], None]


def inline_dispatcher(fn: Thunk) -> None:
    """Run on whatever thread is current (the transport's callback thread)."""
    fn()


class MainQueueDispatcher:
    """
    Thread-safe mailbox drained by one designated thread.

    Any thread may post; only the owner should call `drain` / `run_until`.
    This stands in for a UI run loop.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[Thunk] = queue.SimpleQueue()
        self.thread_id: int = threading.get_ident()

    def __call__(self, fn: Thunk) -> None:
        self._queue.put(fn)

    def bind_current_thread(self) -> None:
        self.thread_id = threading.get_ident()

    def drain(self) -> int:
        """Run everything queued right now. Returns how many thunks ran."""
        ran = 0
        while True:
            try:
                fn = self._queue.get_nowait()
            except queue.Empty:
                return ran
            self._run(fn)
            ran += 1

    def run_until(self, predicate: Callable[[], bool], timeout: float | None = None) -> bool:
        """Pump the mailbox until `predicate()` holds or `timeout` elapses."""
        deadline = None if timeout is None else time.monotonic() + timeout
        while not predicate():
            remaining = None if deadline is None else deadline - time.monotonic()
            if remaining is not None and remaining <= 0:
                return False
            try:
                fn = self._queue.get(timeout=0.05 if remaining is None else min(remaining, 0.05))
            except queue.Empty:
                continue
            self._run(fn)
        return True

    @staticmethod
    def _run(fn: Thunk) -> None:
        try:
            fn()
        except Exception:  # noqa: BLE001
            # a broken callback must not stop the run loop
            logger.exception("main-context callback raised")


class LoopDispatcher:
    """Post thunks onto an asyncio event loop from any thread."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self.loop = loop

    def __call__(self, fn: Thunk) -> None:
        self.loop.call_soon_threadsafe(fn)


__all__ = ["Thunk", "Dispatcher", "inline_dispatcher", "MainQueueDispatcher", "LoopDispatcher"]
