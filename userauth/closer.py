"""Run registered shutdown callbacks exactly once, concurrently."""

from __future__ import annotations

import logging
import signal
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable

logger = logging.getLogger(__name__)

CloseFunc = Callable[[], object]


class Closer:
    """Collects shutdown callbacks and runs them all once.

    When signals are given, the first of them to arrive triggers ``close_all``.
    """

    def __init__(self, *signals: signal.Signals) -> None:
        self._lock = threading.Lock()
        self._once_lock = threading.Lock()
        self._closed = False
        self._done = threading.Event()
        self._funcs: list[CloseFunc] = []
        self._previous_handlers: dict[int, object] = {}
        for sig in signals:
            self._previous_handlers[sig] = signal.signal(sig, self._on_signal)

    def _on_signal(self, signum, frame) -> None:
        for sig, handler in self._previous_handlers.items():
            signal.signal(sig, handler)
        self._previous_handlers.clear()
        threading.Thread(target=self.close_all, daemon=True).start()

    def add(self, *funcs: CloseFunc) -> None:
        """Register callbacks to run on close."""
        with self._lock:
            self._funcs.extend(funcs)

    def wait(self) -> None:
        """Block until ``close_all`` has finished."""
        self._done.wait()

    def close_all(self) -> list[BaseException]:
        """Run every registered callback once; return the errors they raised."""
        with self._once_lock:
            if self._closed:
                return []
            self._closed = True
            try:
                with self._lock:
                    funcs, self._funcs = self._funcs, []
                errors = _run_concurrently(funcs)
            finally:
                self._done.set()
        return errors


def _run_concurrently(funcs: list[CloseFunc]) -> list[BaseException]:
    if not funcs:
        return []
    errors: list[BaseException] = []
    with ThreadPoolExecutor(max_workers=len(funcs)) as pool:
        futures = [pool.submit(func) for func in funcs]
        for future in as_completed(futures):
            error = future.exception()
            if error is not None:
                logger.error("error returned from Closer: %s", error)
                errors.append(error)
    return errors


_global_closer = Closer()


def add(*funcs: CloseFunc) -> None:
    """Register callbacks with the process-wide closer."""
    _global_closer.add(*funcs)


def wait() -> None:
    """Wait for the process-wide closer to finish."""
    _global_closer.wait()


def close_all() -> list[BaseException]:
    """Close the process-wide closer."""
    return _global_closer.close_all()