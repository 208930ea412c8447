"""Deadline-bound execution of zero-argument work on a fixed worker pool."""
from __future__ import annotations

import ctypes
import logging
import queue
import threading
from concurrent.futures import Future, wait
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Set, Union

from .errors import SessionClosedError, TaskInterrupted
from .models import DEFAULT_MAX_WORKERS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Completed:
    value: Any


@dataclass(frozen=True)
class Cancelled:
    """The deadline passed. The task may still be running in the background."""

    timeout: float


@dataclass(frozen=True)
class Raised:
    """The work itself raised ``cause``."""

    cause: BaseException


Outcome = Union[Completed, Cancelled, Raised]


@dataclass
class _WorkItem:
    future: Future
    work: Callable[[], Any]


class BoundedExecutor:
    """Fixed-width pool of daemon worker threads with deadline-bound waits.

    Cancellation is advisory. A task still queued at its deadline is
    cancelled; a running task is interrupted best-effort by raising
    ``TaskInterrupted`` inside its worker thread. Code blocked in a C call
    keeps running until the call returns, and side effects are never undone.
    Workers stuck on abandoned tasks do not count against ``max_workers``,
    so later submissions still find a free worker.
    """

    def __init__(
        self,
        max_workers: int = DEFAULT_MAX_WORKERS,
        *,
        interrupt_on_timeout: bool = True,
        thread_name_prefix: str = "methodcheck",
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be positive")
        self._max_workers = max_workers
        self._interrupt_on_timeout = interrupt_on_timeout
        self._prefix = thread_name_prefix
        self._queue: "queue.SimpleQueue[Optional[_WorkItem]]" = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._idle = threading.Semaphore(0)
        self._workers: List[threading.Thread] = []
        self._running: Dict[Future, int] = {}
        self._abandoned: Set[Future] = set()
        self._shutdown = False

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @property
    def closed(self) -> bool:
        return self._shutdown

    @property
    def stalled(self) -> int:
        """Workers still busy with abandoned tasks."""

        with self._lock:
            return len(self._abandoned)

    def submit(self, work: Callable[[], Any]) -> Future:
        """Queue ``work``; never blocks the caller."""

        with self._lock:
            if self._shutdown:
                raise SessionClosedError("Cannot submit work after the executor was shut down")
            future: Future = Future()
            self._queue.put(_WorkItem(future, work))
            self._adjust_worker_count()
        return future

    def await_result(self, future: Future, timeout: float) -> Outcome:
        """Wait up to ``timeout`` seconds and classify the task's outcome."""

        done, _ = wait((future,), timeout=timeout)
        if not done:
            logger.warning("task did not finish within %.2fs; abandoning it", timeout)
            self.abandon(future)
            return Cancelled(timeout)
        if future.cancelled():
            return Cancelled(timeout)
        exc = future.exception()
        if exc is not None:
            return Raised(exc)
        return Completed(future.result())

    def abandon(self, future: Future) -> None:
        """Stop caring about ``future``: cancel it, or interrupt it if running."""

        if future.cancel():
            return
        with self._lock:
            ident = self._running.get(future)
            if ident is None or future in self._abandoned:
                return
            self._abandoned.add(future)
            if self._interrupt_on_timeout:
                _interrupt(ident)

    def shutdown(self) -> None:
        """Release the pool; idempotent and never waits for running work."""

        with self._lock:
            if self._shutdown:
                return
            self._shutdown = True
            while True:
                try:
                    item = self._queue.get_nowait()
                except queue.Empty:
                    break
                if item is not None:
                    item.future.cancel()
            for _ in self._workers:
                self._queue.put(None)
            stalled = len(self._abandoned)
        if stalled:
            logger.warning("%d abandoned task(s) still running at shutdown", stalled)

    def __enter__(self) -> "BoundedExecutor":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def _adjust_worker_count(self) -> None:
        if self._idle.acquire(timeout=0):
            return
        if len(self._workers) - len(self._abandoned) >= self._max_workers:
            return
        thread = threading.Thread(
            target=self._worker,
            name=f"{self._prefix}-{len(self._workers)}",
            daemon=True,
        )
        thread.start()
        self._workers.append(thread)

    def _worker(self) -> None:
        while True:
            item = self._queue.get()
            if item is None:
                return
            try:
                self._run(item)
            except TaskInterrupted:
                # interrupt landed after the task had left its own code
                self._settle(item.future, exc=TaskInterrupted())
                self._release(item.future)
            self._idle.release()

    def _run(self, item: _WorkItem) -> None:
        future = item.future
        with self._lock:
            if not future.set_running_or_notify_cancel():
                return
            self._running[future] = threading.get_ident()
        try:
            try:
                result = item.work()
            except BaseException as exc:
                self._settle(future, exc=exc)
            else:
                self._settle(future, result=result)
        finally:
            self._release(future)

    def _release(self, future: Future) -> None:
        with self._lock:
            self._running.pop(future, None)
            if future in self._abandoned:
                self._abandoned.discard(future)
                if self._interrupt_on_timeout:
                    _clear_interrupt(threading.get_ident())

    @staticmethod
    def _settle(future: Future, *, result: Any = None, exc: Optional[BaseException] = None) -> None:
        if future.done():
            return
        if exc is not None:
            future.set_exception(exc)
        else:
            future.set_result(result)


def _interrupt(thread_id: int) -> None:
    """Raise ``TaskInterrupted`` asynchronously in a CPython thread."""

    pythonapi = getattr(ctypes, "pythonapi", None)
    if pythonapi is None:
        logger.warning("asynchronous interrupts are unavailable on this interpreter")
        return
    affected = pythonapi.PyThreadState_SetAsyncExc(ctypes.c_ulong(thread_id), ctypes.py_object(TaskInterrupted))
    if affected > 1:
        pythonapi.PyThreadState_SetAsyncExc(ctypes.c_ulong(thread_id), None)
        logger.error("interrupt reached %d threads; reverted", affected)
    elif affected == 1:
        logger.debug("interrupted worker thread %d", thread_id)


def _clear_interrupt(thread_id: int) -> None:
    pythonapi = getattr(ctypes, "pythonapi", None)
    if pythonapi is not None:
        pythonapi.PyThreadState_SetAsyncExc(ctypes.c_ulong(thread_id), None)
