from __future__ import annotations

from collections.abc import Callable
from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot
from loguru import logger


class _TaskRelay(QObject):
    """Carries a task's result back to the UI thread.

    Lives in the thread that submitted the task, so emissions from the pool
    thread are delivered as queued calls.
    """

    succeeded = Signal(object)
    failed = Signal(object)

    def __init__(
        self,
        on_success: Callable[[Any], None],
        on_error: Callable[[Exception], None],
        on_done: Callable[[_TaskRelay], None],
    ) -> None:
        super().__init__()
        self._on_success = on_success
        self._on_error = on_error
        self._on_done = on_done
        self.succeeded.connect(self._deliver_success)
        self.failed.connect(self._deliver_error)

    @Slot(object)
    def _deliver_success(self, result: Any) -> None:
        try:
            self._on_success(result)
        finally:
            self._on_done(self)

    @Slot(object)
    def _deliver_error(self, error: Any) -> None:
        try:
            self._on_error(error)
        finally:
            self._on_done(self)


class _Task(QRunnable):
    """QRunnable executing `job` on a pool thread."""

    def __init__(self, job: Callable[[], Any], relay: _TaskRelay) -> None:
        super().__init__()
        self._job = job
        self._relay = relay

    def run(self) -> None:  # type: ignore[override]
        try:
            result = self._job()
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.debug("Background task failed: {}", ex)
            self._relay.failed.emit(ex)
            return
        self._relay.succeeded.emit(result)


class QtTaskRunner:
    """Dispatches jobs to a thread pool (global by default); callbacks run on the UI thread."""

    def __init__(self, pool: QThreadPool | None = None) -> None:
        self._pool = pool or QThreadPool.globalInstance()
        # Relays must outlive their task until delivery
        self._pending: set[_TaskRelay] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def submit(
        self,
        job: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_error: Callable[[Exception], None],
    ) -> None:
        relay = _TaskRelay(on_success, on_error, self._pending.discard)
        self._pending.add(relay)
        self._pool.start(_Task(job, relay))
