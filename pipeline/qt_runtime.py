"""
Qt glue for the pipeline: a display-refresh clock built on single-shot QTimers and
a task runner that executes blocking jobs on QThreads and reports back on the GUI thread.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from PySide6.QtCore import QObject, QThread, QTimer, Signal, Slot

logger = logging.getLogger(__name__)


class QtFrameClock(QObject):
    """Calls back on the GUI thread after interval_ms with time.perf_counter() in ms."""

    def __init__(self, interval_ms: int = 16, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._interval_ms = interval_ms
        self._timers: dict[int, QTimer] = {}
        self._next_token = 0

    def request_frame(self, callback: Callable[[float], None]) -> int:
        token = self._next_token
        self._next_token += 1
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.setInterval(self._interval_ms)
        timer.timeout.connect(lambda: self._fire(token, callback))
        self._timers[token] = timer
        timer.start()
        return token

    def cancel_frame(self, token: int) -> None:
        timer = self._timers.pop(token, None)
        if timer is not None:
            timer.stop()
            timer.deleteLater()

    def _fire(self, token: int, callback: Callable[[float], None]) -> None:
        timer = self._timers.pop(token, None)
        if timer is None:
            return
        timer.deleteLater()
        callback(time.perf_counter() * 1000.0)


class _TaskWorker(QObject):
    """Runs one blocking callable in a background thread."""

    # token, success, result or exception
    done = Signal(int, bool, object)

    def __init__(self, token: int, fn: Callable[[], Any]) -> None:
        super().__init__()
        self._token = token
        self._fn = fn

    def run(self) -> None:
        try:
            value = self._fn()
        except Exception as e:  # noqa: BLE001
            self.done.emit(self._token, False, e)
            return
        self.done.emit(self._token, True, value)


class QtTaskRunner(QObject):
    """Submit blocking jobs; on_success/on_failure are invoked on this object's (GUI) thread."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._jobs: dict[int, tuple[QThread, _TaskWorker, Callable[[Any], None], Callable[[BaseException], None]]] = {}
        self._next_token = 0

    def submit(
        self,
        fn: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_failure: Callable[[BaseException], None],
    ) -> None:
        token = self._next_token
        self._next_token += 1
        worker = _TaskWorker(token, fn)
        thread = QThread()
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.done.connect(self._on_done)
        self._jobs[token] = (thread, worker, on_success, on_failure)
        thread.start()

    @Slot(int, bool, object)
    def _on_done(self, token: int, success: bool, payload: object) -> None:
        job = self._jobs.pop(token, None)
        if job is None:
            return
        thread, _worker, on_success, on_failure = job
        thread.quit()
        thread.wait(2000)
        if success:
            on_success(payload)
        else:
            on_failure(payload)  # type: ignore[arg-type]

    def shutdown(self, timeout_ms: int = 2000) -> None:
        """Wait for running jobs; their callbacks are dropped."""
        for token, (thread, _worker, _ok, _fail) in list(self._jobs.items()):
            thread.quit()
            if thread.wait(timeout_ms):
                del self._jobs[token]
            else:
                logger.warning("Background task %d still running at shutdown", token)
