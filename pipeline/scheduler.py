"""
Frame scheduler: a self-pacing per-frame loop.

The next frame is requested only after the current inference and render have
finished, so at most one infer() call is ever outstanding and the loop runs at
inference throughput rather than display refresh rate.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Protocol

from pipeline.errors import ClosedError, FrameError

if TYPE_CHECKING:
    import numpy as np
    from perception.results import InferenceResult
    from pipeline.session import Session

logger = logging.getLogger(__name__)


class FrameClock(Protocol):
    """Display-refresh style clock: callbacks receive a monotonic frame time in ms."""

    def request_frame(self, callback: Callable[[float], None]) -> Any:
        ...

    def cancel_frame(self, token: Any) -> None:
        ...


class SchedulerState(Enum):
    WAITING_FOR_FIRST_FRAME = "waiting_for_first_frame"
    LOOPING = "looping"
    STOPPED = "stopped"


class FrameScheduler:
    """
    Drives infer + render for one session.

    The loop starts once both the camera has data and the model is ready, in
    either order. STOPPED is terminal; a queued callback that fires after stop()
    does nothing.
    """

    def __init__(
        self,
        session: Session,
        clock: FrameClock,
        on_frame: Callable[[np.ndarray, InferenceResult, int], None],
        on_error: Callable[[Exception], None] | None = None,
        on_loop_started: Callable[[], None] | None = None,
    ) -> None:
        self._session = session
        self._clock = clock
        self._on_frame = on_frame
        self._on_error = on_error
        self._on_loop_started = on_loop_started
        self._state = SchedulerState.WAITING_FOR_FIRST_FRAME
        self._has_data = False
        self._model_ready = False
        self._pending: Any = None
        self._last_timestamp_ms: int | None = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def last_timestamp_ms(self) -> int | None:
        return self._last_timestamp_ms

    def notify_has_data(self) -> None:
        """The camera delivered its first frame."""
        self._has_data = True
        self._maybe_start()

    def notify_model_ready(self) -> None:
        """The session's model handle is open."""
        self._model_ready = True
        self._maybe_start()

    def stop(self) -> None:
        """Enter STOPPED and cancel the queued frame. Idempotent."""
        if self._state is SchedulerState.STOPPED:
            return
        self._state = SchedulerState.STOPPED
        if self._pending is not None:
            self._clock.cancel_frame(self._pending)
            self._pending = None
        logger.debug("Frame loop stopped for %s", self._session.variant.value)

    def _maybe_start(self) -> None:
        if self._state is not SchedulerState.WAITING_FOR_FIRST_FRAME:
            return
        if not (self._has_data and self._model_ready):
            return
        self._state = SchedulerState.LOOPING
        logger.info("Frame loop started for %s", self._session.variant.value)
        if self._on_loop_started is not None:
            self._on_loop_started()
        self._request_next()

    def _request_next(self) -> None:
        self._pending = self._clock.request_frame(self._on_frame_time)

    def _next_timestamp(self, frame_time_ms: float) -> int:
        # Video-mode models reject repeated timestamps; whole-ms clock values can repeat
        timestamp_ms = int(frame_time_ms)
        if self._last_timestamp_ms is not None and timestamp_ms <= self._last_timestamp_ms:
            timestamp_ms = self._last_timestamp_ms + 1
        self._last_timestamp_ms = timestamp_ms
        return timestamp_ms

    def _on_frame_time(self, frame_time_ms: float) -> None:
        self._pending = None
        # Cancelling a queued callback is best effort; re-check on every fire
        if self._state is not SchedulerState.LOOPING:
            return
        try:
            self._tick(frame_time_ms)
        except ClosedError as e:
            logger.debug("Model closed, frame loop ends: %s", e)
            self.stop()
            return
        except FrameError as e:
            logger.debug("Skipping frame: %s", e)
        except Exception as e:  # noqa: BLE001
            logger.exception("Frame loop failed for %s", self._session.variant.value)
            self.stop()
            self._report_error(e)
            return
        if self._state is SchedulerState.LOOPING:
            self._request_next()

    def _report_error(self, error: Exception) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(error)
        except Exception:  # noqa: BLE001
            logger.exception("Error handler failed for %s", self._session.variant.value)

    def _tick(self, frame_time_ms: float) -> None:
        handle = self._session.handle
        if handle is None or not handle.is_open:
            raise ClosedError("model handle is not open")
        camera = self._session.camera
        frame = camera.read() if camera is not None else None
        if frame is None:
            raise FrameError("no frame available")
        height, width = frame.shape[:2]
        if not width or not height:
            raise FrameError(f"frame has zero dimensions ({width}x{height})")
        timestamp_ms = self._next_timestamp(frame_time_ms)
        result = handle.infer(frame, timestamp_ms)
        if self._state is not SchedulerState.LOOPING:
            return
        self._on_frame(frame, result, timestamp_ms)
