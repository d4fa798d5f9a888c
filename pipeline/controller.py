"""
Pipeline controller: composes camera, model handle, frame scheduler and overlay
renderer into one session with a single lifecycle and idempotent teardown.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, Protocol

import cv2
import numpy as np

from overlay.renderer import OverlayRenderer
from overlay.surface import DrawingSurface
from perception import create_handle
from perception.base import ModelHandle
from perception.results import InferenceResult
from perception.variants import Variant
from pipeline.capture import CameraSource
from pipeline.config import AppConfig
from pipeline.errors import (
    CameraPermissionError,
    ClosedError,
    ModelInitError,
    PipelineError,
)
from pipeline.model_loader import ModelStore
from pipeline.scheduler import FrameClock, FrameScheduler, SchedulerState
from pipeline.session import Session, SessionState
from pipeline.utils import FrameRateMeter, FrameStats

logger = logging.getLogger(__name__)


class FrameSink(Protocol):
    """Where composited frames go (the video view)."""

    def show_frame(self, frame_bgr: np.ndarray) -> None:
        ...

    def clear(self) -> None:
        ...


class TaskRunner(Protocol):
    """Runs blocking jobs off the GUI thread and reports back on it."""

    def submit(
        self,
        fn: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_failure: Callable[[BaseException], None],
    ) -> None:
        ...

    def shutdown(self) -> None:
        ...


class PipelineController:
    """
    Owns at most one Session at a time.

    start() acquires the camera and creates the model concurrently; stop() tears
    down in order: scheduler, model handle, camera, video sink. Switching variants
    is stop() followed by start().
    """

    def __init__(
        self,
        surface: DrawingSurface,
        sink: FrameSink,
        clock: FrameClock,
        tasks: TaskRunner,
        *,
        config: AppConfig | None = None,
        camera_factory: Callable[[int], CameraSource] = CameraSource,
        handle_factory: Callable[[Variant], ModelHandle] | None = None,
        renderer: OverlayRenderer | None = None,
        on_ready: Callable[[Variant], None] | None = None,
        on_error: Callable[[PipelineError], None] | None = None,
        on_loading: Callable[[bool], None] | None = None,
        on_stats: Callable[[FrameStats], None] | None = None,
    ) -> None:
        self._surface = surface
        self._sink = sink
        self._clock = clock
        self._tasks = tasks
        self._config = config or AppConfig()
        self._camera_factory = camera_factory
        if handle_factory is None:
            store = ModelStore(self._config.models_dir)
            handle_factory = partial(_create_handle, store=store)
        self._handle_factory = handle_factory
        self._renderer = renderer or OverlayRenderer()
        self._on_ready = on_ready
        self._on_error = on_error
        self._on_loading = on_loading
        self._on_stats = on_stats
        self._session: Session | None = None
        self._scheduler: FrameScheduler | None = None
        self._meter = FrameRateMeter()
        # A camera whose acquire() has not settled yet; the next one waits for it
        self._camera_in_flight = False
        self._deferred_camera: Session | None = None
        # Queued camera-only preview frame shown while the model is still loading
        self._preview_token: Any = None

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def scheduler(self) -> FrameScheduler | None:
        return self._scheduler

    def start(self, variant: Variant | str) -> Session:
        """Begin a new session; any current session is stopped first."""
        variant = Variant(variant)
        if self._session is not None and not self._session.closing:
            self.stop()
        session = Session(variant=variant, state=SessionState.INITIALIZING)
        self._session = session
        self._scheduler = FrameScheduler(
            session,
            self._clock,
            on_frame=partial(self._present, session),
            on_error=partial(self._on_loop_error, session),
            on_loop_started=partial(self._on_loop_started, session),
        )
        self._meter.reset()
        logger.info("Starting %s session", variant.value)
        self._set_loading(True)
        self._acquire_camera(session)
        self._tasks.submit(
            partial(self._handle_factory, variant),
            partial(self._on_model_created, session),
            partial(self._on_model_failed, session),
        )
        return session

    def stop(self) -> None:
        """Tear down the current session. Idempotent and safe from any state."""
        session = self._session
        if session is None or session.closing:
            return
        session.state = SessionState.CLOSING
        logger.info("Stopping %s session", session.variant.value)
        if self._scheduler is not None:
            self._scheduler.stop()
        self._stop_preview()
        handle, session.handle = session.handle, None
        if handle is not None:
            self._release("model handle", handle.close)
        if session.camera is not None:
            self._release("camera", session.camera.release)
        self._release("video sink", self._sink.clear)
        session.state = SessionState.CLOSED
        self._set_loading(False)

    def shutdown(self) -> None:
        """Stop the session and wait for background work (application exit)."""
        self.stop()
        self._tasks.shutdown()

    def _is_current(self, session: Session) -> bool:
        return session is self._session and not session.closing

    def _acquire_camera(self, session: Session) -> None:
        if self._camera_in_flight:
            # Never have two devices opening at once; wait for the previous acquire to settle
            self._deferred_camera = session
            return
        camera = self._camera_factory(self._config.camera_index)
        session.camera = camera
        self._camera_in_flight = True
        self._tasks.submit(
            camera.acquire,
            partial(self._on_camera_acquired, session),
            partial(self._on_camera_failed, session),
        )

    def _camera_settled(self) -> None:
        self._camera_in_flight = False
        deferred, self._deferred_camera = self._deferred_camera, None
        if deferred is not None and self._is_current(deferred) and not deferred.inert:
            self._acquire_camera(deferred)

    def _on_camera_acquired(self, session: Session, camera: CameraSource) -> None:
        self._camera_settled()
        if not self._is_current(session):
            camera.release()
            return
        session.camera_ready = True
        if self._scheduler is not None:
            self._scheduler.notify_has_data()
        self._start_preview(session)

    def _on_camera_failed(self, session: Session, error: BaseException) -> None:
        self._camera_settled()
        if isinstance(error, ClosedError) or not self._is_current(session):
            logger.debug("Ignoring camera result for closed session: %s", error)
            return
        if not isinstance(error, PipelineError):
            error = CameraPermissionError(str(error))
        self._fail(session, error)

    def _on_model_created(self, session: Session, handle: ModelHandle) -> None:
        if not self._is_current(session):
            logger.debug("Closing model handle created after session closed")
            self._release("late model handle", handle.close)
            return
        # Owned from here on so teardown closes it, even when the session is inert
        session.handle = handle
        if session.inert:
            return
        session.state = SessionState.READY
        self._set_loading(False)
        logger.info("%s model ready", session.variant.value)
        if self._on_ready is not None:
            self._on_ready(session.variant)
        if self._scheduler is not None:
            self._scheduler.notify_model_ready()

    def _on_model_failed(self, session: Session, error: BaseException) -> None:
        if not self._is_current(session):
            logger.debug("Ignoring model failure for closed session: %s", error)
            return
        if not isinstance(error, PipelineError):
            error = ModelInitError(str(error))
        self._fail(session, error)

    def _on_loop_started(self, session: Session) -> None:
        self._stop_preview()
        if self._is_current(session):
            session.state = SessionState.RUNNING

    def _on_loop_error(self, session: Session, error: Exception) -> None:
        if not self._is_current(session):
            return
        if not isinstance(error, PipelineError):
            error = PipelineError(f"Frame loop stopped: {error}")
        self._fail(session, error)

    def _fail(self, session: Session, error: PipelineError) -> None:
        """Terminal error: the session stays inert until the user reselects a variant."""
        if session.error is None:
            session.error = error
        logger.error("%s session failed: %s", session.variant.value, error)
        if self._scheduler is not None:
            self._scheduler.stop()
        self._stop_preview()
        # Nothing will be shown for an inert session; free the device now
        if session.camera is not None:
            self._release("camera", session.camera.release)
        session.camera_ready = False
        self._set_loading(False)
        if self._on_error is not None:
            self._on_error(error)

    def _present(self, session: Session, frame: np.ndarray, result: InferenceResult, timestamp_ms: int) -> None:
        if not self._is_current(session):
            return
        height, width = frame.shape[:2]
        self._renderer.render(result, (width, height), self._surface)
        # Show the camera mirrored, like a self-facing preview
        self._sink.show_frame(self._surface.composite(cv2.flip(frame, 1)))
        stats = self._meter.tick(timestamp_ms)
        if self._on_stats is not None:
            self._on_stats(stats)

    def _start_preview(self, session: Session) -> None:
        """Show the bare mirrored feed until the frame loop takes over."""
        if self._preview_token is not None or not self._previewing(session):
            return
        self._preview_token = self._clock.request_frame(partial(self._on_preview_frame, session))

    def _stop_preview(self) -> None:
        token, self._preview_token = self._preview_token, None
        if token is not None:
            self._clock.cancel_frame(token)

    def _previewing(self, session: Session) -> bool:
        return (
            self._is_current(session)
            and session.camera_ready
            and not session.inert
            and self._scheduler is not None
            and self._scheduler.state is SchedulerState.WAITING_FOR_FIRST_FRAME
        )

    def _on_preview_frame(self, session: Session, _frame_time_ms: float) -> None:
        self._preview_token = None
        if not self._previewing(session):
            return
        frame = session.camera.read() if session.camera is not None else None
        if frame is not None and frame.size:
            self._sink.show_frame(cv2.flip(frame, 1))
        self._start_preview(session)

    def _set_loading(self, loading: bool) -> None:
        if self._on_loading is not None:
            self._on_loading(loading)

    @staticmethod
    def _release(name: str, release: Callable[[], None]) -> None:
        try:
            release()
        except Exception:  # noqa: BLE001
            logger.exception("Failed to release %s", name)


def _create_handle(variant: Variant, store: ModelStore) -> ModelHandle:
    return create_handle(variant, store=store)
