from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

import numpy as np
import pytest

from overlay.surface import DrawingSurface
from perception.base import ModelHandle
from perception.results import Detections
from perception.variants import Variant
from pipeline.capture import CameraSource
from pipeline.controller import PipelineController


class CaptureRegistry:
    """Factory for FakeCapture that tracks how many devices are open at once."""

    def __init__(self, opened: bool = True, deliver: bool = True, shape=(480, 640, 3)):
        self.opened = opened
        self.deliver = deliver
        self.shape = shape
        self.live = 0
        self.max_live = 0
        self.created: list[FakeCapture] = []
        self.on_open: Callable[[], None] | None = None
        self.events: list[str] | None = None
        # Served instead of a black frame when set
        self.frame: np.ndarray | None = None

    def __call__(self, index: int) -> FakeCapture:
        cap = FakeCapture(self)
        self.created.append(cap)
        if self.on_open is not None:
            self.on_open()
        return cap


class FakeCapture:
    """Stands in for cv2.VideoCapture."""

    def __init__(self, registry: CaptureRegistry):
        self._r = registry
        self._open = registry.opened
        self.release_calls = 0
        if self._open:
            registry.live += 1
            registry.max_live = max(registry.max_live, registry.live)

    def isOpened(self):
        return self._open

    def read(self):
        if not self._open or not self._r.deliver:
            return False, None
        if self._r.frame is not None:
            return True, self._r.frame.copy()
        return True, np.zeros(self._r.shape, dtype=np.uint8)

    def release(self):
        self.release_calls += 1
        if self._open:
            self._open = False
            self._r.live -= 1
            if self._r.events is not None:
                self._r.events.append("camera")


class ManualClock:
    """Frame clock driven by the test: advance() fires every queued callback once."""

    def __init__(self):
        self.pending: dict[int, Callable[[float], None]] = {}
        self.now_ms = 0.0
        self.requests = 0
        self.max_pending = 0
        self._next = 0

    def request_frame(self, callback):
        token = self._next
        self._next += 1
        self.pending[token] = callback
        self.requests += 1
        self.max_pending = max(self.max_pending, len(self.pending))
        return token

    def cancel_frame(self, token):
        self.pending.pop(token, None)

    def fire(self, frame_time_ms: float) -> None:
        self.now_ms = frame_time_ms
        pending, self.pending = self.pending, {}
        for callback in pending.values():
            callback(frame_time_ms)

    def advance(self, ms: float = 16.0, frames: int = 1) -> None:
        for _ in range(frames):
            self.fire(self.now_ms + ms)


@dataclass
class Job:
    fn: Callable[[], Any]
    on_success: Callable[[Any], None]
    on_failure: Callable[[BaseException], None]

    @property
    def is_camera(self) -> bool:
        return isinstance(getattr(self.fn, "__self__", None), CameraSource)

    def run(self) -> None:
        try:
            value = self.fn()
        except Exception as e:
            self.on_failure(e)
            return
        self.on_success(value)


class ManualTaskRunner:
    """Queues background jobs; the test decides when (and in which order) they complete."""

    def __init__(self):
        self.jobs: list[Job] = []
        self.shut_down = False

    def submit(self, fn, on_success, on_failure):
        self.jobs.append(Job(fn, on_success, on_failure))

    def _run_where(self, predicate) -> None:
        while True:
            job = next((j for j in self.jobs if predicate(j)), None)
            if job is None:
                return
            self.jobs.remove(job)
            job.run()

    def run_camera_jobs(self) -> None:
        self._run_where(lambda j: j.is_camera)

    def run_model_jobs(self) -> None:
        self._run_where(lambda j: not j.is_camera)

    def run_all(self) -> None:
        self._run_where(lambda j: True)

    def shutdown(self):
        self.shut_down = True


class FakeTask:
    def __init__(self, events: list[str] | None = None):
        self.close_calls = 0
        self._events = events

    def close(self):
        self.close_calls += 1
        if self._events is not None:
            self._events.append("model")


class FakeHandle(ModelHandle):
    variant = Variant.OBJECT_DETECTION
    events: list[str] | None = None

    def __init__(self, settings):
        super().__init__(settings)
        self.timestamps: list[int] = []
        self.result: Any = Detections()
        self.error: Exception | None = None

    @staticmethod
    def default_settings():
        return {"score_threshold": 0.5}

    def _open(self, store):
        return FakeTask(self.events)

    @staticmethod
    def _to_image(frame_bgr):
        return frame_bgr

    def _infer(self, image, timestamp_ms):
        self.timestamps.append(timestamp_ms)
        if self.error is not None:
            raise self.error
        return self.result


class HandleFactory:
    """handle_factory for the controller; records every handle it creates."""

    def __init__(self):
        self.handles: list[FakeHandle] = []
        self.result: Any = Detections()
        self.error: Exception | None = None
        self.events: list[str] | None = None

    def __call__(self, variant):
        if self.error is not None:
            raise self.error
        handle = FakeHandle.create()
        handle.variant = variant
        handle.result = self.result
        handle._task._events = self.events
        self.handles.append(handle)
        return handle

    @property
    def open_count(self) -> int:
        return sum(1 for h in self.handles if h.is_open)


class RecordingSurface(DrawingSurface):
    """Records draw calls in device coordinates."""

    def __init__(self):
        super().__init__()
        self.ops: list[tuple] = []

    def drawn(self, kind: str) -> list[tuple]:
        return [op for op in self.ops if op[0] == kind]

    def _allocate(self, width, height):
        self.ops.append(("resize", width, height))

    def _clear(self):
        self.ops.append(("clear",))

    def _line(self, p1, p2, color, width):
        self.ops.append(("line", p1, p2, color, width))

    def _circle(self, center, radius, color):
        self.ops.append(("circle", center, radius, color))

    def _rect(self, x, y, w, h, color, width):
        self.ops.append(("rect", x, y, w, h, color, width))

    def _text(self, text, origin, color, font_px):
        self.ops.append(("text", text, origin, color, font_px, self.is_mirrored))

    def composite(self, frame_bgr):
        return frame_bgr.copy()


class RecordingSink:
    def __init__(self):
        self.frames: list[np.ndarray] = []
        self.clears = 0
        self.events: list[str] | None = None

    def show_frame(self, frame_bgr):
        self.frames.append(frame_bgr)

    def clear(self):
        self.clears += 1
        if self.events is not None:
            self.events.append("sink")


@dataclass
class Harness:
    controller: PipelineController
    surface: RecordingSurface
    sink: RecordingSink
    clock: ManualClock
    tasks: ManualTaskRunner
    captures: CaptureRegistry
    handles: HandleFactory
    ready: list = field(default_factory=list)
    errors: list = field(default_factory=list)
    loading: list = field(default_factory=list)
    stats: list = field(default_factory=list)

    def resolve_all(self) -> None:
        self.tasks.run_all()


@pytest.fixture
def captures():
    return CaptureRegistry()


@pytest.fixture
def harness(captures):
    surface = RecordingSurface()
    sink = RecordingSink()
    clock = ManualClock()
    tasks = ManualTaskRunner()
    handles = HandleFactory()
    h = Harness(
        controller=None,  # type: ignore[arg-type]
        surface=surface,
        sink=sink,
        clock=clock,
        tasks=tasks,
        captures=captures,
        handles=handles,
    )
    h.controller = PipelineController(
        surface,
        sink,
        clock,
        tasks,
        camera_factory=lambda index: CameraSource(index, capture_factory=captures),
        handle_factory=handles,
        on_ready=h.ready.append,
        on_error=h.errors.append,
        on_loading=h.loading.append,
        on_stats=h.stats.append,
    )
    return h
