import pytest

from perception.results import Detections
from perception.variants import Variant
from pipeline.capture import CameraSource
from pipeline.scheduler import FrameScheduler, SchedulerState
from pipeline.session import Session
from tests.conftest import CaptureRegistry, FakeHandle, ManualClock


@pytest.fixture
def session(captures):
    camera = CameraSource(0, capture_factory=captures)
    camera.acquire()
    return Session(variant=Variant.OBJECT_DETECTION, camera=camera, handle=FakeHandle.create())


class Loop:
    def __init__(self, session):
        self.clock = ManualClock()
        self.frames = []
        self.errors = []
        self.started = 0
        self.scheduler = FrameScheduler(
            session,
            self.clock,
            on_frame=lambda frame, result, ts: self.frames.append((frame.shape, result, ts)),
            on_error=self.errors.append,
            on_loop_started=self._started,
        )

    def _started(self):
        self.started += 1

    def start(self):
        self.scheduler.notify_has_data()
        self.scheduler.notify_model_ready()


@pytest.mark.parametrize("order", ["camera_first", "model_first"])
def test_loop_starts_only_after_both_signals(session, order):
    loop = Loop(session)
    first, second = (
        (loop.scheduler.notify_has_data, loop.scheduler.notify_model_ready)
        if order == "camera_first"
        else (loop.scheduler.notify_model_ready, loop.scheduler.notify_has_data)
    )
    first()
    assert loop.scheduler.state is SchedulerState.WAITING_FOR_FIRST_FRAME
    assert loop.clock.requests == 0
    second()
    assert loop.scheduler.state is SchedulerState.LOOPING
    assert loop.clock.requests == 1
    assert loop.started == 1


def test_frames_rendered_with_result_and_timestamp(session):
    loop = Loop(session)
    loop.start()
    loop.clock.advance(16.0, frames=3)
    assert [f[2] for f in loop.frames] == [16, 32, 48]
    assert all(f[0] == (480, 640, 3) for f in loop.frames)
    assert all(isinstance(f[1], Detections) for f in loop.frames)


def test_timestamps_strictly_increase_even_when_clock_repeats(session):
    loop = Loop(session)
    loop.start()
    for t in (16.2, 16.7, 16.9, 10.0, 50.0, 50.4):
        loop.clock.fire(t)
    assert session.handle.timestamps == [16, 17, 18, 19, 50, 51]
    assert loop.scheduler.last_timestamp_ms == 51


def test_at_most_one_frame_queued(session):
    loop = Loop(session)
    loop.start()
    loop.clock.advance(frames=10)
    assert loop.clock.max_pending == 1
    assert len(loop.clock.pending) == 1


def test_stop_cancels_queued_frame(session):
    loop = Loop(session)
    loop.start()
    loop.scheduler.stop()
    assert loop.scheduler.state is SchedulerState.STOPPED
    assert loop.clock.pending == {}
    loop.scheduler.stop()


def test_callback_firing_after_stop_is_noop(session):
    loop = Loop(session)
    loop.start()
    (late_callback,) = loop.clock.pending.values()
    loop.scheduler.stop()
    late_callback(100.0)
    assert session.handle.timestamps == []
    assert loop.frames == []
    assert loop.clock.pending == {}


def test_stopped_is_terminal(session):
    loop = Loop(session)
    loop.scheduler.stop()
    loop.start()
    assert loop.scheduler.state is SchedulerState.STOPPED
    assert loop.clock.requests == 0


def test_missing_frame_skips_tick_and_retries():
    captures = CaptureRegistry()
    camera = CameraSource(0, capture_factory=captures)
    camera.acquire()
    session = Session(variant=Variant.OBJECT_DETECTION, camera=camera, handle=FakeHandle.create())
    loop = Loop(session)
    loop.start()
    loop.clock.advance()  # served from the frame read during acquisition
    captures.deliver = False
    loop.clock.advance(frames=3)
    assert len(loop.frames) == 1
    assert len(loop.clock.pending) == 1
    captures.deliver = True
    loop.clock.advance()
    assert len(loop.frames) == 2
    assert loop.errors == []


def test_zero_dimension_frame_is_skipped():
    captures = CaptureRegistry(shape=(480, 640, 3))
    camera = CameraSource(0, capture_factory=captures)
    camera.acquire()
    captures.shape = (0, 0, 3)
    camera.read()  # drop the good first frame
    session = Session(variant=Variant.OBJECT_DETECTION, camera=camera, handle=FakeHandle.create())
    loop = Loop(session)
    loop.start()
    loop.clock.advance(frames=2)
    assert session.handle.timestamps == []
    assert loop.scheduler.state is SchedulerState.LOOPING


def test_closed_handle_stops_loop_quietly(session):
    loop = Loop(session)
    loop.start()
    session.handle.close()
    loop.clock.advance()
    assert loop.scheduler.state is SchedulerState.STOPPED
    assert loop.errors == []
    assert loop.clock.pending == {}


def test_unexpected_error_stops_loop_and_is_reported(session):
    loop = Loop(session)
    loop.start()
    boom = RuntimeError("backend crashed")
    session.handle.error = boom
    loop.clock.advance()
    assert loop.scheduler.state is SchedulerState.STOPPED
    assert loop.errors == [boom]
    assert loop.clock.pending == {}


def test_render_error_does_not_escape_callback(session):
    clock = ManualClock()
    errors = []

    def bad_render(frame, result, ts):
        raise ValueError("bad overlay")

    scheduler = FrameScheduler(session, clock, on_frame=bad_render, on_error=errors.append)
    scheduler.notify_has_data()
    scheduler.notify_model_ready()
    clock.advance()
    assert scheduler.state is SchedulerState.STOPPED
    assert len(errors) == 1


def test_failing_error_handler_does_not_escape_callback(session):
    clock = ManualClock()
    seen = []

    def bad_handler(error):
        seen.append(error)
        raise RuntimeError("status line gone")

    scheduler = FrameScheduler(
        session, clock, on_frame=lambda frame, result, ts: None, on_error=bad_handler
    )
    session.handle.error = RuntimeError("backend crashed")
    scheduler.notify_has_data()
    scheduler.notify_model_ready()
    clock.advance()
    assert scheduler.state is SchedulerState.STOPPED
    assert len(seen) == 1
    assert clock.pending == {}
