"""
Session: the single owner of one camera source and one model handle.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from perception.variants import Variant

if TYPE_CHECKING:
    from perception.base import ModelHandle
    from pipeline.capture import CameraSource
    from pipeline.errors import PipelineError


class SessionState(Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    READY = "ready"
    RUNNING = "running"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass(eq=False)
class Session:
    variant: Variant
    state: SessionState = SessionState.IDLE
    camera: CameraSource | None = None
    handle: ModelHandle | None = None
    camera_ready: bool = False
    # First terminal error (camera denied, model failed); the session stays inert after it
    error: PipelineError | None = None

    @property
    def inert(self) -> bool:
        return self.error is not None

    @property
    def closing(self) -> bool:
        return self.state in (SessionState.CLOSING, SessionState.CLOSED)
