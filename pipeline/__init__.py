# Pipeline: camera, scheduler, controller, config, errors
#
# The controller is imported from pipeline.controller directly; it depends on
# perception, which itself depends on pipeline.errors.

from pipeline.capture import CameraSource
from pipeline.config import AppConfig
from pipeline.errors import (
    CameraPermissionError,
    ClosedError,
    FrameError,
    ModelInitError,
    PipelineError,
)

__all__ = [
    "AppConfig",
    "CameraPermissionError",
    "CameraSource",
    "ClosedError",
    "FrameError",
    "ModelInitError",
    "PipelineError",
]
