"""
Error taxonomy for the live pipeline.

CameraPermissionError and ModelInitError are terminal for a session.
ClosedError means "stop, do not reschedule" and is expected during teardown races.
FrameError is transient: the current tick is skipped and retried on the next one.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for all pipeline errors."""


class CameraPermissionError(PipelineError):
    """Camera access was denied or no capture device is present."""


class ModelInitError(PipelineError):
    """The perception model could not be loaded or created."""


class ClosedError(PipelineError):
    """An operation was attempted on a resource after teardown."""


class FrameError(PipelineError):
    """The current frame is missing or has zero dimensions."""
