"""
Base model handle that every perception variant implements.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import cv2

from pipeline.errors import ClosedError, ModelInitError
from pipeline.model_loader import ModelStore

if TYPE_CHECKING:
    import numpy as np
    from perception.results import InferenceResult
    from perception.variants import Variant

logger = logging.getLogger(__name__)


class ModelHandle(ABC):
    """
    Async-created, closable perception backend running in video mode.

    Subclasses build the MediaPipe task in _open() and run it in _infer().
    Timestamps passed to infer() must be strictly increasing for the
    lifetime of the handle.
    """

    variant: Variant

    def __init__(self, settings: dict[str, Any]) -> None:
        self._settings = settings
        self._task: Any = None
        self._closed = False
        self._last_timestamp_ms: int | None = None

    @staticmethod
    @abstractmethod
    def default_settings() -> dict[str, Any]:
        """Return default settings dict (e.g. score_threshold, num_hands)."""
        ...

    @classmethod
    def create(
        cls, settings: dict[str, Any] | None = None, store: ModelStore | None = None
    ) -> ModelHandle:
        """Load the model and build the backend. Slow; run off the GUI thread."""
        merged = cls.default_settings()
        if settings:
            merged.update(settings)
        handle = cls(merged)
        try:
            handle._task = handle._open(store or ModelStore())
        except Exception as e:
            raise ModelInitError(f"Failed to create {cls.variant.value} model: {e}") from e
        logger.info("Created %s model handle", cls.variant.value)
        return handle

    @abstractmethod
    def _open(self, store: ModelStore) -> Any:
        """Build and return the backend task object."""
        ...

    @abstractmethod
    def _infer(self, image: Any, timestamp_ms: int) -> InferenceResult:
        """Run the backend task on one image."""
        ...

    @property
    def is_open(self) -> bool:
        return self._task is not None and not self._closed

    def infer(self, frame_bgr: np.ndarray, timestamp_ms: int) -> InferenceResult:
        """Run one inference. Raises ClosedError after close()."""
        if not self.is_open:
            raise ClosedError(f"{self.variant.value} model handle is closed")
        if self._last_timestamp_ms is not None and timestamp_ms <= self._last_timestamp_ms:
            raise ValueError(
                f"timestamp {timestamp_ms} ms is not after previous {self._last_timestamp_ms} ms"
            )
        self._last_timestamp_ms = timestamp_ms
        return self._infer(self._to_image(frame_bgr), timestamp_ms)

    @staticmethod
    def _to_image(frame_bgr: np.ndarray) -> Any:
        import mediapipe as mp

        rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        return mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)

    def close(self) -> None:
        """Release backend resources. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        task, self._task = self._task, None
        if task is not None:
            task.close()
            logger.info("Closed %s model handle", self.variant.value)
