"""
Handle loader: maps each variant to the module that implements it and imports
that module on demand, so only the MediaPipe task in use gets loaded.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Any

from perception.results import (
    Classification,
    Detections,
    FaceMesh,
    GestureSet,
    InferenceResult,
)
from perception.variants import VARIANT_INFO, Variant
from pipeline.errors import ModelInitError

if TYPE_CHECKING:
    from perception.base import ModelHandle
    from pipeline.model_loader import ModelStore

# Module names under perception/ (no .py); each defines 'handle_class'
_VARIANT_MODULES = {
    Variant.OBJECT_DETECTION: "object_detector",
    Variant.IMAGE_CLASSIFICATION: "image_classifier",
    Variant.HAND_GESTURE_RECOGNITION: "gesture_recognizer",
    Variant.FACE_LANDMARK_DETECTION: "face_landmarker",
}


def load_handle_class(variant: Variant | str) -> type[ModelHandle]:
    """Import the variant's module and return its handle class."""
    module = importlib.import_module(f"perception.{_VARIANT_MODULES[Variant(variant)]}")
    return getattr(module, "handle_class")


def create_handle(
    variant: Variant | str,
    settings: dict[str, Any] | None = None,
    store: ModelStore | None = None,
) -> ModelHandle:
    """Create an open handle for the variant. Raises ModelInitError on failure."""
    try:
        handle_cls = load_handle_class(variant)
    except ImportError as e:
        raise ModelInitError(f"Perception backend unavailable: {e}") from e
    return handle_cls.create(settings, store)


__all__ = [
    "Classification",
    "Detections",
    "FaceMesh",
    "GestureSet",
    "InferenceResult",
    "VARIANT_INFO",
    "Variant",
    "create_handle",
    "load_handle_class",
]
