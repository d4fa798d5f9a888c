"""
MediaPipe Object Detector: detects objects (COCO classes) with pixel bounding boxes.
"""

from __future__ import annotations

from typing import Any

import mediapipe as mp

from perception.base import ModelHandle
from perception.results import Detections
from perception.variants import VARIANT_INFO, Variant
from pipeline.model_loader import ModelStore


class ObjectDetectorHandle(ModelHandle):
    variant = Variant.OBJECT_DETECTION

    @staticmethod
    def default_settings() -> dict[str, Any]:
        return {"score_threshold": 0.5}

    def _open(self, store: ModelStore) -> Any:
        model_path = str(store.get_model_path(VARIANT_INFO[self.variant].model_file))
        base_options = mp.tasks.BaseOptions(model_asset_path=model_path)
        options = mp.tasks.vision.ObjectDetectorOptions(
            base_options=base_options,
            running_mode=mp.tasks.vision.RunningMode.VIDEO,
            score_threshold=float(self._settings["score_threshold"]),
        )
        return mp.tasks.vision.ObjectDetector.create_from_options(options)

    def _infer(self, image: Any, timestamp_ms: int) -> Detections:
        return Detections.from_task_result(self._task.detect_for_video(image, timestamp_ms))


handle_class = ObjectDetectorHandle
