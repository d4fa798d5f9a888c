"""
MediaPipe Image Classifier: labels the whole frame (ImageNet classes).
"""

from __future__ import annotations

from typing import Any

import mediapipe as mp

from perception.base import ModelHandle
from perception.results import Classification
from perception.variants import VARIANT_INFO, Variant
from pipeline.model_loader import ModelStore


class ImageClassifierHandle(ModelHandle):
    variant = Variant.IMAGE_CLASSIFICATION

    @staticmethod
    def default_settings() -> dict[str, Any]:
        # Threshold 0 keeps the top category even when its score is 0.00
        return {"score_threshold": 0.0, "max_results": 3}

    def _open(self, store: ModelStore) -> Any:
        model_path = str(store.get_model_path(VARIANT_INFO[self.variant].model_file))
        base_options = mp.tasks.BaseOptions(model_asset_path=model_path)
        options = mp.tasks.vision.ImageClassifierOptions(
            base_options=base_options,
            running_mode=mp.tasks.vision.RunningMode.VIDEO,
            score_threshold=float(self._settings["score_threshold"]),
            max_results=int(self._settings["max_results"]),
        )
        return mp.tasks.vision.ImageClassifier.create_from_options(options)

    def _infer(self, image: Any, timestamp_ms: int) -> Classification:
        return Classification.from_task_result(self._task.classify_for_video(image, timestamp_ms))


handle_class = ImageClassifierHandle
