"""
MediaPipe Gesture Recognizer: hand landmarks (21 points per hand) plus gestures
such as Thumb_Up or Pointing_Up.
"""

from __future__ import annotations

from typing import Any

import mediapipe as mp

from perception.base import ModelHandle
from perception.results import GestureSet
from perception.variants import VARIANT_INFO, Variant
from pipeline.model_loader import ModelStore


class GestureRecognizerHandle(ModelHandle):
    variant = Variant.HAND_GESTURE_RECOGNITION

    @staticmethod
    def default_settings() -> dict[str, Any]:
        return {
            "num_hands": 2,
            "min_hand_detection_confidence": 0.5,
        }

    def _open(self, store: ModelStore) -> Any:
        model_path = str(store.get_model_path(VARIANT_INFO[self.variant].model_file))
        base_options = mp.tasks.BaseOptions(model_asset_path=model_path)
        options = mp.tasks.vision.GestureRecognizerOptions(
            base_options=base_options,
            running_mode=mp.tasks.vision.RunningMode.VIDEO,
            num_hands=int(self._settings["num_hands"]),
            min_hand_detection_confidence=float(
                self._settings["min_hand_detection_confidence"]
            ),
        )
        return mp.tasks.vision.GestureRecognizer.create_from_options(options)

    def _infer(self, image: Any, timestamp_ms: int) -> GestureSet:
        return GestureSet.from_task_result(self._task.recognize_for_video(image, timestamp_ms))


handle_class = GestureRecognizerHandle
