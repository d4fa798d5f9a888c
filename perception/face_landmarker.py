"""
MediaPipe Face Landmarker: face mesh (478 points including irises) per face.
"""

from __future__ import annotations

from typing import Any

import mediapipe as mp

from perception.base import ModelHandle
from perception.results import FaceMesh
from perception.variants import VARIANT_INFO, Variant
from pipeline.model_loader import ModelStore


class FaceLandmarkerHandle(ModelHandle):
    variant = Variant.FACE_LANDMARK_DETECTION

    @staticmethod
    def default_settings() -> dict[str, Any]:
        return {
            "num_faces": 1,
            "min_face_detection_confidence": 0.5,
        }

    def _open(self, store: ModelStore) -> Any:
        model_path = str(store.get_model_path(VARIANT_INFO[self.variant].model_file))
        base_options = mp.tasks.BaseOptions(model_asset_path=model_path)
        options = mp.tasks.vision.FaceLandmarkerOptions(
            base_options=base_options,
            running_mode=mp.tasks.vision.RunningMode.VIDEO,
            num_faces=int(self._settings["num_faces"]),
            min_face_detection_confidence=float(
                self._settings["min_face_detection_confidence"]
            ),
        )
        return mp.tasks.vision.FaceLandmarker.create_from_options(options)

    def _infer(self, image: Any, timestamp_ms: int) -> FaceMesh:
        return FaceMesh.from_task_result(self._task.detect_for_video(image, timestamp_ms))


handle_class = FaceLandmarkerHandle
