"""
Ensures MediaPipe Tasks model files exist; downloads from Google storage if missing.
"""

from __future__ import annotations

import logging
import os
import tempfile
import urllib.request
from pathlib import Path

from pipeline.config import DEFAULT_MODELS_DIR

logger = logging.getLogger(__name__)

# Official MediaPipe model URLs (Google storage)
MODEL_URLS = {
    "efficientdet_lite0.tflite": "https://storage.googleapis.com/mediapipe-models/object_detector/efficientdet_lite0/float16/latest/efficientdet_lite0.tflite",
    "efficientnet_lite0.tflite": "https://storage.googleapis.com/mediapipe-models/image_classifier/efficientnet_lite0/float32/latest/efficientnet_lite0.tflite",
    "gesture_recognizer.task": "https://storage.googleapis.com/mediapipe-models/gesture_recognizer/gesture_recognizer/float16/latest/gesture_recognizer.task",
    "face_landmarker.task": "https://storage.googleapis.com/mediapipe-models/face_landmarker/face_landmarker/float16/latest/face_landmarker.task",
}


class ModelStore:
    """Local cache of model files, filled from MODEL_URLS on first use."""

    def __init__(self, models_dir: str | Path = DEFAULT_MODELS_DIR) -> None:
        self._models_dir = Path(models_dir)

    @property
    def models_dir(self) -> Path:
        return self._models_dir

    def get_model_path(self, filename: str) -> Path:
        """Return path to the model file; download if not present."""
        path = self._models_dir / filename
        if path.is_file():
            return path
        url = MODEL_URLS.get(filename)
        if not url:
            raise FileNotFoundError(f"Unknown model: {filename}. Known: {list(MODEL_URLS)}")
        self._models_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Downloading model %s", filename)
        # Write next to the target and rename, so an interrupted download leaves no partial model
        fd, tmp_name = tempfile.mkstemp(prefix=f".{filename}.", dir=self._models_dir)
        os.close(fd)
        try:
            urllib.request.urlretrieve(url, tmp_name)
            os.replace(tmp_name, path)
        finally:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
        logger.info("Saved model %s to %s", filename, path)
        return path
