"""
Camera source: acquires a webcam on a worker thread and serves frames to the GUI thread.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import Any, Callable

import cv2
import numpy as np

from pipeline.errors import CameraPermissionError, ClosedError

logger = logging.getLogger(__name__)

CaptureFactory = Callable[[int], Any]


def open_video_capture(index: int) -> cv2.VideoCapture:
    # On Windows, use DirectShow so index order matches the OS device list
    if sys.platform == "win32":
        return cv2.VideoCapture(index, cv2.CAP_DSHOW)
    return cv2.VideoCapture(index)


class CameraSource:
    """
    One capture device owned by one session.

    acquire() blocks until the device delivers its first frame and is meant to run
    off the GUI thread. release() may be called at any time from the GUI thread,
    including while acquire() is still pending; the device is released exactly once.
    """

    def __init__(self, index: int = 0, capture_factory: CaptureFactory | None = None) -> None:
        self._index = index
        self._capture_factory = capture_factory or open_video_capture
        self._lock = threading.Lock()
        self._cap: Any = None
        self._released = False
        self._first_frame: np.ndarray | None = None

    @property
    def active_tracks(self) -> int:
        with self._lock:
            return 1 if self._cap is not None else 0

    @property
    def released(self) -> bool:
        return self._released

    def acquire(self) -> CameraSource:
        """Open the device and read its first frame. Returns self once data is available."""
        with self._lock:
            if self._released:
                raise ClosedError("camera released before acquisition started")
        cap = self._capture_factory(self._index)
        if not cap.isOpened():
            cap.release()
            raise CameraPermissionError(
                f"Camera {self._index} is unavailable or access was denied"
            )
        ok, frame = cap.read()
        if not ok or frame is None:
            cap.release()
            raise CameraPermissionError(f"Camera {self._index} opened but delivered no frames")
        with self._lock:
            if not self._released:
                self._cap = cap
                self._first_frame = frame
                cap = None
        if cap is not None:
            # release() won the race while the device was opening
            cap.release()
            raise ClosedError("camera released during acquisition")
        h, w = frame.shape[:2]
        logger.info("Camera %d acquired (%dx%d)", self._index, w, h)
        return self

    def read(self) -> np.ndarray | None:
        """Return the next BGR frame, or None when no frame is available."""
        if self._first_frame is not None:
            frame, self._first_frame = self._first_frame, None
            return frame
        cap = self._cap
        if cap is None:
            return None
        ok, frame = cap.read()
        return frame if ok else None

    def release(self) -> None:
        """Stop the capture device. Safe to call repeatedly and before acquisition finishes."""
        with self._lock:
            self._released = True
            cap, self._cap = self._cap, None
            self._first_frame = None
        if cap is not None:
            cap.release()
            logger.info("Camera %d released", self._index)
