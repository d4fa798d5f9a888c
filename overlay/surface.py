"""
Drawing surfaces: a canvas-like 2D target sized to the video frame.

DrawingSurface keeps size and the transform stack and maps every coordinate
through the current transform; subclasses only draw in device pixels.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

import cv2
import numpy as np

Point = tuple[float, float]

_NAMED_COLORS = {
    "white": "#FFFFFF",
    "black": "#000000",
    "red": "#FF0000",
    "lime": "#00FF00",
    "green": "#008000",
    "blue": "#0000FF",
    "yellow": "#FFFF00",
    "cyan": "#00FFFF",
    "magenta": "#FF00FF",
}


def parse_color(color: str) -> tuple[int, int, int]:
    """Convert '#RRGGBB' or a basic colour name to an OpenCV (B, G, R) tuple."""
    value = _NAMED_COLORS.get(color.lower(), color)
    if len(value) != 7 or not value.startswith("#"):
        raise ValueError(f"Unsupported colour: {color!r}")
    try:
        r, g, b = (int(value[i:i + 2], 16) for i in (1, 3, 5))
    except ValueError:
        raise ValueError(f"Unsupported colour: {color!r}") from None
    return b, g, r


class DrawingSurface(ABC):
    """Base surface with a horizontal-mirror transform and a save/restore stack."""

    def __init__(self) -> None:
        self._width = 0
        self._height = 0
        self._mirror = False
        self._saved: list[bool] = []

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def is_mirrored(self) -> bool:
        return self._mirror

    def resize(self, width: int, height: int) -> None:
        """Set pixel size. Like a canvas, this also resets the transform."""
        self._width = int(width)
        self._height = int(height)
        self._mirror = False
        self._saved.clear()
        self._allocate(self._width, self._height)

    def clear(self) -> None:
        self._clear()

    def save(self) -> None:
        self._saved.append(self._mirror)

    def restore(self) -> None:
        if self._saved:
            self._mirror = self._saved.pop()

    def mirror(self) -> None:
        """Flip x about the surface centre: scale(-1, 1) then translate(-width, 0)."""
        self._mirror = not self._mirror

    @contextmanager
    def mirrored(self) -> Iterator[DrawingSurface]:
        self.save()
        self.mirror()
        try:
            yield self
        finally:
            self.restore()

    def map_point(self, x: float, y: float) -> Point:
        if self._mirror:
            return self._width - x, y
        return x, y

    def line(self, p1: Point, p2: Point, color: str, width: int) -> None:
        self._line(self.map_point(*p1), self.map_point(*p2), color, width)

    def circle(self, center: Point, radius: float, color: str) -> None:
        self._circle(self.map_point(*center), radius, color)

    def rect(self, x: float, y: float, w: float, h: float, color: str, width: int) -> None:
        x0, _ = self.map_point(x, y)
        x1, _ = self.map_point(x + w, y)
        self._rect(min(x0, x1), y, abs(x1 - x0), h, color, width)

    def text(self, text: str, origin: Point, color: str, font_px: int) -> None:
        """Draw text with its baseline-left corner at origin (only the anchor is transformed)."""
        self._text(text, self.map_point(*origin), color, font_px)

    @abstractmethod
    def composite(self, frame_bgr: np.ndarray) -> np.ndarray:
        """Return frame_bgr with the overlay drawn over it."""
        ...

    @abstractmethod
    def _allocate(self, width: int, height: int) -> None:
        ...

    @abstractmethod
    def _clear(self) -> None:
        ...

    @abstractmethod
    def _line(self, p1: Point, p2: Point, color: str, width: int) -> None:
        ...

    @abstractmethod
    def _circle(self, center: Point, radius: float, color: str) -> None:
        ...

    @abstractmethod
    def _rect(self, x: float, y: float, w: float, h: float, color: str, width: int) -> None:
        ...

    @abstractmethod
    def _text(self, text: str, origin: Point, color: str, font_px: int) -> None:
        ...


def _px(point: Point) -> tuple[int, int]:
    return int(round(point[0])), int(round(point[1]))


class CvSurface(DrawingSurface):
    """Transparent BGRA overlay drawn with OpenCV and composited over a BGR frame."""

    _FONT = cv2.FONT_HERSHEY_SIMPLEX

    def __init__(self) -> None:
        super().__init__()
        self._image = np.zeros((0, 0, 4), dtype=np.uint8)

    @property
    def image(self) -> np.ndarray:
        return self._image

    def _allocate(self, width: int, height: int) -> None:
        if self._image.shape[:2] != (height, width):
            self._image = np.zeros((height, width, 4), dtype=np.uint8)

    def _clear(self) -> None:
        self._image[:] = 0

    @staticmethod
    def _bgra(color: str) -> tuple[int, int, int, int]:
        b, g, r = parse_color(color)
        return b, g, r, 255

    def _line(self, p1: Point, p2: Point, color: str, width: int) -> None:
        cv2.line(self._image, _px(p1), _px(p2), self._bgra(color), width, cv2.LINE_AA)

    def _circle(self, center: Point, radius: float, color: str) -> None:
        cv2.circle(
            self._image, _px(center), max(1, int(round(radius))), self._bgra(color), cv2.FILLED, cv2.LINE_AA
        )

    def _rect(self, x: float, y: float, w: float, h: float, color: str, width: int) -> None:
        cv2.rectangle(self._image, _px((x, y)), _px((x + w, y + h)), self._bgra(color), width)

    def _text(self, text: str, origin: Point, color: str, font_px: int) -> None:
        scale = cv2.getFontScaleFromHeight(self._FONT, font_px, 1)
        thickness = max(1, font_px // 12)
        cv2.putText(self._image, text, _px(origin), self._FONT, scale, self._bgra(color), thickness, cv2.LINE_AA)

    def composite(self, frame_bgr: np.ndarray) -> np.ndarray:
        """Alpha-blend the overlay over a frame of the same size; returns a new BGR frame."""
        if frame_bgr.shape[:2] != self._image.shape[:2]:
            raise ValueError(
                f"overlay is {self._image.shape[1]}x{self._image.shape[0]}, "
                f"frame is {frame_bgr.shape[1]}x{frame_bgr.shape[0]}"
            )
        alpha = self._image[:, :, 3:4].astype(np.float32) / 255.0
        blended = frame_bgr.astype(np.float32) * (1.0 - alpha) + self._image[:, :, :3] * alpha
        return blended.astype(np.uint8)
