"""
Overlay renderer: draws one inference result onto a drawing surface sized to the frame.

Landmark geometry (hands, face mesh) is drawn in mirrored space so it lines up
with the mirrored video. Boxes come in unmirrored frame pixels and are drawn
as-is. Text is always drawn with the transform restored so it reads left to right.
"""

from __future__ import annotations

from contextlib import nullcontext
from typing import Mapping, Sequence

from overlay.recipes import OVERLAY_SPECS, LabelStyle, LandmarkStyle, OverlaySpec
from overlay.surface import DrawingSurface, Point
from overlay.topology import Edge
from perception.results import (
    Category,
    Classification,
    Detections,
    FaceMesh,
    GestureSet,
    InferenceResult,
    Landmark,
)
from perception.variants import Variant


def denormalize(landmarks: Sequence[Landmark], width: int, height: int) -> list[Point]:
    """Normalized landmarks -> pixel points (x * width, y * height)."""
    return [(lm.x * width, lm.y * height) for lm in landmarks]


def draw_topology(
    surface: DrawingSurface, points: Sequence[Point], edges: Sequence[Edge], color: str, width: int
) -> None:
    """Draw one line per edge; edges referencing missing points are skipped."""
    n = len(points)
    for start, end in edges:
        if start < n and end < n:
            surface.line(points[start], points[end], color, width)


def draw_points(surface: DrawingSurface, points: Sequence[Point], color: str, radius: int) -> None:
    for p in points:
        surface.circle(p, radius, color)


def draw_landmarks(surface: DrawingSurface, landmarks: Sequence[Landmark], style: LandmarkStyle) -> None:
    points = denormalize(landmarks, surface.width, surface.height)
    for stroke in style.strokes:
        draw_topology(surface, points, stroke.edges, stroke.color, stroke.width)
    draw_points(surface, points, style.point_color, style.point_radius)


def _draw_label(surface: DrawingSurface, style: LabelStyle, category: Category, anchor: Point | None = None) -> None:
    text = style.template.format(label=category.label, score=category.score)
    if style.origin is not None:
        origin: Point = style.origin
    else:
        ax, ay = anchor if anchor is not None else (0.0, 0.0)
        origin = (ax, ay + style.offset_y)
    surface.text(text, origin, style.color, style.font_px)


class OverlayRenderer:
    """Renders any InferenceResult using the per-variant OverlaySpec table."""

    def __init__(self, specs: Mapping[Variant, OverlaySpec] = OVERLAY_SPECS) -> None:
        self._specs = specs

    def render(
        self,
        result: InferenceResult | None,
        frame_size: tuple[int, int],
        surface: DrawingSurface,
    ) -> None:
        """Resize surface to frame_size (width, height), clear it, then draw result."""
        width, height = frame_size
        surface.resize(width, height)
        surface.clear()
        if result is None:
            return
        if isinstance(result, Detections):
            self._draw_detections(result, self._specs[Variant.OBJECT_DETECTION], surface)
        elif isinstance(result, Classification):
            self._draw_classification(result, self._specs[Variant.IMAGE_CLASSIFICATION], surface)
        elif isinstance(result, GestureSet):
            self._draw_gestures(result, self._specs[Variant.HAND_GESTURE_RECOGNITION], surface)
        elif isinstance(result, FaceMesh):
            self._draw_face_mesh(result, self._specs[Variant.FACE_LANDMARK_DETECTION], surface)
        else:
            raise TypeError(f"Unsupported inference result: {type(result).__name__}")

    @staticmethod
    def _draw_detections(result: Detections, spec: OverlaySpec, surface: DrawingSurface) -> None:
        for det in result.items:
            box = det.box
            if spec.box is not None:
                surface.rect(box.x, box.y, box.width, box.height, spec.box.color, spec.box.width)
            if spec.label is not None:
                _draw_label(surface, spec.label, Category(det.label, det.score), (box.x, box.y))

    @staticmethod
    def _draw_classification(result: Classification, spec: OverlaySpec, surface: DrawingSurface) -> None:
        if result.top is None or spec.label is None:
            return
        _draw_label(surface, spec.label, result.top)

    @staticmethod
    def _draw_landmark_sets(
        sets: Sequence[Sequence[Landmark]], spec: OverlaySpec, surface: DrawingSurface
    ) -> None:
        if spec.landmarks is None or not sets:
            return
        with surface.mirrored() if spec.mirrored else nullcontext():
            for landmarks in sets:
                draw_landmarks(surface, landmarks, spec.landmarks)

    def _draw_gestures(self, result: GestureSet, spec: OverlaySpec, surface: DrawingSurface) -> None:
        self._draw_landmark_sets(result.hands, spec, surface)
        # Transform is restored here; text must not be mirrored
        if result.gesture is not None and spec.label is not None:
            _draw_label(surface, spec.label, result.gesture)

    def _draw_face_mesh(self, result: FaceMesh, spec: OverlaySpec, surface: DrawingSurface) -> None:
        self._draw_landmark_sets(result.faces, spec, surface)
