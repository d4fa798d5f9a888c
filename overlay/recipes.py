"""
Per-variant draw recipes. Pure styling data; never mutated at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from overlay import topology
from overlay.topology import Edge
from perception.variants import Variant


@dataclass(frozen=True)
class Stroke:
    """One named edge list drawn in one colour."""

    name: str
    edges: tuple[Edge, ...]
    color: str
    width: int


@dataclass(frozen=True)
class LandmarkStyle:
    strokes: tuple[Stroke, ...]
    point_color: str
    point_radius: int


@dataclass(frozen=True)
class BoxStyle:
    color: str
    width: int


@dataclass(frozen=True)
class LabelStyle:
    # Format string; receives label= and score=
    template: str
    color: str
    font_px: int
    # Fixed anchor; None anchors the text to its box (x, y + offset_y)
    origin: tuple[int, int] | None = None
    offset_y: int = 0


@dataclass(frozen=True)
class OverlaySpec:
    variant: Variant
    # Landmark geometry is drawn flipped to track the mirrored video
    mirrored: bool
    landmarks: LandmarkStyle | None = None
    box: BoxStyle | None = None
    label: LabelStyle | None = None


_LANDMARK_POINT_COLOR = "#4CC9F0"

OVERLAY_SPECS: Mapping[Variant, OverlaySpec] = MappingProxyType({
    Variant.OBJECT_DETECTION: OverlaySpec(
        variant=Variant.OBJECT_DETECTION,
        mirrored=False,
        box=BoxStyle(color="#00ff00", width=2),
        label=LabelStyle(template="{label} {score:.2f}", color="#00ff00", font_px=14, offset_y=-6),
    ),
    Variant.IMAGE_CLASSIFICATION: OverlaySpec(
        variant=Variant.IMAGE_CLASSIFICATION,
        mirrored=False,
        label=LabelStyle(template="{label} ({score:.2f})", color="#00ff00", font_px=24, origin=(20, 40)),
    ),
    Variant.HAND_GESTURE_RECOGNITION: OverlaySpec(
        variant=Variant.HAND_GESTURE_RECOGNITION,
        mirrored=True,
        landmarks=LandmarkStyle(
            strokes=(Stroke("hand", topology.HAND_CONNECTIONS, "white", 3),),
            point_color=_LANDMARK_POINT_COLOR,
            point_radius=5,
        ),
        label=LabelStyle(template="Gesture: {label}", color="cyan", font_px=28, origin=(20, 40)),
    ),
    Variant.FACE_LANDMARK_DETECTION: OverlaySpec(
        variant=Variant.FACE_LANDMARK_DETECTION,
        mirrored=True,
        landmarks=LandmarkStyle(
            strokes=(
                Stroke("face_oval", topology.FACE_OVAL, "#FFFFFF", 2),
                Stroke("lips", topology.LIPS, "#FF74A4", 2),
                Stroke("left_eyebrow", topology.LEFT_EYEBROW, "#FFD966", 2),
                Stroke("right_eyebrow", topology.RIGHT_EYEBROW, "#FFD966", 2),
                Stroke("left_eye", topology.LEFT_EYE, "#00E5FF", 2),
                Stroke("right_eye", topology.RIGHT_EYE, "#00E5FF", 2),
                Stroke("left_iris", topology.LEFT_IRIS, "#00FF00", 2),
                Stroke("right_iris", topology.RIGHT_IRIS, "#00FF00", 2),
            ),
            point_color=_LANDMARK_POINT_COLOR,
            point_radius=2,
        ),
    ),
})
