"""
Typed inference results, one case per variant.

Each result type can be built from the matching MediaPipe Tasks result object
(read by attribute, so no MediaPipe import is needed here).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Union


@dataclass(frozen=True)
class Landmark:
    """Normalized point: x and y in [0, 1] relative to the frame."""

    x: float
    y: float
    z: float = 0.0


@dataclass(frozen=True)
class BoundingBox:
    """Box in frame pixel space (unmirrored)."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class Category:
    label: str
    score: float


@dataclass(frozen=True)
class Detection:
    box: BoundingBox
    label: str
    score: float


def _top_category(categories: Sequence[Any] | None) -> Category | None:
    if not categories:
        return None
    c = categories[0]
    return Category(label=c.category_name or "", score=float(c.score or 0.0))


def _landmark_set(points: Sequence[Any]) -> tuple[Landmark, ...]:
    return tuple(Landmark(float(p.x), float(p.y), float(p.z or 0.0)) for p in points)


@dataclass(frozen=True)
class Detections:
    items: tuple[Detection, ...] = ()

    @classmethod
    def from_task_result(cls, result: Any) -> Detections:
        items: list[Detection] = []
        for det in result.detections or ():
            top = _top_category(det.categories)
            box = det.bounding_box
            items.append(
                Detection(
                    box=BoundingBox(box.origin_x, box.origin_y, box.width, box.height),
                    label=top.label if top else "",
                    score=top.score if top else 0.0,
                )
            )
        return cls(tuple(items))


@dataclass(frozen=True)
class Classification:
    # None when the classifier returned no categories this frame
    top: Category | None = None

    @classmethod
    def from_task_result(cls, result: Any) -> Classification:
        heads = result.classifications or ()
        if not heads:
            return cls(None)
        return cls(_top_category(heads[0].categories))


@dataclass(frozen=True)
class GestureSet:
    hands: tuple[tuple[Landmark, ...], ...] = ()
    gesture: Category | None = None
    handedness: tuple[str, ...] = ()

    @classmethod
    def from_task_result(cls, result: Any) -> GestureSet:
        hands = tuple(_landmark_set(hand) for hand in result.hand_landmarks or ())
        gestures = result.gestures or ()
        gesture = _top_category(gestures[0]) if gestures else None
        handedness = tuple(
            (cats[0].category_name or "") if cats else ""
            for cats in getattr(result, "handedness", None) or ()
        )
        return cls(hands=hands, gesture=gesture, handedness=handedness)


@dataclass(frozen=True)
class FaceMesh:
    faces: tuple[tuple[Landmark, ...], ...] = ()

    @classmethod
    def from_task_result(cls, result: Any) -> FaceMesh:
        return cls(tuple(_landmark_set(face) for face in result.face_landmarks or ()))


InferenceResult = Union[Detections, Classification, GestureSet, FaceMesh]
