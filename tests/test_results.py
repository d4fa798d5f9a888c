from types import SimpleNamespace as NS

from perception.results import (
    BoundingBox,
    Category,
    Classification,
    Detections,
    FaceMesh,
    GestureSet,
    Landmark,
)


def _cat(name, score):
    return NS(category_name=name, score=score)


def _lm(x, y, z=None):
    return NS(x=x, y=y, z=z)


def test_detections_from_task_result():
    result = NS(detections=[
        NS(bounding_box=NS(origin_x=10, origin_y=20, width=30, height=40), categories=[_cat("cup", 0.82), _cat("mug", 0.1)]),
        NS(bounding_box=NS(origin_x=0, origin_y=0, width=5, height=5), categories=[]),
    ])
    dets = Detections.from_task_result(result)
    assert len(dets.items) == 2
    assert dets.items[0].box == BoundingBox(10, 20, 30, 40)
    assert (dets.items[0].label, dets.items[0].score) == ("cup", 0.82)
    assert (dets.items[1].label, dets.items[1].score) == ("", 0.0)


def test_detections_empty():
    assert Detections.from_task_result(NS(detections=[])).items == ()
    assert Detections.from_task_result(NS(detections=None)).items == ()


def test_classification_top_category():
    result = NS(classifications=[NS(categories=[_cat("banana", 0.0), _cat("apple", 0.0)])])
    assert Classification.from_task_result(result).top == Category("banana", 0.0)


def test_classification_absent():
    assert Classification.from_task_result(NS(classifications=[])).top is None
    assert Classification.from_task_result(NS(classifications=[NS(categories=[])])).top is None


def test_classification_missing_score_and_name():
    result = NS(classifications=[NS(categories=[_cat(None, None)])])
    assert Classification.from_task_result(result).top == Category("", 0.0)


def test_gesture_set_from_task_result():
    hand = [_lm(0.1 * (i % 10), 0.5, -0.01) for i in range(21)]
    result = NS(
        hand_landmarks=[hand, hand],
        gestures=[[_cat("Thumb_Up", 0.9), _cat("None", 0.05)], [_cat("Victory", 0.8)]],
        handedness=[[_cat("Left", 0.99)], [_cat("Right", 0.97)]],
    )
    gs = GestureSet.from_task_result(result)
    assert len(gs.hands) == 2
    assert len(gs.hands[0]) == 21
    assert gs.hands[0][1] == Landmark(0.1, 0.5, -0.01)
    assert gs.gesture == Category("Thumb_Up", 0.9)
    assert gs.handedness == ("Left", "Right")


def test_gesture_set_without_hands():
    gs = GestureSet.from_task_result(NS(hand_landmarks=[], gestures=[], handedness=[]))
    assert gs == GestureSet()


def test_face_mesh_from_task_result():
    face = [_lm(0.5, 0.5) for _ in range(478)]
    mesh = FaceMesh.from_task_result(NS(face_landmarks=[face]))
    assert len(mesh.faces) == 1
    assert len(mesh.faces[0]) == 478
    assert mesh.faces[0][0] == Landmark(0.5, 0.5, 0.0)
