import pytest

from overlay import topology
from overlay.recipes import OVERLAY_SPECS
from perception.variants import VARIANT_INFO, Variant
from pipeline.model_loader import MODEL_URLS


def test_hand_skeleton_uses_all_21_points():
    assert len(topology.HAND_CONNECTIONS) == 21
    used = {i for edge in topology.HAND_CONNECTIONS for i in edge}
    assert used == set(range(21))


def test_face_regions_within_mesh():
    regions = (
        topology.FACE_OVAL,
        topology.LIPS,
        topology.LEFT_EYE,
        topology.RIGHT_EYE,
        topology.LEFT_EYEBROW,
        topology.RIGHT_EYEBROW,
    )
    for edges in regions:
        assert all(max(edge) < 468 for edge in edges)
    for edges in (topology.LEFT_IRIS, topology.RIGHT_IRIS):
        assert all(
            468 <= i < 478
            for edge in edges
            for i in edge
        )


def test_every_variant_has_recipe_and_model():
    for variant in Variant:
        assert OVERLAY_SPECS[variant].variant is variant
        assert VARIANT_INFO[variant].model_file in MODEL_URLS


def test_only_landmark_variants_are_mirrored():
    mirrored = {v for v, spec in OVERLAY_SPECS.items() if spec.mirrored}
    assert mirrored == {Variant.HAND_GESTURE_RECOGNITION, Variant.FACE_LANDMARK_DETECTION}


def test_recipes_are_read_only():
    with pytest.raises(TypeError):
        OVERLAY_SPECS[Variant.OBJECT_DETECTION] = None
    with pytest.raises(AttributeError):
        OVERLAY_SPECS[Variant.OBJECT_DETECTION].mirrored = True
