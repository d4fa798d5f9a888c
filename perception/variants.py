"""
The four perception variants and their static, user-facing info.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Variant(str, Enum):
    OBJECT_DETECTION = "object-detection"
    IMAGE_CLASSIFICATION = "image-classification"
    HAND_GESTURE_RECOGNITION = "hand-gesture-recognition"
    FACE_LANDMARK_DETECTION = "face-landmark-detection"


@dataclass(frozen=True)
class VariantInfo:
    display_name: str
    title: str
    description: str
    loading_message: str
    model_file: str


VARIANT_INFO: dict[Variant, VariantInfo] = {
    Variant.OBJECT_DETECTION: VariantInfo(
        display_name="Object Detection",
        title="🎯 Object Detection",
        description="Detect and identify objects in real-time",
        loading_message="Loading Object Detection Model...",
        model_file="efficientdet_lite0.tflite",
    ),
    Variant.IMAGE_CLASSIFICATION: VariantInfo(
        display_name="Image Classification",
        title="📷 Image Classification",
        description="Classify images in real-time",
        loading_message="Loading Image Classifier...",
        model_file="efficientnet_lite0.tflite",
    ),
    Variant.HAND_GESTURE_RECOGNITION: VariantInfo(
        display_name="Hand Gesture Recognition",
        title="✋ Hand Gesture Recognition",
        description="Recognize hand gestures in real-time",
        loading_message="Loading Model...",
        model_file="gesture_recognizer.task",
    ),
    Variant.FACE_LANDMARK_DETECTION: VariantInfo(
        display_name="Face Landmark Detection",
        title="🙂 Face Landmark Detection",
        description="Track face mesh landmarks in real-time",
        loading_message="Loading Face Model...",
        model_file="face_landmarker.task",
    ),
}
