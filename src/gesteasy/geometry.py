"""
Landmark geometry: 2D distances and angles relative to the wrist.
Depth (z) is ignored, it is not reliable enough for these gestures.
"""
from dataclasses import dataclass
from typing import Sequence
import math

from .landmarks import HandLandmarks


@dataclass(frozen=True)
class GeometrySample:
    """Per-frame measurements the classifier works on."""
    distance_index_middle: float
    angle_index_from_wrist: float   # Degrees, (-180, 180]
    angle_middle_from_wrist: float


def distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance using x and y only."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def angle_from_reference(point: Sequence[float], reference: Sequence[float]) -> float:
    """
    Polar angle of `point` seen from `reference`, in degrees.

    Image y grows downwards, so a finger pointing straight up from the
    wrist comes out at about -90.
    """
    angle = math.degrees(math.atan2(point[1] - reference[1], point[0] - reference[0]))
    # atan2 can return exactly -180 for (-0.0) y components
    if angle <= -180.0:
        angle += 360.0
    return angle


def compute_geometry(landmarks: HandLandmarks) -> GeometrySample:
    index_tip = landmarks.index_tip
    middle_tip = landmarks.middle_tip
    wrist = landmarks.wrist
    return GeometrySample(
        distance_index_middle=distance(index_tip, middle_tip),
        angle_index_from_wrist=angle_from_reference(index_tip, wrist),
        angle_middle_from_wrist=angle_from_reference(middle_tip, wrist),
    )
