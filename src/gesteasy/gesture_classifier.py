"""
Per-frame gesture classification from finger geometry.
Detects the V-shape (index + middle spread upwards) and pinch gestures.
"""
from enum import Enum, auto
from typing import Optional, Tuple

from .config import GestureConfig, validate_gestures
from .geometry import GeometrySample


class MatchKind(Enum):
    """Single-frame geometric match."""
    NO_MATCH = auto()
    V_SHAPE = auto()
    PINCH = auto()


def _within(value: float, bounds: Tuple[float, float]) -> bool:
    # NaN fails both comparisons, so it never matches
    return bounds[0] <= value <= bounds[1]


def is_v_shape(index_angle: float, middle_angle: float, finger_distance: float,
               config: GestureConfig) -> bool:
    return (
        _within(index_angle, config.v_index_angle_range)
        and _within(middle_angle, config.v_middle_angle_range)
        and _within(finger_distance, config.v_distance_range)
    )


def is_pinch(finger_distance: float, config: GestureConfig) -> bool:
    return finger_distance < config.pinch_distance_threshold


def classify(index_angle: float, middle_angle: float, finger_distance: float,
             config: Optional[GestureConfig] = None) -> MatchKind:
    """
    Classify one frame.

    The V-shape rule is checked first and wins when both rules hold, so a
    confirm gesture is never masked by a pinch.

    Args:
        index_angle: Index tip angle from the wrist, degrees
        middle_angle: Middle tip angle from the wrist, degrees
        finger_distance: Index tip to middle tip distance, source pixels
        config: Thresholds, defaults if None

    Returns:
        MatchKind for this frame.
    """
    if config is None:
        config = GestureConfig()
    if is_v_shape(index_angle, middle_angle, finger_distance, config):
        return MatchKind.V_SHAPE
    if is_pinch(finger_distance, config):
        return MatchKind.PINCH
    return MatchKind.NO_MATCH


class GestureClassifier:
    """Binds a validated GestureConfig to the classification rules."""

    def __init__(self, config: Optional[GestureConfig] = None):
        self._config = config or GestureConfig()
        validate_gestures(self._config)

    @property
    def config(self) -> GestureConfig:
        return self._config

    def classify(self, index_angle: float, middle_angle: float, finger_distance: float) -> MatchKind:
        return classify(index_angle, middle_angle, finger_distance, self._config)

    def classify_sample(self, sample: GeometrySample) -> MatchKind:
        return classify(
            sample.angle_index_from_wrist,
            sample.angle_middle_from_wrist,
            sample.distance_index_middle,
            self._config,
        )
