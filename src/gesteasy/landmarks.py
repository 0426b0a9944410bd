"""
Hand landmark container shared by the landmark source and the pipeline.
"""
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

Point3D = Tuple[float, float, float]

NUM_LANDMARKS = 21


class LandmarkError(ValueError):
    """Raised when a landmark set does not have the expected shape."""


@dataclass(frozen=True)
class HandLandmarks:
    """
    One detected hand in source-frame pixel coordinates.

    Attributes:
        landmarks: Tuple of 21 (x, y, z) tuples
        handedness: 'Left', 'Right' or 'Unknown'
        confidence: Detection confidence 0-1
    """
    landmarks: Tuple[Point3D, ...]
    handedness: str = "Unknown"
    confidence: float = 1.0

    # Landmark indices (MediaPipe / handpose convention)
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20

    def __post_init__(self):
        try:
            points = tuple(tuple(point) for point in self.landmarks)
        except TypeError as e:
            raise LandmarkError(f"Malformed landmark data: {e}") from e
        if len(points) != NUM_LANDMARKS:
            raise LandmarkError(
                f"Expected {NUM_LANDMARKS} landmarks, got {len(points)}"
            )
        for i, point in enumerate(points):
            if len(point) != 3:
                raise LandmarkError(f"Landmark {i} must be (x, y, z), got {point!r}")
        # Frozen: a caller's list must not stay aliased
        object.__setattr__(self, "landmarks", points)

    @classmethod
    def from_points(
        cls,
        points: Sequence[Sequence[Any]],
        handedness: str = "Unknown",
        confidence: float = 1.0,
    ) -> "HandLandmarks":
        """
        Build from any nested sequence (lists, tuples, numpy rows).
        2D points get z = 0.

        Raises:
            LandmarkError: if the shape is wrong or a coordinate is not numeric.
        """
        if points is None:
            raise LandmarkError("No landmarks given")
        converted = []
        try:
            for point in points:
                coords = [float(c) for c in point]
                if len(coords) == 2:
                    coords.append(0.0)
                converted.append(tuple(coords))
        except (TypeError, ValueError, OverflowError) as e:
            raise LandmarkError(f"Malformed landmark data: {e}") from e
        return cls(tuple(converted), handedness=handedness, confidence=confidence)

    def get(self, index: int) -> Point3D:
        """Get landmark by index."""
        return self.landmarks[index]

    @property
    def wrist(self) -> Point3D:
        return self.landmarks[self.WRIST]

    @property
    def index_tip(self) -> Point3D:
        return self.landmarks[self.INDEX_TIP]

    @property
    def middle_tip(self) -> Point3D:
        return self.landmarks[self.MIDDLE_TIP]


def coerce_landmarks(data: Any) -> Optional[HandLandmarks]:
    """
    Turn whatever the landmark source returned into HandLandmarks.

    Returns None for "no hand" and for malformed data, so a bad frame is
    handled exactly like an empty one.
    """
    if data is None:
        return None
    if isinstance(data, HandLandmarks):
        return data
    try:
        return HandLandmarks.from_points(data)
    except LandmarkError:
        return None
