import math
import pytest

from gesteasy.landmarks import HandLandmarks

WRIST = (320.0, 400.0)


def _tip(angle_deg, length=200.0, origin=WRIST):
    rad = math.radians(angle_deg)
    return (origin[0] + length * math.cos(rad), origin[1] + length * math.sin(rad))


def build_hand(index_tip, middle_tip, wrist=WRIST):
    """21 points: everything at the wrist except the two fingertips."""
    points = [(wrist[0], wrist[1], 0.0)] * 21
    points[HandLandmarks.INDEX_TIP] = (index_tip[0], index_tip[1], 0.0)
    points[HandLandmarks.MIDDLE_TIP] = (middle_tip[0], middle_tip[1], 0.0)
    return HandLandmarks.from_points(points)


class FakeClock:
    """Monotonic clock driven by the test."""

    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms / 1000.0


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def v_hand():
    # Index at -100 deg, middle at -85 deg, tips ~52px apart
    return build_hand(_tip(-100.0), _tip(-85.0))


@pytest.fixture
def pinch_hand():
    return build_hand((300.0, 200.0), (310.0, 200.0))


@pytest.fixture
def open_hand():
    return build_hand((200.0, 300.0), (400.0, 300.0))


@pytest.fixture
def hand_factory():
    return build_hand
