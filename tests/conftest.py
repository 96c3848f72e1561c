import pytest

from cam_designer import CamGeometry, DEFAULT_SEGMENTS, FollowerType, MotionKind, MotionSegment


@pytest.fixture
def reference_segments():
    """Dwell / two cycloidal rises / harmonic return, 360 deg with zero net lift"""
    return list(DEFAULT_SEGMENTS)


@pytest.fixture
def roller_geometry():
    return CamGeometry(FollowerType.TRANSLATING_ROLLER, base_radius=40.0, follower_radius=10.0, offset=0.0)


@pytest.fixture
def oscillating_segments():
    # lift in degrees of arm swing
    return [
        MotionSegment(MotionKind.DWELL, 60, 0),
        MotionSegment(MotionKind.POLYNOMIAL_345, 120, 15),
        MotionSegment(MotionKind.DWELL, 60, 0),
        MotionSegment(MotionKind.CYCLOIDAL, 120, -15),
    ]
