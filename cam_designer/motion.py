import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

import numpy as np

from .params import KinematicPoint, MotionKind, MotionSegment

log = logging.getLogger(__name__)

EPSILON = 1e-9
FULL_TURN = 360.0

Factors = Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]


# ==================== MOTION LAWS ====================
class MotionLaws:
    """
    Normalized cam motion laws.
    Each method takes the normalized segment time u (0 to 1) and returns the
    shape factors (displacement, velocity, acceleration, jerk) for a unit lift
    over a unit span.
    """

    @staticmethod
    def dwell(u: np.ndarray) -> Factors:
        zero = np.zeros_like(u)
        return zero, zero.copy(), zero.copy(), zero.copy()

    @staticmethod
    def uniform(u: np.ndarray) -> Factors:
        """Constant velocity; acceleration is impulsive at the ends"""
        return u.copy(), np.ones_like(u), np.zeros_like(u), np.zeros_like(u)

    @staticmethod
    def parabolic(u: np.ndarray) -> Factors:
        """
        Uniform acceleration (parabolic motion)
        Acceleration in first half, deceleration in second half
        """
        first_half = u <= 0.5
        s = np.where(first_half, 2 * u**2, 1 - 2 * (1 - u)**2)
        v = np.where(first_half, 4 * u, 4 * (1 - u))
        a = np.where(first_half, 4.0, -4.0)
        return s, v, a, np.zeros_like(u)

    @staticmethod
    def harmonic(u: np.ndarray) -> Factors:
        """Simple harmonic motion"""
        angle = np.pi * u
        s = (1 - np.cos(angle)) / 2
        v = (np.pi / 2) * np.sin(angle)
        a = (np.pi**2 / 2) * np.cos(angle)
        j = -(np.pi**3 / 2) * np.sin(angle)
        return s, v, a, j

    @staticmethod
    def cycloidal(u: np.ndarray) -> Factors:
        """Cycloidal motion (zero velocity and acceleration at both ends)"""
        angle = 2 * np.pi * u
        s = u - np.sin(angle) / (2 * np.pi)
        v = 1 - np.cos(angle)
        a = 2 * np.pi * np.sin(angle)
        j = 4 * np.pi**2 * np.cos(angle)
        return s, v, a, j

    @staticmethod
    def polynomial_345(u: np.ndarray) -> Factors:
        """3-4-5 polynomial (zero velocity and acceleration at both ends)"""
        u2 = u * u
        u3 = u2 * u
        s = 10 * u3 - 15 * u3 * u + 6 * u3 * u2
        v = 30 * u2 - 60 * u3 + 30 * u2 * u2
        a = 60 * u - 180 * u2 + 120 * u3
        j = 60 - 360 * u + 360 * u2
        return s, v, a, j

    @staticmethod
    def get_motion_law(kind: MotionKind) -> Callable[[np.ndarray], Factors]:
        """Return the factor function for a motion law"""
        return _LAWS[MotionKind.parse(kind)]

    @staticmethod
    def factors(kind: MotionKind, u) -> Factors:
        """Evaluate a motion law at scalar or array u"""
        return MotionLaws.get_motion_law(kind)(np.asarray(u, dtype=float))


_LAWS: Dict[MotionKind, Callable[[np.ndarray], Factors]] = {
    MotionKind.DWELL: MotionLaws.dwell,
    MotionKind.UNIFORM: MotionLaws.uniform,
    MotionKind.PARABOLIC: MotionLaws.parabolic,
    MotionKind.HARMONIC: MotionLaws.harmonic,
    MotionKind.CYCLOIDAL: MotionLaws.cycloidal,
    MotionKind.POLYNOMIAL_345: MotionLaws.polynomial_345,
}


# ==================== SEGMENT LAYOUT ====================
@dataclass(frozen=True)
class SegmentSpan:
    """A motion segment placed on the cam angle axis"""
    kind: MotionKind
    start_angle: float
    duration: float
    start_lift: float
    delta_lift: float

    @property
    def end_angle(self) -> float:
        return self.start_angle + self.duration

    @property
    def end_lift(self) -> float:
        return self.start_lift + self.delta_lift


def layout_segments(segments: Sequence[MotionSegment]) -> List[SegmentSpan]:
    """Accumulate start/end angles and lifts over the ordered segments"""
    spans = []
    angle = 0.0
    lift = 0.0
    for segment in segments:
        duration = float(segment.duration)
        delta = float(segment.delta_lift)
        spans.append(SegmentSpan(MotionKind.parse(segment.kind), angle, duration, lift, delta))
        angle += duration
        lift += delta
    return spans


def sample_angles(angular_step: float) -> np.ndarray:
    """
    Evenly spaced cam angles over [0, 360], both ends included.
    The last sample is clamped to 360 when the step does not divide the turn.
    """
    if not angular_step > 0:
        raise ValueError(f"angular_step must be positive (got {angular_step})")
    count = int(math.ceil(FULL_TURN / angular_step - EPSILON))
    angles = np.minimum(np.arange(count + 1) * angular_step, FULL_TURN)
    if count > 0:
        angles[-1] = FULL_TURN
    return angles


def _active_segments(spans: List[SegmentSpan], theta: np.ndarray) -> np.ndarray:
    """Walk a cursor over the spans; index len(spans) marks the tail past the last segment"""
    index = np.empty(theta.size, dtype=int)
    cursor = 0
    for k, angle in enumerate(theta):
        while cursor < len(spans) and angle > spans[cursor].end_angle + EPSILON:
            cursor += 1
        index[k] = cursor
    return index


def evaluate_motion(spans: List[SegmentSpan], theta: np.ndarray) -> Factors:
    """Displacement, velocity, acceleration and jerk of the follower at each angle"""
    final_lift = spans[-1].end_lift if spans else 0.0
    s = np.full(theta.shape, final_lift, dtype=float)
    v = np.zeros(theta.shape)
    a = np.zeros(theta.shape)
    j = np.zeros(theta.shape)

    index = _active_segments(spans, theta)
    tail = index >= len(spans)
    if tail.any():
        log.debug("Segments end at %.3f deg; holding lift %.4f for %d samples past the cycle",
                  spans[-1].end_angle if spans else 0.0, final_lift, int(tail.sum()))

    for i, span in enumerate(spans):
        mask = index == i
        if not mask.any():
            continue
        beta = span.duration
        h = span.delta_lift
        if beta < EPSILON:
            log.debug("Segment %d (%s) has no angular span; treated as an instantaneous dwell",
                      i, span.kind.value)
            u = np.zeros(int(mask.sum()))
        else:
            u = np.clip((theta[mask] - span.start_angle) / beta, 0.0, 1.0)

        f_s, f_v, f_a, f_j = _LAWS[span.kind](u)
        s[mask] = span.start_lift + h * f_s

        beta_rad = np.radians(beta)
        if beta_rad < EPSILON:
            continue
        v[mask] = h / beta_rad * f_v
        a[mask] = h / beta_rad**2 * f_a
        j[mask] = h / beta_rad**3 * f_j

    return s, v, a, j


def generate_motion(segments: Sequence[MotionSegment],
                    angular_step: float = 0.5) -> Tuple[KinematicPoint, ...]:
    """
    Sample the follower motion over one cam revolution.
    Returns ceil(360 / angular_step) + 1 points with strictly increasing theta
    from 0 to 360 degrees.
    """
    theta = sample_angles(angular_step)
    spans = layout_segments(segments)
    s, v, a, j = evaluate_motion(spans, theta)
    return tuple(
        KinematicPoint(float(t), float(si), float(vi), float(ai), float(ji))
        for t, si, vi, ai, ji in zip(theta, s, v, a, j)
    )
