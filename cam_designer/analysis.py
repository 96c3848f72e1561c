"""Caller-side helpers for inspecting a computed cam design."""
import math
from dataclasses import dataclass, fields
from typing import Dict, Sequence, Tuple

import numpy as np

from .motion import EPSILON, FULL_TURN
from .params import MotionSegment

DEFAULT_PRESSURE_LIMIT = 30.0  # degrees


def normalize_angle(angle: float) -> float:
    """Wrap an angle in degrees into [0, 360)"""
    wrapped = angle % FULL_TURN
    return 0.0 if wrapped == FULL_TURN else wrapped


def interpolate_lift(points: Sequence, theta: float) -> float:
    """
    Follower lift at an arbitrary cam angle, linearly interpolated from an
    evenly spaced run covering 0..360 degrees inclusive.
    """
    if not points:
        return 0.0
    if len(points) == 1:
        return points[0].s
    step = FULL_TURN / (len(points) - 1)
    position = normalize_angle(theta) / step
    lower = min(int(math.floor(position)), len(points) - 1)
    upper = min(lower + 1, len(points) - 1)
    ratio = position - lower
    return points[lower].s + (points[upper].s - points[lower].s) * ratio


@dataclass(frozen=True)
class CycleSummary:
    total_angle: float
    net_lift: float
    cumulative_lifts: Tuple[float, ...]
    max_lift: float
    min_lift: float

    @property
    def is_complete(self) -> bool:
        return abs(self.total_angle - FULL_TURN) <= EPSILON

    @property
    def remaining_angle(self) -> float:
        return max(0.0, FULL_TURN - self.total_angle)


def summarize_segments(segments: Sequence[MotionSegment]) -> CycleSummary:
    """Total span, running lifts and lift extremes of a segment list"""
    total = 0.0
    lift = 0.0
    lifts = []
    for segment in segments:
        total += float(segment.duration)
        lift += float(segment.delta_lift)
        lifts.append(lift)
    # The cycle starts at zero lift
    extremes = [0.0] + lifts
    return CycleSummary(total, lift, tuple(lifts), max(extremes), min(extremes))


@dataclass(frozen=True)
class DesignReport:
    """Pressure angle and curvature extremes checked against design thresholds"""
    max_pressure_angle: float
    max_pressure_theta: float
    min_radius_of_curvature: float
    min_radius_theta: float
    pressure_limit: float
    min_radius: float

    @property
    def pressure_ok(self) -> bool:
        return self.max_pressure_angle <= self.pressure_limit

    @property
    def curvature_ok(self) -> bool:
        return self.min_radius_of_curvature > self.min_radius

    @property
    def ok(self) -> bool:
        return self.pressure_ok and self.curvature_ok


def evaluate_design(points: Sequence, pressure_limit: float = DEFAULT_PRESSURE_LIMIT,
                    min_radius: float = 0.0) -> DesignReport:
    """Find the worst pressure angle and the tightest radius of curvature of a run"""
    if not points:
        raise ValueError("Cannot evaluate an empty run")
    steepest = max(points, key=lambda p: abs(p.pressure_angle))
    tightest = min(points, key=lambda p: p.radius_of_curvature)
    return DesignReport(
        max_pressure_angle=abs(steepest.pressure_angle),
        max_pressure_theta=steepest.theta,
        min_radius_of_curvature=tightest.radius_of_curvature,
        min_radius_theta=tightest.theta,
        pressure_limit=pressure_limit,
        min_radius=min_radius,
    )


def to_arrays(points: Sequence) -> Dict[str, np.ndarray]:
    """Column arrays keyed by field name"""
    if not points:
        return {}
    names = [f.name for f in fields(points[0])]
    return {name: np.array([getattr(p, name) for p in points]) for name in names}
