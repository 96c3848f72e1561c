"""
Cam profile synthesis by kinematic inversion.

The follower contact point is first located in the home frame (cam held
still, follower swept through the cycle).  Rotating it by the cam angle gives
the outline in the cam's own frame.  Pressure angle and radius of curvature
come from the analytic derivatives of that rotated curve:

    Q'  = P' + sigma * J P
    Q'' = P'' + 2 sigma * J P' - P

where P is the home-frame point, J the +90 degree rotation and sigma the
sweep sense (-1 for a clockwise cam, +1 for counter-clockwise).
"""
import logging
import math
from typing import Callable, Dict, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .motion import EPSILON, generate_motion
from .params import (CamGeometry, FollowerType, KinematicPoint, MotionSegment,
                     ProfilePoint, SampledPoint)

log = logging.getLogger(__name__)


class Kinematics(NamedTuple):
    theta: np.ndarray  # radians
    s: np.ndarray
    v: np.ndarray
    a: np.ndarray
    j: np.ndarray


class HomeFrame(NamedTuple):
    """
    Home-frame contact trajectory; every field is a (2, N) array.
    travel: unit direction of the follower's constraint at the contact point
    """
    point: np.ndarray
    velocity: np.ndarray
    acceleration: np.ndarray
    travel: np.ndarray


def _perp(vec: np.ndarray) -> np.ndarray:
    """Rotate planar vectors by +90 degrees"""
    return np.array([-vec[1], vec[0]])


def _cross(p: np.ndarray, q: np.ndarray) -> np.ndarray:
    return p[0] * q[1] - p[1] * q[0]


def _dot(p: np.ndarray, q: np.ndarray) -> np.ndarray:
    return p[0] * q[0] + p[1] * q[1]


# ==================== FOLLOWER VARIANTS ====================
def prime_radius(geometry: CamGeometry) -> float:
    """Prime circle radius of a translating roller follower, sqrt((rb + r0)^2 - e^2)"""
    squared = (geometry.base_radius + geometry.follower_radius)**2 - geometry.offset**2
    if squared < 0:
        log.debug("Offset %.4f exceeds rb + r0; prime circle radius clamped to 0", geometry.offset)
    return math.sqrt(max(0.0, squared))


def reference_arm_angle(geometry: CamGeometry) -> float:
    """Arm angle phi0 (radians) of an oscillating follower at zero lift"""
    r1 = geometry.pivot_distance
    r3 = geometry.arm_length
    rb = geometry.base_radius

    if geometry.follower_type is FollowerType.OSCILLATING_FLAT:
        denominator = rb + geometry.offset
        if abs(denominator) < EPSILON:
            log.debug("rb + e vanishes; flat-face reference angle taken at AE = 0")
            ae = 0.0
        else:
            ae = r1 * rb / denominator
        de = math.sqrt(max(0.0, ae * ae - rb * rb))
        return math.atan2(rb, de)

    denominator = 2 * r1 * r3
    if abs(denominator) < EPSILON:
        log.debug("Pivot distance or arm length is zero; reference arm angle taken as 0")
        return 0.0
    cosine = (r1**2 + r3**2 - (rb + geometry.follower_radius)**2) / denominator
    return math.acos(min(1.0, max(-1.0, cosine)))


def _translating_roller(geometry: CamGeometry, kin: Kinematics, sense: int) -> HomeFrame:
    radius = prime_radius(geometry) + kin.s
    zero = np.zeros_like(kin.s)
    return HomeFrame(
        point=np.array([radius, np.full_like(kin.s, -geometry.offset)]),
        velocity=np.array([kin.v, zero]),
        acceleration=np.array([kin.a, zero]),
        travel=np.array([np.ones_like(kin.s), zero]),
    )


def _translating_flat(geometry: CamGeometry, kin: Kinematics, sense: int) -> HomeFrame:
    # The contact point slides along the face by v, on the side the cam sweeps toward
    zero = np.zeros_like(kin.s)
    return HomeFrame(
        point=np.array([geometry.base_radius + kin.s, sense * kin.v]),
        velocity=np.array([kin.v, sense * kin.a]),
        acceleration=np.array([kin.a, sense * kin.j]),
        travel=np.array([np.ones_like(kin.s), zero]),
    )


def _oscillating_tip(geometry: CamGeometry, kin: Kinematics, sense: int) -> HomeFrame:
    """Arm tip swung about the pivot at (r1, 0); lift is in degrees of arm swing"""
    r1 = geometry.pivot_distance
    r3 = geometry.arm_length
    phi = reference_arm_angle(geometry) + np.radians(kin.s)
    phi_dot = np.radians(kin.v)
    phi_ddot = np.radians(kin.a)

    sin_phi = np.sin(phi)
    cos_phi = np.cos(phi)
    d_tip = np.array([r3 * sin_phi, r3 * cos_phi])
    dd_tip = np.array([r3 * cos_phi, -r3 * sin_phi])
    return HomeFrame(
        point=np.array([r1 - r3 * cos_phi, r3 * sin_phi]),
        velocity=d_tip * phi_dot,
        acceleration=dd_tip * phi_dot**2 + d_tip * phi_ddot,
        travel=np.array([sin_phi, cos_phi]),
    )


def _flat_face_metrics(geometry: CamGeometry, kin: Kinematics) -> Tuple[np.ndarray, np.ndarray]:
    # The force line is always normal to the face, i.e. along the line of travel
    return np.zeros_like(kin.s), geometry.base_radius + kin.s + kin.a


class Variant(NamedTuple):
    home_frame: Callable[[CamGeometry, Kinematics, int], HomeFrame]
    closed_form: Optional[Callable[[CamGeometry, Kinematics], Tuple[np.ndarray, np.ndarray]]] = None


VARIANTS: Dict[FollowerType, Variant] = {
    FollowerType.TRANSLATING_ROLLER: Variant(_translating_roller),
    FollowerType.TRANSLATING_FLAT: Variant(_translating_flat, _flat_face_metrics),
    FollowerType.OSCILLATING_ROLLER: Variant(_oscillating_tip),
    FollowerType.OSCILLATING_FLAT: Variant(_oscillating_tip),
}


# ==================== SHARED PROCEDURE ====================
def _cam_frame_derivatives(frame: HomeFrame, sense: int) -> Tuple[np.ndarray, np.ndarray]:
    first = frame.velocity + sense * _perp(frame.point)
    second = frame.acceleration + 2 * sense * _perp(frame.velocity) - frame.point
    return first, second


def pressure_angle(frame: HomeFrame, sense: int) -> np.ndarray:
    """Angle (degrees) between the constraint direction and the contact normal, in [-90, 90]"""
    first, _ = _cam_frame_derivatives(frame, sense)
    along = _dot(frame.travel, first)
    across = sense * _dot(_perp(frame.travel), first)
    sign = np.where(across < 0, -1.0, 1.0)
    return np.degrees(np.arctan2(along * sign, np.abs(across)))


def curvature(frame: HomeFrame, sense: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Radius of curvature of the swept contact curve and a convexity mask.
    A straight stretch gives inf; a stationary point gives 0.
    """
    first, second = _cam_frame_derivatives(frame, sense)
    speed = np.hypot(first[0], first[1])
    cross = _cross(first, second)
    with np.errstate(divide='ignore', invalid='ignore'):
        rho = speed**3 / np.abs(cross)
    rho = np.where(np.abs(cross) < EPSILON, np.where(speed < EPSILON, 0.0, np.inf), rho)
    return rho, sense * cross >= 0


def contact_points(frame: HomeFrame, sense: int, roller_radius: float) -> np.ndarray:
    """Home-frame cam surface points: the roller centre moved inward by the roller radius"""
    if roller_radius == 0:
        return frame.point
    first, _ = _cam_frame_derivatives(frame, sense)
    speed = np.hypot(first[0], first[1])
    distance = np.hypot(frame.point[0], frame.point[1])
    with np.errstate(divide='ignore', invalid='ignore'):
        tangent = first / speed
        radial = frame.point / distance
    normal = -sense * _perp(tangent)
    # Where the curve stalls fall back to the radial direction
    normal = np.where(speed < EPSILON, np.where(distance < EPSILON, 0.0, radial), normal)
    return frame.point - roller_radius * normal


def rotate_to_cam(points: np.ndarray, angle: np.ndarray) -> np.ndarray:
    cos_a = np.cos(angle)
    sin_a = np.sin(angle)
    return np.array([points[0] * cos_a - points[1] * sin_a,
                     points[0] * sin_a + points[1] * cos_a])


# ==================== SYNTHESIS ====================
def _kinematic_arrays(kinematics: Sequence[KinematicPoint]) -> Kinematics:
    rows = np.array([[p.theta, p.s, p.v, p.a, p.j] for p in kinematics], dtype=float).reshape(-1, 5)
    theta, s, v, a, j = rows.T
    return Kinematics(np.radians(theta), s, v, a, j)


def synthesize_cam_profile(kinematics: Sequence[KinematicPoint],
                           geometry: CamGeometry) -> Tuple[ProfilePoint, ...]:
    """
    Cam outline, pressure angle and radius of curvature for each kinematic sample.
    The result is index-aligned with the input sequence.
    """
    if geometry.base_radius < 0:
        raise ValueError(f"base_radius must not be negative (got {geometry.base_radius})")
    kin = _kinematic_arrays(kinematics)
    if kin.theta.size == 0:
        return ()

    sense = geometry.rotation.sign
    variant = VARIANTS[geometry.follower_type]
    frame = variant.home_frame(geometry, kin, sense)

    roller = geometry.follower_radius if geometry.follower_type.is_roller else 0.0
    if variant.closed_form is not None:
        pressure, radius = variant.closed_form(geometry, kin)
    else:
        pressure = pressure_angle(frame, sense)
        rho, convex = curvature(frame, sense)
        radius = np.where(convex, rho - roller, rho + roller)

    angle = sense * kin.theta + math.radians(geometry.start_angle_offset)
    outline = rotate_to_cam(frame.point, angle)
    contact = rotate_to_cam(contact_points(frame, sense, roller), angle)

    return tuple(
        ProfilePoint(float(x), float(y), float(pa), float(rc), float(cx), float(cy))
        for x, y, pa, rc, cx, cy in zip(outline[0], outline[1], pressure, radius,
                                        contact[0], contact[1])
    )


def simulate(segments: Sequence[MotionSegment], geometry: CamGeometry,
             angular_step: float = 0.5) -> Tuple[SampledPoint, ...]:
    """Run the motion generator and the profile synthesizer back to back"""
    kinematics = generate_motion(segments, angular_step)
    profile = synthesize_cam_profile(kinematics, geometry)
    return tuple(SampledPoint.merge(k, p) for k, p in zip(kinematics, profile))
