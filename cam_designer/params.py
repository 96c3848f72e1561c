from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


def _lookup(enum_cls, value, aliases: Optional[Dict[str, str]] = None):
    """Resolve an enum member from a member, value, member name or alias"""
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip()
    key = text.lower()
    for member in enum_cls:
        if key in (member.value.lower(), member.name.lower()):
            return member
    if aliases and key in aliases:
        return enum_cls(aliases[key])
    choices = ', '.join(repr(member.value) for member in enum_cls)
    raise ValueError(f"Unknown {enum_cls.__name__} {text!r} (expected one of {choices})")


class MotionKind(Enum):
    """Motion laws available for a segment"""
    DWELL = 'Dwell'
    UNIFORM = 'Uniform'
    PARABOLIC = 'Parabolic'
    HARMONIC = 'Harmonic'
    CYCLOIDAL = 'Cycloidal'
    POLYNOMIAL_345 = 'Polynomial 3-4-5'

    @classmethod
    def parse(cls, value) -> 'MotionKind':
        return _lookup(cls, value, _MOTION_ALIASES)


_MOTION_ALIASES = {
    'shm': 'Harmonic',
    'simple harmonic': 'Harmonic',
    'simpleharmonic': 'Harmonic',
    'uniform velocity': 'Uniform',
    'uniform acceleration': 'Parabolic',
    '345': 'Polynomial 3-4-5',
    '3-4-5': 'Polynomial 3-4-5',
    'polynomial345': 'Polynomial 3-4-5',
}


class FollowerType(Enum):
    TRANSLATING_ROLLER = 'Translating Roller'
    TRANSLATING_FLAT = 'Translating Flat-Faced'
    OSCILLATING_ROLLER = 'Oscillating Roller'
    OSCILLATING_FLAT = 'Oscillating Flat-Faced'

    @classmethod
    def parse(cls, value) -> 'FollowerType':
        return _lookup(cls, value)

    @property
    def is_translating(self) -> bool:
        return self in (FollowerType.TRANSLATING_ROLLER, FollowerType.TRANSLATING_FLAT)

    @property
    def is_roller(self) -> bool:
        return self in (FollowerType.TRANSLATING_ROLLER, FollowerType.OSCILLATING_ROLLER)


class Rotation(Enum):
    """Sense of cam rotation, seen in a y-up frame"""
    CW = 'CW'
    CCW = 'CCW'

    @classmethod
    def parse(cls, value) -> 'Rotation':
        return _lookup(cls, value, {'clockwise': 'CW', 'counterclockwise': 'CCW',
                                    'counter-clockwise': 'CCW'})

    @property
    def sign(self) -> int:
        """-1 for CW, +1 for CCW: the sense in which the home frame is turned into the cam frame"""
        return -1 if self is Rotation.CW else 1


# ==================== INPUTS ====================
@dataclass(frozen=True)
class MotionSegment:
    """
    One phase of the motion cycle.
    duration: angular span in degrees
    delta_lift: signed lift change (mm for translating followers,
                degrees of arm swing for oscillating followers)
    """
    kind: MotionKind = MotionKind.DWELL
    duration: float = 90.0
    delta_lift: float = 0.0
    label: str = ''


@dataclass(frozen=True)
class CamGeometry:
    """Follower/cam geometry for one synthesis run"""
    follower_type: FollowerType = FollowerType.TRANSLATING_ROLLER
    base_radius: float = 40.0  # rb
    follower_radius: float = 10.0  # r0, rollers only
    offset: float = 0.0  # e, translating followers (flat-face eccentricity for oscillating flat)
    pivot_distance: float = 80.0  # r1, oscillating followers
    arm_length: float = 60.0  # r3, oscillating followers
    start_angle_offset: float = 0.0  # degrees
    rotation: Rotation = Rotation.CW

    def __post_init__(self):
        if self.base_radius < 0:
            raise ValueError(f"base_radius must not be negative (got {self.base_radius})")


# ==================== OUTPUTS ====================
@dataclass(frozen=True)
class KinematicPoint:
    """Follower kinematics at one cam angle; derivatives are taken w.r.t. cam angle in radians"""
    theta: float
    s: float
    v: float
    a: float
    j: float


@dataclass(frozen=True)
class ProfilePoint:
    """
    Cam geometry at one cam angle, in the rotating cam frame.
    x, y: reference (pitch) curve point
    contact_x, contact_y: follower/cam contact point on the cam surface
    """
    x: float
    y: float
    pressure_angle: float
    radius_of_curvature: float
    contact_x: float
    contact_y: float


@dataclass(frozen=True)
class SampledPoint:
    theta: float
    s: float
    v: float
    a: float
    j: float
    x: float
    y: float
    pressure_angle: float
    radius_of_curvature: float
    contact_x: float
    contact_y: float

    @classmethod
    def merge(cls, kinematics: KinematicPoint, profile: ProfilePoint) -> 'SampledPoint':
        return cls(kinematics.theta, kinematics.s, kinematics.v, kinematics.a, kinematics.j,
                   profile.x, profile.y, profile.pressure_angle, profile.radius_of_curvature,
                   profile.contact_x, profile.contact_y)
