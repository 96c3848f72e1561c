"""
Design configuration: default cycle and geometry, plus reading a design from
a dict or JSON file.  Keys may be snake_case or the camelCase names used by
the browser front end.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from .params import CamGeometry, FollowerType, MotionKind, MotionSegment, Rotation

log = logging.getLogger(__name__)

DEFAULT_STEP = 0.5  # degrees
MIN_STEP = 0.01  # finest step a design may ask for

DEFAULT_SEGMENTS: Tuple[MotionSegment, ...] = (
    MotionSegment(MotionKind.DWELL, 20, 0, 'Dwell 1'),
    MotionSegment(MotionKind.CYCLOIDAL, 60, 10, 'Rise 1'),
    MotionSegment(MotionKind.DWELL, 20, 0, 'Dwell 2'),
    MotionSegment(MotionKind.CYCLOIDAL, 60, 20, 'Rise 2'),
    MotionSegment(MotionKind.DWELL, 20, 0, 'Dwell 3'),
    MotionSegment(MotionKind.HARMONIC, 180, -30, 'Return 1'),
)

_SEGMENT_KEYS = {
    'kind': ('kind', 'type', 'motion_law'),
    'duration': ('duration',),
    'delta_lift': ('delta_lift', 'deltaLift', 'lift'),
    'label': ('label', 'id', 'name'),
}

_GEOMETRY_KEYS = {
    'follower_type': ('follower_type', 'followerType'),
    'base_radius': ('base_radius', 'baseRadius', 'base_circle_radius'),
    'follower_radius': ('follower_radius', 'followerRadius', 'roller_radius'),
    'offset': ('offset',),
    'pivot_distance': ('pivot_distance', 'pivotDistance'),
    'arm_length': ('arm_length', 'followerLength', 'follower_length'),
    'start_angle_offset': ('start_angle_offset', 'startAngleOffset'),
    'rotation': ('rotation',),
}


@dataclass(frozen=True)
class CamDesign:
    """Everything one run needs"""
    segments: Tuple[MotionSegment, ...] = DEFAULT_SEGMENTS
    geometry: CamGeometry = field(default_factory=CamGeometry)
    step: float = DEFAULT_STEP


def _pick(data: Dict[str, Any], names: Tuple[str, ...]):
    for name in names:
        if name in data:
            return name, data[name]
    return None, None


def _number(value, where: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{where}: expected a number, got {value!r}") from None


def check_step(step: float) -> float:
    """Reject a configured step that is not positive or finer than MIN_STEP"""
    if not step >= MIN_STEP:
        raise ValueError(f"step must be at least {MIN_STEP:g} deg (got {step:g})")
    return step


def segment_from_dict(data: Dict[str, Any], index: int = 0) -> MotionSegment:
    where = f"segments[{index}]"
    if not isinstance(data, dict):
        raise ValueError(f"{where}: expected an object, got {data!r}")
    values = {}
    for attr, names in _SEGMENT_KEYS.items():
        key, value = _pick(data, names)
        if key is None:
            continue
        if attr == 'kind':
            values[attr] = MotionKind.parse(value)
        elif attr == 'label':
            values[attr] = str(value)
        else:
            values[attr] = _number(value, f"{where}.{key}")
    if 'duration' not in values:
        raise ValueError(f"{where}: missing duration")
    return MotionSegment(**values)


def geometry_from_dict(data: Dict[str, Any]) -> CamGeometry:
    if not isinstance(data, dict):
        raise ValueError(f"cam: expected an object, got {data!r}")
    values = {}
    for attr, names in _GEOMETRY_KEYS.items():
        key, value = _pick(data, names)
        if key is None:
            continue
        if attr == 'follower_type':
            values[attr] = FollowerType.parse(value)
        elif attr == 'rotation':
            values[attr] = Rotation.parse(value)
        else:
            values[attr] = _number(value, f"cam.{key}")
    return CamGeometry(**values)


def design_from_dict(data: Dict[str, Any]) -> CamDesign:
    """Build a design; absent sections fall back to the defaults"""
    if not isinstance(data, dict):
        raise ValueError(f"Design must be an object, got {type(data).__name__}")
    design = CamDesign()

    if 'segments' in data:
        raw = data['segments']
        if not isinstance(raw, list):
            raise ValueError("segments: expected a list")
        segments = tuple(segment_from_dict(item, i) for i, item in enumerate(raw))
    else:
        segments = design.segments

    _, cam = _pick(data, ('cam', 'geometry', 'camParams'))
    geometry = geometry_from_dict(cam) if cam is not None else design.geometry

    _, step = _pick(data, ('step', 'angular_step', 'stepSize'))
    step = check_step(_number(step, 'step')) if step is not None else design.step
    return CamDesign(segments, geometry, step)


def load_design(filename: str) -> CamDesign:
    """Read a design from a JSON file"""
    with open(filename) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"{filename}: invalid JSON ({e})") from None
    log.debug("Loaded design from %s", filename)
    return design_from_dict(data)


def segment_to_dict(segment: MotionSegment) -> Dict[str, Any]:
    return {
        'kind': segment.kind.value,
        'duration': segment.duration,
        'delta_lift': segment.delta_lift,
        'label': segment.label,
    }


def design_to_dict(design: CamDesign) -> Dict[str, Any]:
    geometry = design.geometry
    cam: Dict[str, Any] = {
        'follower_type': geometry.follower_type.value,
        'base_radius': geometry.base_radius,
        'follower_radius': geometry.follower_radius,
        'offset': geometry.offset,
        'pivot_distance': geometry.pivot_distance,
        'arm_length': geometry.arm_length,
        'start_angle_offset': geometry.start_angle_offset,
        'rotation': geometry.rotation.value,
    }
    segments: List[Dict[str, Any]] = [segment_to_dict(s) for s in design.segments]
    return {'step': design.step, 'segments': segments, 'cam': cam}
