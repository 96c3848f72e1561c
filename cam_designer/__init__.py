"""Cam motion law generation and cam profile synthesis."""
from .analysis import (CycleSummary, DesignReport, evaluate_design, interpolate_lift,
                       normalize_angle, summarize_segments, to_arrays)
from .config import (CamDesign, DEFAULT_SEGMENTS, MIN_STEP, check_step, design_from_dict,
                     design_to_dict, load_design)
from .motion import MotionLaws, generate_motion
from .params import (CamGeometry, FollowerType, KinematicPoint, MotionKind, MotionSegment,
                     ProfilePoint, Rotation, SampledPoint)
from .profile import simulate, synthesize_cam_profile

__version__ = '0.1.0'

__all__ = [
    'CamDesign', 'CamGeometry', 'CycleSummary', 'DEFAULT_SEGMENTS', 'DesignReport', 'MIN_STEP',
    'FollowerType', 'KinematicPoint', 'MotionKind', 'MotionLaws', 'MotionSegment',
    'ProfilePoint', 'Rotation', 'SampledPoint', 'check_step', 'design_from_dict', 'design_to_dict',
    'evaluate_design', 'generate_motion', 'interpolate_lift', 'load_design',
    'normalize_angle', 'simulate', 'summarize_segments', 'synthesize_cam_profile',
    'to_arrays',
]
