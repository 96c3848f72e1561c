import math

import numpy as np
import pytest

from cam_designer import MotionKind, MotionSegment, generate_motion
from cam_designer.motion import layout_segments, sample_angles


@pytest.mark.parametrize("step, count", [(0.5, 721), (1.0, 361), (0.7, 516), (0.3, 1201), (45, 9)])
def test_sample_count_and_endpoints(step, count):
    points = generate_motion([MotionSegment(MotionKind.DWELL, 360, 0)], step)
    thetas = [p.theta for p in points]
    assert len(points) == count
    assert thetas[0] == 0.0
    assert thetas[-1] == 360.0
    assert all(b > a for a, b in zip(thetas, thetas[1:]))


def test_last_sample_is_clamped_to_full_turn():
    angles = sample_angles(0.7)
    assert angles[-2] == pytest.approx(359.8)
    assert angles[-1] == 360.0


@pytest.mark.parametrize("step", [0, -0.5, float('nan')])
def test_non_positive_step_is_rejected(step):
    with pytest.raises(ValueError, match="angular_step"):
        generate_motion([MotionSegment(MotionKind.DWELL, 360, 0)], step)


def test_full_cycle_dwell_is_at_rest():
    points = generate_motion([MotionSegment(MotionKind.DWELL, 360, 0)], 0.5)
    assert all(p.s == 0 and p.v == 0 and p.a == 0 and p.j == 0 for p in points)


def test_layout_accumulates_angles_and_lifts(reference_segments):
    spans = layout_segments(reference_segments)
    assert [span.start_angle for span in spans] == [0, 20, 80, 100, 160, 180]
    assert [span.end_lift for span in spans] == [0, 10, 10, 30, 30, 0]
    assert spans[-1].end_angle == 360


def test_reference_cycle_closes_and_stays_in_lift_range(reference_segments):
    points = generate_motion(reference_segments, 0.5)
    assert points[0].s == pytest.approx(0.0, abs=1e-12)
    assert points[-1].s == pytest.approx(0.0, abs=1e-12)
    lifts = np.array([p.s for p in points])
    assert lifts.max() <= 30 + 1e-9
    assert lifts.min() >= -1e-9


def test_reference_cycle_mid_rise_values(reference_segments):
    points = generate_motion(reference_segments, 0.5)
    # theta = 50 is halfway through the first cycloidal rise (20..80, +10)
    mid = points[100]
    assert mid.theta == 50.0
    assert mid.s == pytest.approx(5.0)
    assert mid.v == pytest.approx(10 / math.radians(60) * 2)
    assert mid.a == pytest.approx(0.0, abs=1e-9)
    assert mid.j == pytest.approx(-10 / math.radians(60)**3 * 4 * math.pi**2)


def test_boundary_sample_belongs_to_the_earlier_segment(reference_segments):
    points = generate_motion(reference_segments, 0.5)
    # theta = 80 ends the first rise; the cycloidal jerk there is nonzero while the next dwell has none
    end_of_rise = points[160]
    assert end_of_rise.theta == 80.0
    assert end_of_rise.s == pytest.approx(10.0)
    assert end_of_rise.j != 0
    assert points[161].j == 0


def test_uniform_velocity_is_constant():
    points = generate_motion([MotionSegment(MotionKind.UNIFORM, 180, 90),
                              MotionSegment(MotionKind.UNIFORM, 180, -90)], 1.0)
    assert points[45].v == pytest.approx(90 / math.pi)
    assert points[270].v == pytest.approx(-90 / math.pi)
    assert points[45].a == 0


def test_incomplete_cycle_holds_final_lift():
    points = generate_motion([MotionSegment(MotionKind.HARMONIC, 90, 10)], 1.0)
    assert points[90].s == pytest.approx(10.0)
    for p in points[91:]:
        assert (p.s, p.v, p.a, p.j) == (10.0, 0.0, 0.0, 0.0)


def test_no_segments_gives_zero_motion():
    points = generate_motion([], 1.0)
    assert len(points) == 361
    assert all(p.s == 0 for p in points)


def test_zero_duration_segment_is_an_instantaneous_dwell():
    points = generate_motion([MotionSegment(MotionKind.UNIFORM, 0, 5),
                              MotionSegment(MotionKind.DWELL, 360, 0)], 0.5)
    assert points[0].s == 0.0
    assert points[1].s == 5.0
    assert all(p.v == 0 and p.a == 0 and p.j == 0 for p in points)


def _jump(points, index, attr):
    return abs(getattr(points[index + 1], attr) - getattr(points[index], attr))


def test_smooth_laws_join_without_velocity_or_acceleration_jumps():
    points = generate_motion([MotionSegment(MotionKind.CYCLOIDAL, 90, 10),
                              MotionSegment(MotionKind.CYCLOIDAL, 90, -10),
                              MotionSegment(MotionKind.DWELL, 180, 0)], 0.05)
    boundary = 1800
    assert points[boundary].theta == pytest.approx(90.0)
    assert _jump(points, boundary, 'v') < 0.01
    assert _jump(points, boundary, 'a') < 0.5


def test_dwell_to_harmonic_has_an_acceleration_jump():
    points = generate_motion([MotionSegment(MotionKind.DWELL, 180, 0),
                              MotionSegment(MotionKind.HARMONIC, 90, 10),
                              MotionSegment(MotionKind.HARMONIC, 90, -10)], 0.05)
    boundary = 3600
    assert points[boundary].theta == pytest.approx(180.0)
    assert _jump(points, boundary, 'a') > 10


def test_output_rows_are_immutable(reference_segments):
    point = generate_motion(reference_segments, 1.0)[0]
    with pytest.raises(AttributeError):
        point.s = 1.0
