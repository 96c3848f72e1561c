import argparse
import logging
import sys
from typing import List, Optional

from .analysis import DEFAULT_PRESSURE_LIMIT, evaluate_design, summarize_segments
from .config import CamDesign, check_step, load_design
from .profile import simulate

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='cam-designer',
        description='Generate the follower motion and cam profile for a design and report its validity.')
    parser.add_argument('config', nargs='?', help='JSON design file (defaults to the built-in example cycle)')
    parser.add_argument('--step', type=float, help='angular step in degrees (overrides the design file)')
    parser.add_argument('--pressure-limit', type=float, default=DEFAULT_PRESSURE_LIMIT,
                        help='largest acceptable |pressure angle| in degrees (default: %(default)s)')
    parser.add_argument('--every', type=int, default=0, metavar='N',
                        help='also print every Nth sampled point')
    parser.add_argument('-v', '--verbose', action='store_true', help='enable debug logging')
    return parser


def print_report(design: CamDesign, points, pressure_limit: float, every: int = 0):
    geometry = design.geometry
    summary = summarize_segments(design.segments)
    report = evaluate_design(points, pressure_limit=pressure_limit)

    print(f"Follower: {geometry.follower_type.value}, rotation {geometry.rotation.value}")
    print(f"Base radius: {geometry.base_radius:g}   Roller radius: {geometry.follower_radius:g}   "
          f"Offset: {geometry.offset:g}")
    print(f"Segments: {len(design.segments)}   Total angle: {summary.total_angle:.2f} deg   "
          f"Net lift: {summary.net_lift:g}")
    if not summary.is_complete:
        print(f"Warning: segments cover {summary.total_angle:.2f} deg, not 360 deg")
    print(f"Lift range: {summary.min_lift:g} .. {summary.max_lift:g}")
    print(f"Max pressure angle: {report.max_pressure_angle:.2f} deg at {report.max_pressure_theta:.1f} deg "
          f"({'OK' if report.pressure_ok else 'exceeds'} {report.pressure_limit:g} deg limit)")
    print(f"Min radius of curvature: {report.min_radius_of_curvature:.3f} at {report.min_radius_theta:.1f} deg "
          f"({'OK' if report.curvature_ok else 'undercut'})")

    if every > 0:
        print()
        print(f"{'theta':>8} {'s':>10} {'v':>10} {'a':>10} {'j':>12} {'x':>10} {'y':>10} "
              f"{'PA':>8} {'rho':>10}")
        for p in points[::every]:
            print(f"{p.theta:8.2f} {p.s:10.4f} {p.v:10.4f} {p.a:10.4f} {p.j:12.4f} "
                  f"{p.x:10.4f} {p.y:10.4f} {p.pressure_angle:8.3f} {p.radius_of_curvature:10.4f}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        design = load_design(args.config) if args.config else CamDesign()
        step = check_step(args.step) if args.step is not None else design.step
        points = simulate(design.segments, design.geometry, step)
    except (OSError, ValueError) as e:
        print(f"Input Error: {e}", file=sys.stderr)
        return 2

    log.debug("Computed %d points at %g deg spacing", len(points), step)
    print_report(design, points, args.pressure_limit, args.every)
    return 0
