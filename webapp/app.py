import math
from dataclasses import asdict

from flask import Flask, jsonify, request

from cam_designer import (CamDesign, design_from_dict, design_to_dict, evaluate_design,
                          generate_motion, simulate, summarize_segments)

app = Flask(__name__)


def _finite(value):
    return value if math.isfinite(value) else None


def _rows(points):
    return [{key: _finite(value) for key, value in asdict(p).items()} for p in points]


def _read_design():
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValueError("Expected a JSON body")
    design = design_from_dict(payload)

    summary = summarize_segments(design.segments)
    if not summary.is_complete:
        raise ValueError(f"Total cam angle must be 360°. Current total = {summary.total_angle:.2f}°")
    return design, summary


def _summary(summary):
    return {'total_angle': summary.total_angle, 'net_lift': summary.net_lift,
            'cumulative_lifts': list(summary.cumulative_lifts)}


def _bad_request(error):
    return jsonify(error=f"Invalid input: {error}"), 400


@app.route('/api/defaults', methods=['GET'])
def defaults():
    return jsonify(design_to_dict(CamDesign()))


@app.route('/api/motion', methods=['POST'])
def motion():
    try:
        design, summary = _read_design()
        points = generate_motion(design.segments, design.step)
    except ValueError as e:
        return _bad_request(e)

    return jsonify(
        points=_rows(points),
        summary=_summary(summary),
    )


@app.route('/api/design', methods=['POST'])
def design():
    try:
        cam_design, summary = _read_design()
        points = simulate(cam_design.segments, cam_design.geometry, cam_design.step)
    except ValueError as e:
        return _bad_request(e)

    report = evaluate_design(points)
    return jsonify(
        design=design_to_dict(cam_design),
        points=_rows(points),
        summary=_summary(summary),
        report={
            'max_pressure_angle': report.max_pressure_angle,
            'max_pressure_theta': report.max_pressure_theta,
            'min_radius_of_curvature': _finite(report.min_radius_of_curvature),
            'min_radius_theta': report.min_radius_theta,
            'pressure_ok': report.pressure_ok,
            'curvature_ok': report.curvature_ok,
        },
    )


if __name__ == "__main__":
    app.run(debug=True)
