"""
test_thresholds.py: classification of fit metrics into ok / warning / critical.

Boundary values are tested explicitly because the comparison operators
differ between metrics (e.g. <= 134 critical but < 137 warning).
"""

import pytest

from bikefit.kinematics.geometry_engine import compute_geometry
from bikefit.schemas import GeometryResult
from bikefit.thresholds import (
    FitStatus,
    classify_ankle_270,
    classify_elbow,
    classify_knee_270,
    classify_knee_90,
    classify_knee_to_pedal,
    classify_saddle_handlebar_drop,
    classify_shoulder,
    evaluate_fit,
)

OK, WARNING, CRITICAL = FitStatus.OK, FitStatus.WARNING, FitStatus.CRITICAL


def _result(**metrics) -> GeometryResult:
    values = {
        "knee_angle": 140.0,
        "knee_angle_at_90": 145.0,
        "knee_angle_at_270": 75.0,
        "saddle_handlebar_drop": 50.0,
        "knee_to_pedal_x_at_0": 10.0,
        "shoulder_angle": 90.0,
        "elbow_angle": 150.0,
        "ankle_angle_at_270": 90.0,
    }
    values.update(metrics)
    return GeometryResult(points={}, **values)


@pytest.mark.parametrize("angle, expected", [
    (145, OK),
    (137, OK),
    (149, OK),
    (135, WARNING),
    (136.9, WARNING),
    (149.1, WARNING),
    (152.9, WARNING),
    (130, CRITICAL),
    (134, CRITICAL),
    (153, CRITICAL),
    (170, CRITICAL),
])
def test_knee_90(angle, expected):
    assert classify_knee_90(angle) == expected


@pytest.mark.parametrize("angle, expected", [
    (80, OK),
    (67, OK),
    (66.9, WARNING),
    (60.1, WARNING),
    (60, CRITICAL),
    (45, CRITICAL),
])
def test_knee_270(angle, expected):
    assert classify_knee_270(angle) == expected


@pytest.mark.parametrize("drop, expected", [
    (-20, OK),
    (90, OK),
    (90.5, WARNING),
    (130, WARNING),
    (130.1, CRITICAL),
])
def test_saddle_handlebar_drop(drop, expected):
    assert classify_saddle_handlebar_drop(drop) == expected


@pytest.mark.parametrize("offset, expected", [
    (0, OK),
    (25, OK),
    (-0.1, WARNING),
    (-80, WARNING),
])
def test_knee_to_pedal(offset, expected):
    assert classify_knee_to_pedal(offset) == expected


@pytest.mark.parametrize("angle, expected", [
    (85, OK),
    (100, OK),
    (75, WARNING),
    (84.9, WARNING),
    (110, WARNING),
    (74.9, CRITICAL),
    (110.1, CRITICAL),
])
def test_shoulder(angle, expected):
    assert classify_shoulder(angle) == expected


@pytest.mark.parametrize("angle, expected", [
    (140, OK),
    (159.9, OK),
    (139.9, WARNING),
    (160, WARNING),
    (170, WARNING),
    (170.1, CRITICAL),
    (180, CRITICAL),
])
def test_elbow(angle, expected):
    assert classify_elbow(angle) == expected


@pytest.mark.parametrize("angle, expected", [
    (50, OK),
    (95, OK),
    (49.9, CRITICAL),
])
def test_ankle_270(angle, expected):
    assert classify_ankle_270(angle) == expected


class TestEvaluateFit:

    def test_all_ok(self):
        report = evaluate_fit(_result())
        assert report.worst == OK
        assert report.flagged() == []
        assert len(report.checks) == 7

    def test_worst_is_critical_when_any_critical(self):
        report = evaluate_fit(_result(knee_angle_at_270=55.0, elbow_angle=165.0))
        assert report.worst == CRITICAL
        flagged = {c.name: c.status for c in report.flagged()}
        assert flagged == {"knee_angle_at_270": CRITICAL, "elbow_angle": WARNING}

    def test_by_name_carries_values(self):
        report = evaluate_fit(_result(saddle_handlebar_drop=100.0))
        check = report.by_name()["saddle_handlebar_drop"]
        assert check.value == 100.0
        assert check.status == WARNING

    def test_current_knee_angle_is_not_classified(self):
        report = evaluate_fit(_result(knee_angle=10.0))
        assert "knee_angle" not in report.by_name()
        assert report.worst == OK

    def test_reference_bike_report(self, reference_bike):
        result = compute_geometry(reference_bike)
        report = evaluate_fit(result).by_name()
        assert report["knee_angle_at_90"].value == result.knee_angle_at_90
        assert report["knee_angle_at_90"].status == classify_knee_90(result.knee_angle_at_90)
        assert report["ankle_angle_at_270"].status == classify_ankle_270(result.ankle_angle_at_270)
