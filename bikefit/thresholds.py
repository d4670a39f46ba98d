# bikefit/thresholds.py
"""
Warning thresholds for the fit metrics of a GeometryResult.

Each metric is classified ok / warning / critical. Critical bounds are
checked first; the comparison operators below are part of the contract
(e.g. a knee angle of exactly 134 deg at 90 deg is critical, 137 is ok).
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel

from bikefit.schemas import GeometryResult


class FitStatus(str, Enum):
    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"


_SEVERITY = {FitStatus.OK: 0, FitStatus.WARNING: 1, FitStatus.CRITICAL: 2}


# ---- Knee angle, crank at 90 deg (pedal down); ideal 137-149 ----
KNEE_90_MIN = 134            # <= critical
KNEE_90_MIN_WARNING = 137    # <  warning
KNEE_90_MAX_WARNING = 149    # >  warning
KNEE_90_MAX = 153            # >= critical

# ---- Knee angle, crank at 270 deg (pedal up); ideal > 67 ----
KNEE_270_MIN = 60            # <= critical
KNEE_270_MIN_WARNING = 67    # <  warning

# ---- Saddle to handlebar drop (mm); ideal < 90 ----
SADDLE_HANDLEBAR_DROP_WARNING = 90    # > warning
SADDLE_HANDLEBAR_DROP_CRITICAL = 130  # > critical

# ---- Knee ahead of the pedal axle at 0 deg (mm) ----
KNEE_PEDAL_X_MIN_WARNING = 0          # < warning, knee ahead of the axle

# ---- Shoulder angle, hip joint -> shoulder -> elbow; ideal 85-100 ----
SHOULDER_ANGLE_MIN = 75
SHOULDER_ANGLE_MIN_WARNING = 85
SHOULDER_ANGLE_MAX_WARNING = 100
SHOULDER_ANGLE_MAX = 110

# ---- Elbow angle, shoulder -> elbow -> hand; ideal 140-160 ----
ELBOW_ANGLE_MIN_WARNING = 140   # <  warning
ELBOW_ANGLE_MAX_WARNING = 160   # >= warning
ELBOW_ANGLE_CRITICAL = 170      # >  critical

# ---- Ankle angle at 270 deg, cleat -> foot contact -> knee ----
ANKLE_MIN = 50                  # < critical


def classify_knee_90(angle: float) -> FitStatus:
    if angle <= KNEE_90_MIN or angle >= KNEE_90_MAX:
        return FitStatus.CRITICAL
    if angle < KNEE_90_MIN_WARNING or angle > KNEE_90_MAX_WARNING:
        return FitStatus.WARNING
    return FitStatus.OK


def classify_knee_270(angle: float) -> FitStatus:
    if angle <= KNEE_270_MIN:
        return FitStatus.CRITICAL
    if angle < KNEE_270_MIN_WARNING:
        return FitStatus.WARNING
    return FitStatus.OK


def classify_saddle_handlebar_drop(drop_mm: float) -> FitStatus:
    if drop_mm > SADDLE_HANDLEBAR_DROP_CRITICAL:
        return FitStatus.CRITICAL
    if drop_mm > SADDLE_HANDLEBAR_DROP_WARNING:
        return FitStatus.WARNING
    return FitStatus.OK


def classify_knee_to_pedal(offset_mm: float) -> FitStatus:
    if offset_mm < KNEE_PEDAL_X_MIN_WARNING:
        return FitStatus.WARNING
    return FitStatus.OK


def classify_shoulder(angle: float) -> FitStatus:
    if angle < SHOULDER_ANGLE_MIN or angle > SHOULDER_ANGLE_MAX:
        return FitStatus.CRITICAL
    if angle < SHOULDER_ANGLE_MIN_WARNING or angle > SHOULDER_ANGLE_MAX_WARNING:
        return FitStatus.WARNING
    return FitStatus.OK


def classify_elbow(angle: float) -> FitStatus:
    if angle > ELBOW_ANGLE_CRITICAL:
        return FitStatus.CRITICAL
    if angle < ELBOW_ANGLE_MIN_WARNING or angle >= ELBOW_ANGLE_MAX_WARNING:
        return FitStatus.WARNING
    return FitStatus.OK


def classify_ankle_270(angle: float) -> FitStatus:
    if angle < ANKLE_MIN:
        return FitStatus.CRITICAL
    return FitStatus.OK


class MetricCheck(BaseModel):
    name: str
    value: float
    status: FitStatus


class FitReport(BaseModel):
    checks: List[MetricCheck]

    @property
    def worst(self) -> FitStatus:
        return max(
            (c.status for c in self.checks),
            key=_SEVERITY.__getitem__,
            default=FitStatus.OK,
        )

    def flagged(self) -> List[MetricCheck]:
        return [c for c in self.checks if c.status != FitStatus.OK]

    def by_name(self) -> Dict[str, MetricCheck]:
        return {c.name: c for c in self.checks}


def evaluate_fit(result: GeometryResult) -> FitReport:
    """Classify every fit metric of a computed geometry."""
    pairs = (
        ("knee_angle_at_90", result.knee_angle_at_90, classify_knee_90),
        ("knee_angle_at_270", result.knee_angle_at_270, classify_knee_270),
        ("saddle_handlebar_drop", result.saddle_handlebar_drop, classify_saddle_handlebar_drop),
        ("knee_to_pedal_x_at_0", result.knee_to_pedal_x_at_0, classify_knee_to_pedal),
        ("shoulder_angle", result.shoulder_angle, classify_shoulder),
        ("elbow_angle", result.elbow_angle, classify_elbow),
        ("ankle_angle_at_270", result.ankle_angle_at_270, classify_ankle_270),
    )
    return FitReport(
        checks=[MetricCheck(name=name, value=value, status=check(value)) for name, value, check in pairs]
    )
