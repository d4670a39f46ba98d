# bikefit/limits.py
"""Allowed range of every numeric cockpit field, and clamping to it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from bikefit.schemas import CockpitSetup


@dataclass(frozen=True)
class FieldLimit:
    min: float
    max: float
    step: Optional[float] = None   # input widget granularity, not enforced

    def clamp(self, value: float) -> float:
        return max(self.min, min(self.max, value))


COCKPIT_LIMITS: Dict[str, FieldLimit] = {
    "spacer_height":    FieldLimit(0, 5000, 5),     # mm
    "headset_cap":      FieldLimit(0, 15, 1),       # mm
    "stem_length":      FieldLimit(40, 1500, 5),    # mm
    "stem_angle":       FieldLimit(-25, 25, 1),     # deg
    "handlebar_reach":  FieldLimit(50, 100, 5),     # mm
    "handlebar_drop":   FieldLimit(100, 160, 5),    # mm
    "crank_length":     FieldLimit(165, 175, 2.5),  # mm
    "pedal_angle":      FieldLimit(0, 360, 15),     # deg
    "seat_post_length": FieldLimit(100, 400, 5),    # mm
}


def clamp_cockpit_value(field: str, value: float) -> float:
    """Clamp one cockpit value; unknown fields raise KeyError."""
    return COCKPIT_LIMITS[field].clamp(value)


def clamp_cockpit_setup(cockpit: CockpitSetup) -> CockpitSetup:
    """Copy of `cockpit` with every limited field pulled into range."""
    clamped = {
        field: limit.clamp(getattr(cockpit, field))
        for field, limit in COCKPIT_LIMITS.items()
    }
    return cockpit.model_copy(update=clamped)
