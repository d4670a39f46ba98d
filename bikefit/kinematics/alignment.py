# bikefit/kinematics/alignment.py

from __future__ import annotations

from typing import List, Optional

import math

from bikefit.kinematics.geometry_engine import compute_geometry
from bikefit.schemas import AlignmentMode, BikeData, GeometryResult, Point2D, PointId
from bikefit.settings import EngineSettings


def alignment_origin(result: GeometryResult, mode: AlignmentMode) -> Point2D:
    """The point that should sit at (0, 0) when overlaying two bikes."""
    if mode == AlignmentMode.REAR:
        return result.points[PointId.REAR_WHEEL]
    return result.points[PointId.BB]


def align_result(result: GeometryResult, mode: AlignmentMode) -> GeometryResult:
    """
    Copy of `result` translated so the BB (`bb`) or the rear axle (`rear`)
    is the origin. Metrics are translation invariant and carried over.
    """
    ox, oy = alignment_origin(result, AlignmentMode(mode))
    if ox == 0 and oy == 0:
        return result.model_copy(deep=True)

    def shift(p: Point2D) -> Point2D:
        return Point2D(p.x - ox, p.y - oy)

    return result.model_copy(
        update={
            "points": {pid: shift(p) for pid, p in result.points.items()},
            "handlebar_arc": [shift(p) for p in result.handlebar_arc],
        },
        deep=True,
    )


def sweep_pedal_angles(
    bike: BikeData,
    step: float = 15.0,
    settings: Optional[EngineSettings] = None,
) -> List[GeometryResult]:
    """
    Recompute the geometry for pedal angles 0 <= a < 360 in `step` increments,
    e.g. for animating a pedal stroke. Each frame is an independent call.
    """
    if step <= 0:
        raise ValueError("step must be positive")

    frames: List[GeometryResult] = []
    n = math.ceil(360.0 / step)
    for i in range(n):
        angle = i * step
        if angle >= 360.0:
            break
        frame_bike = bike.model_copy(
            update={"cockpit": bike.cockpit.model_copy(update={"pedal_angle": angle})}
        )
        frames.append(compute_geometry(frame_bike, settings))
    return frames
