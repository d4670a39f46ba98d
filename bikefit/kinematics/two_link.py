# bikefit/kinematics/two_link.py

from __future__ import annotations

import logging
import math

from bikefit.schemas import Point2D

logger = logging.getLogger(__name__)


# ------------ Vector helpers ------------

def polar(origin: Point2D, length: float, angle_rad: float) -> Point2D:
    """Point at `length` from `origin` along `angle_rad` (screen axes, +y down)."""
    return Point2D(
        origin.x + length * math.cos(angle_rad),
        origin.y + length * math.sin(angle_rad),
    )


def distance(a: Point2D, b: Point2D) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def lerp(a: Point2D, b: Point2D, t: float) -> Point2D:
    return Point2D(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)


def midpoint(a: Point2D, b: Point2D) -> Point2D:
    return lerp(a, b, 0.5)


def interior_angle(vertex: Point2D, a: Point2D, b: Point2D) -> float:
    """
    Angle at `vertex` between vertex->a and vertex->b, in degrees [0, 180].

    A zero-length arm has atan2(0, 0) == 0, so the result stays finite.
    """
    angle_a = math.atan2(a.y - vertex.y, a.x - vertex.x)
    angle_b = math.atan2(b.y - vertex.y, b.x - vertex.x)
    angle = abs(math.degrees(angle_b - angle_a))
    if angle > 180.0:
        angle = 360.0 - angle
    return angle


# ------------ Two-link IK ------------

def solve_two_link(
    root: Point2D,
    target: Point2D,
    root_link: float,
    end_link: float,
) -> Point2D:
    """
    Place the joint between two rigid links.

    `root_link` hangs off `root`, `end_link` reaches `target`; the joint is
    the intersection of the two circles (law of cosines). Unreachable
    targets never raise:

    - too far: links stretched straight along root->target
    - too close (or coincident): joint at the root/target midpoint

    The joint is always rotated by +alpha from the root->target line, which
    puts knees forward and elbows down in drawing coordinates.
    """
    dx = target.x - root.x
    dy = target.y - root.y
    dist = math.hypot(dx, dy)
    total = root_link + end_link

    if dist > total:
        logger.debug("Two-link target out of reach (%.3f > %.3f); stretching", dist, total)
        ratio = root_link / total if total > 0 else 0.5
        return lerp(root, target, ratio)

    if dist < abs(root_link - end_link) or dist == 0:
        logger.debug("Two-link target inside dead zone (%.3f); using midpoint", dist)
        return midpoint(root, target)

    if root_link == 0:
        return root

    a, b, c = dist, root_link, end_link
    cos_alpha = (a * a + b * b - c * c) / (2 * a * b)
    alpha = math.acos(max(-1.0, min(1.0, cos_alpha)))
    base_angle = math.atan2(dy, dx)
    return polar(root, b, base_angle + alpha)
