# bikefit/kinematics/geometry_engine.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import logging
import math

from bikefit.kinematics.two_link import (
    interior_angle,
    polar,
    solve_two_link,
)
from bikefit.schemas import (
    BikeData,
    GeometryResult,
    HandPosition,
    Point2D,
    PointId,
    Segment,
    arc_point_id,
)
from bikefit.settings import EngineSettings, settings as default_settings

logger = logging.getLogger(__name__)

P = PointId


# ------------ Resolved configuration ------------

@dataclass(frozen=True)
class ResolvedSetup:
    """
    One bike with every optional field filled in.

    Lengths in mm, angles in degrees. Nothing downstream of
    `resolve_setup` looks at the raw input or the settings defaults.
    """
    settings: EngineSettings
    scale: float

    # frame
    stack: float
    reach: float
    head_tube_angle: float
    seat_tube_angle: float
    bb_drop: float
    head_tube_length: float
    seat_tube_length: float
    chainstay_length: float
    front_center: float

    # cockpit
    spacer_height: float
    headset_cap: float
    stem_length: float
    stem_angle: float
    handlebar_reach: float
    handlebar_drop: float
    crank_length: float
    pedal_angle: float
    hand_position: HandPosition
    seat_post_length: float
    saddle_setback: float
    saddle_length: float
    sitbone_offset: float

    # rider
    rider_height: float
    rider_inseam: float
    torso_angle: float
    shoe_thickness: float


def _first(value: Optional[float], fallback: float) -> float:
    return fallback if value is None else value


def resolve_setup(bike: BikeData, settings: Optional[EngineSettings] = None) -> ResolvedSetup:
    """Merge the bike's optional fields and overrides over the engine defaults."""
    cfg = settings or default_settings
    geo, cockpit, rider = bike.geometry, bike.cockpit, bike.rider

    return ResolvedSetup(
        settings=cfg,
        scale=cfg.scale,
        stack=geo.stack,
        reach=geo.reach,
        head_tube_angle=geo.head_tube_angle,
        seat_tube_angle=geo.seat_tube_angle,
        bb_drop=geo.bb_drop,
        head_tube_length=_first(geo.head_tube_length, cfg.defaults.head_tube_length),
        seat_tube_length=geo.seat_tube_length,
        chainstay_length=_first(geo.chainstay_length, cfg.defaults.chainstay_length),
        front_center=_first(geo.front_center, cfg.defaults.front_center),
        spacer_height=cockpit.spacer_height,
        headset_cap=cockpit.headset_cap,
        stem_length=cockpit.stem_length,
        stem_angle=cockpit.stem_angle,
        handlebar_reach=cockpit.handlebar_reach,
        handlebar_drop=cockpit.handlebar_drop,
        crank_length=cockpit.crank_length,
        pedal_angle=cockpit.pedal_angle,
        hand_position=cockpit.hand_position,
        seat_post_length=cockpit.seat_post_length,
        saddle_setback=_first(cockpit.saddle_setback, cfg.saddle.saddle_setback),
        saddle_length=_first(cockpit.saddle_length, cfg.saddle.saddle_length),
        sitbone_offset=_first(cockpit.sitbone_offset, cfg.saddle.sitbone_offset),
        rider_height=rider.rider_height,
        rider_inseam=rider.rider_inseam,
        torso_angle=rider.torso_angle,
        shoe_thickness=rider.shoe_thickness,
    )


# ------------ Leg IK at an arbitrary pedal angle ------------

@dataclass(frozen=True)
class LegPose:
    pedal: Point2D
    cleat_bottom: Point2D
    foot: Point2D
    hip_joint: Point2D
    knee: Point2D
    knee_angle: float


def hip_joint_offset(setup: ResolvedSetup) -> float:
    """Saddle contact -> anatomical hip joint, in mm."""
    return setup.rider_inseam * setup.settings.anatomy.hip_joint_offset_ratio


def leg_lengths(setup: ResolvedSetup) -> Tuple[float, float]:
    """(lower leg, upper leg) in drawing units, measured from the hip joint."""
    anatomy = setup.settings.anatomy
    inseam = (setup.rider_inseam + hip_joint_offset(setup)) * setup.scale
    return inseam * anatomy.lower_leg_ratio, inseam * anatomy.upper_leg_ratio


def pedal_position(setup: ResolvedSetup, pedal_angle: float) -> Point2D:
    return polar(Point2D(0.0, 0.0), setup.crank_length * setup.scale, math.radians(pedal_angle))


def foot_angle(setup: ResolvedSetup, pedal_angle: float) -> float:
    """
    Foot pitch in degrees: the full default at the bottom of the stroke
    (90), flat at the top (270), half way in between.
    """
    default = setup.settings.foot.foot_angle_default
    return default * (1 + math.sin(math.radians(pedal_angle))) / 2


def solve_leg_at_pedal_angle(
    pedal_angle: float,
    setup: ResolvedSetup,
    hip: Point2D,
) -> LegPose:
    """
    Foot placement plus knee IK for one crank position.

    `hip` is the rider's seat contact point; the hip joint sits a fixed
    fraction of inseam ahead of it along the torso.
    """
    s = setup.scale
    pedal = pedal_position(setup, pedal_angle)

    # Shoe sole sits above the axle (+y is down)
    cleat_bottom = Point2D(pedal.x, pedal.y - setup.shoe_thickness * s)
    foot = polar(
        cleat_bottom,
        -setup.settings.foot.cleat_setback * s,
        math.radians(foot_angle(setup, pedal_angle)),
    )

    hip_joint = polar(hip, hip_joint_offset(setup) * s, -math.radians(setup.torso_angle))

    lower_leg, upper_leg = leg_lengths(setup)
    knee = solve_two_link(foot, hip_joint, lower_leg, upper_leg)

    return LegPose(
        pedal=pedal,
        cleat_bottom=cleat_bottom,
        foot=foot,
        hip_joint=hip_joint,
        knee=knee,
        knee_angle=interior_angle(knee, foot, hip_joint),
    )


# ------------ Placement steps ------------

def _place_frame(setup: ResolvedSetup, points: Dict[PointId, Point2D]) -> None:
    s = setup.scale
    hta = math.radians(setup.head_tube_angle)
    sta = math.radians(setup.seat_tube_angle)

    points[P.BB] = Point2D(0.0, 0.0)
    points[P.HEAD_TUBE_TOP] = Point2D(setup.reach * s, -setup.stack * s)
    points[P.HEAD_TUBE_BOTTOM] = polar(points[P.HEAD_TUBE_TOP], setup.head_tube_length * s, hta)
    points[P.SEAT_TUBE_TOP] = polar(points[P.BB], -setup.seat_tube_length * s, sta)


def _horizontal_offset(hypotenuse: float, vertical: float) -> float:
    return math.sqrt(max(0.0, hypotenuse * hypotenuse - vertical * vertical))


def _place_wheels(setup: ResolvedSetup, points: Dict[PointId, Point2D]) -> None:
    s = setup.scale
    wheel_y = -setup.bb_drop * s

    points[P.FRONT_WHEEL] = Point2D(_horizontal_offset(setup.front_center * s, wheel_y), wheel_y)
    points[P.REAR_WHEEL] = Point2D(-_horizontal_offset(setup.chainstay_length * s, wheel_y), wheel_y)


def _handlebar_arc(setup: ResolvedSetup, center: Point2D) -> List[Point2D]:
    """Half circle from the bar top down to the drops; empty for a flat bar."""
    cockpit = setup.settings.cockpit
    drop = setup.handlebar_drop * setup.scale
    if abs(drop) < cockpit.handlebar_arc_epsilon:
        return []

    radius = abs(drop) / 2
    direction = math.copysign(1.0, drop)  # negative drop arcs upward
    arc_center_y = center.y + direction * radius
    steps = cockpit.handlebar_arc_steps

    arc: List[Point2D] = []
    for i in range(steps + 1):
        angle = -math.pi / 2 + (i / steps) * math.pi  # -90 .. +90 deg
        arc.append(Point2D(
            center.x + radius * math.cos(angle),
            arc_center_y + direction * radius * math.sin(angle),
        ))
    return arc


def _place_cockpit(setup: ResolvedSetup, points: Dict[PointId, Point2D]) -> List[Point2D]:
    s = setup.scale
    hta = math.radians(setup.head_tube_angle)

    # Spacers, cap and half the upper bearing stack up the steerer
    stack_height = (
        setup.spacer_height
        + setup.headset_cap
        + setup.settings.cockpit.headset_bearing_diameter / 2
    ) * s
    points[P.SPACER_UP] = polar(points[P.HEAD_TUBE_TOP], -stack_height, hta)

    # Stem leaves perpendicular to the steerer, tilted by the stem angle
    stem_total = hta - math.radians(setup.stem_angle)
    stem_len = setup.stem_length * s
    spacer_up = points[P.SPACER_UP]
    points[P.STEM_FRONT] = Point2D(
        spacer_up.x + math.sin(stem_total) * stem_len,
        spacer_up.y - math.cos(stem_total) * stem_len,
    )

    stem_front = points[P.STEM_FRONT]
    points[P.HANDLEBAR_CENTER] = Point2D(stem_front.x + setup.handlebar_reach * s, stem_front.y)

    arc = _handlebar_arc(setup, points[P.HANDLEBAR_CENTER])
    if arc:
        points[P.HANDLEBAR_DROP_END] = arc[-1]
    return arc


def _place_saddle(setup: ResolvedSetup, points: Dict[PointId, Point2D]) -> None:
    s = setup.scale
    sta = math.radians(setup.seat_tube_angle)
    setback = setup.saddle_setback * s
    length = setup.saddle_length * s

    points[P.SEAT_POST_TOP] = polar(points[P.SEAT_TUBE_TOP], -setup.seat_post_length * s, sta)
    post_top = points[P.SEAT_POST_TOP]

    points[P.SADDLE_LEN_FWD] = Point2D(post_top.x + length / 2 - setback, post_top.y)
    points[P.SADDLE_LEN_AFT] = Point2D(points[P.SADDLE_LEN_FWD].x - length, post_top.y)
    points[P.SADDLE_TOP] = Point2D(post_top.x - setback, post_top.y)


def _place_drivetrain(setup: ResolvedSetup, points: Dict[PointId, Point2D]) -> None:
    half_width = setup.settings.cockpit.pedal_width / 2 * setup.scale

    points[P.PEDAL_RIGHT] = pedal_position(setup, setup.pedal_angle)
    points[P.PEDAL_LEFT] = pedal_position(setup, setup.pedal_angle + 180.0)

    for pedal, top, bottom in (
        (P.PEDAL_RIGHT, P.PEDAL_RIGHT_TOP, P.PEDAL_RIGHT_BOTTOM),
        (P.PEDAL_LEFT, P.PEDAL_LEFT_TOP, P.PEDAL_LEFT_BOTTOM),
    ):
        center = points[pedal]
        points[top] = Point2D(center.x - half_width, center.y)
        points[bottom] = Point2D(center.x + half_width, center.y)


def _place_lower_body(setup: ResolvedSetup, points: Dict[PointId, Point2D]) -> LegPose:
    s = setup.scale
    saddle = points[P.SADDLE_TOP]
    points[P.HIP] = Point2D(saddle.x - setup.sitbone_offset * s, saddle.y)

    leg = solve_leg_at_pedal_angle(setup.pedal_angle, setup, points[P.HIP])

    points[P.CLEAT_TOP] = leg.pedal
    points[P.CLEAT_BOTTOM] = leg.cleat_bottom
    points[P.FOOT_CONTACT] = leg.foot
    points[P.HIP_JOINT] = leg.hip_joint
    points[P.KNEE_NEW] = leg.knee

    # Reference knee: plain inseam split, reaching for the saddle itself
    anatomy = setup.settings.anatomy
    inseam = setup.rider_inseam * s
    points[P.KNEE] = solve_two_link(
        leg.foot,
        saddle,
        inseam * anatomy.lower_leg_ratio,
        inseam * anatomy.upper_leg_ratio,
    )
    return leg


def _place_upper_body(setup: ResolvedSetup, points: Dict[PointId, Point2D]) -> Tuple[float, float]:
    """Torso, neck and head. Returns the head ellipse (width, height)."""
    s = setup.scale
    anatomy = setup.settings.anatomy

    head_height = setup.rider_height * anatomy.head_ratio
    neck_length = setup.rider_height * anatomy.neck_ratio
    torso_length = setup.rider_height - setup.rider_inseam - head_height - neck_length

    torso = -math.radians(setup.torso_angle)
    neck = -math.radians(anatomy.neck_angle)

    points[P.SHOULDER] = polar(points[P.HIP], torso_length * s, torso)
    points[P.NECK_TOP] = polar(points[P.SHOULDER], neck_length * s, neck)
    points[P.HEAD_CENTER] = polar(points[P.NECK_TOP], head_height * s / 2, neck)

    return head_height * s * anatomy.head_width_ratio, head_height * s


def _hand_point_id(setup: ResolvedSetup, points: Dict[PointId, Point2D]) -> PointId:
    if setup.hand_position == HandPosition.DROPS and P.HANDLEBAR_DROP_END in points:
        return P.HANDLEBAR_DROP_END
    return P.HANDLEBAR_CENTER


def _place_arm(setup: ResolvedSetup, points: Dict[PointId, Point2D], hand_id: PointId) -> None:
    s = setup.scale
    anatomy = setup.settings.anatomy
    points[P.ELBOW] = solve_two_link(
        points[P.SHOULDER],
        points[hand_id],
        setup.rider_height * anatomy.upper_arm_ratio * s,
        setup.rider_height * anatomy.lower_arm_ratio * s,
    )


# ------------ Segments ------------

FRAME_SEGMENTS: Tuple[Segment, ...] = (
    Segment(P.BB.value, P.HEAD_TUBE_TOP.value),
    Segment(P.HEAD_TUBE_TOP.value, P.HEAD_TUBE_BOTTOM.value),
    Segment(P.HEAD_TUBE_BOTTOM.value, P.FRONT_WHEEL.value),        # fork
    Segment(P.BB.value, P.SEAT_TUBE_TOP.value),
    Segment(P.SEAT_TUBE_TOP.value, P.REAR_WHEEL.value),            # seat stay
    Segment(P.BB.value, P.REAR_WHEEL.value),                       # chain stay
    Segment(P.SEAT_TUBE_TOP.value, P.HEAD_TUBE_TOP.value),         # top tube
)

COCKPIT_SEGMENTS: Tuple[Segment, ...] = (
    Segment(P.HEAD_TUBE_TOP.value, P.SPACER_UP.value),
    Segment(P.SPACER_UP.value, P.STEM_FRONT.value),
    Segment(P.STEM_FRONT.value, P.HANDLEBAR_CENTER.value),
)

SADDLE_SEGMENTS: Tuple[Segment, ...] = (
    Segment(P.SEAT_TUBE_TOP.value, P.SEAT_POST_TOP.value),
    Segment(P.SADDLE_LEN_FWD.value, P.SADDLE_LEN_AFT.value),
)

DRIVETRAIN_SEGMENTS: Tuple[Segment, ...] = (
    Segment(P.BB.value, P.PEDAL_RIGHT.value),
    Segment(P.BB.value, P.PEDAL_LEFT.value),
    Segment(P.PEDAL_RIGHT_TOP.value, P.PEDAL_RIGHT_BOTTOM.value),
    Segment(P.PEDAL_LEFT_TOP.value, P.PEDAL_LEFT_BOTTOM.value),
)


def _arc_segments(arc: List[Point2D]) -> List[Segment]:
    if not arc:
        return []
    segs = [Segment(P.HANDLEBAR_CENTER.value, arc_point_id(0))]
    segs.extend(Segment(arc_point_id(i), arc_point_id(i + 1)) for i in range(len(arc) - 1))
    return segs


def _rider_segments(hand_id: PointId) -> List[Segment]:
    return [
        Segment(P.CLEAT_TOP.value, P.CLEAT_BOTTOM.value),
        Segment(P.CLEAT_BOTTOM.value, P.FOOT_CONTACT.value),
        Segment(P.FOOT_CONTACT.value, P.KNEE_NEW.value),
        Segment(P.KNEE_NEW.value, P.HIP_JOINT.value),
        Segment(P.HIP.value, P.SHOULDER.value),
        Segment(P.SHOULDER.value, P.NECK_TOP.value),
        Segment(P.SHOULDER.value, P.ELBOW.value),
        Segment(P.ELBOW.value, hand_id.value),
    ]


# ------------ Public API ------------

def compute_geometry(
    bike: BikeData,
    settings: Optional[EngineSettings] = None,
) -> GeometryResult:
    """
    Build the full point/segment model of frame, cockpit, drivetrain and
    rider for one bike, plus the derived fit metrics.

    Coordinates: origin at the bottom bracket, +x toward the front wheel,
    +y downward, every length multiplied by `settings.scale`.

    Pure function of its inputs. Degenerate geometry (unreachable limbs,
    distances shorter than the BB drop, zero lengths) is resolved by
    fallbacks and never raises.
    """
    setup = resolve_setup(bike, settings)
    logger.debug(
        "Computing geometry for %s %s size %s at pedal angle %.1f",
        bike.brand, bike.model, bike.size, setup.pedal_angle,
    )
    points: Dict[PointId, Point2D] = {}

    _place_frame(setup, points)
    _place_wheels(setup, points)
    arc = _place_cockpit(setup, points)
    _place_saddle(setup, points)
    _place_drivetrain(setup, points)
    leg = _place_lower_body(setup, points)
    head_width, head_height = _place_upper_body(setup, points)

    hand_id = _hand_point_id(setup, points)
    _place_arm(setup, points, hand_id)

    # ---- Metrics at fixed crank positions ----
    hip = points[P.HIP]
    leg_90 = solve_leg_at_pedal_angle(90.0, setup, hip)
    leg_270 = solve_leg_at_pedal_angle(270.0, setup, hip)
    leg_0 = solve_leg_at_pedal_angle(0.0, setup, hip)

    s = setup.scale
    shoulder, elbow = points[P.SHOULDER], points[P.ELBOW]

    segments: List[Segment] = [
        *FRAME_SEGMENTS,
        *COCKPIT_SEGMENTS,
        *_arc_segments(arc),
        *SADDLE_SEGMENTS,
        *DRIVETRAIN_SEGMENTS,
    ]

    return GeometryResult(
        points=points,
        handlebar_arc=arc,
        segments=segments,
        rider_segments=_rider_segments(hand_id),
        head_width=head_width,
        head_height=head_height,
        knee_angle=leg.knee_angle,
        knee_angle_at_90=leg_90.knee_angle,
        knee_angle_at_270=leg_270.knee_angle,
        saddle_handlebar_drop=(points[P.HANDLEBAR_CENTER].y - points[P.SADDLE_TOP].y) / s,
        knee_to_pedal_x_at_0=-(leg_0.knee.x - leg_0.pedal.x) / s,
        shoulder_angle=interior_angle(shoulder, leg.hip_joint, elbow),
        elbow_angle=interior_angle(elbow, shoulder, points[hand_id]),
        ankle_angle_at_270=interior_angle(leg_270.foot, leg_270.cleat_bottom, leg_270.knee),
    )
