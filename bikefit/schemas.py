# bikefit/schemas.py
from __future__ import annotations

from enum import Enum
from typing import Dict, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# Inputs accept both the catalog's camelCase keys and snake_case names,
# and refuse NaN / inf so the engine only ever sees finite numbers.
_INPUT_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    allow_inf_nan=False,
)


# ------------ Inputs ------------

class HandPosition(str, Enum):
    HOODS = "hoods"
    DROPS = "drops"

    @classmethod
    def _missing_(cls, value):
        # Accept the "on-hoods" / "on-drops" spelling as well
        if isinstance(value, str) and value.startswith("on-"):
            return cls(value[3:])
        return None


class AlignmentMode(str, Enum):
    BB = "bb"      # bottom brackets on top of each other
    REAR = "rear"  # rear axles on top of each other


class BikeGeometry(BaseModel):
    model_config = _INPUT_CONFIG

    stack: float
    reach: float
    head_tube_angle: float
    seat_tube_angle: float
    fork_length: float = 0.0
    bb_drop: float
    head_tube_length: Optional[float] = None
    seat_tube_length: float
    chainstay_length: Optional[float] = None
    front_center: Optional[float] = None

    # Descriptive only, the engine does not place anything from these
    fork_offset: Optional[float] = None
    wheelbase: Optional[float] = None
    standover: Optional[float] = None


class CockpitSetup(BaseModel):
    model_config = _INPUT_CONFIG

    spacer_height: float
    headset_cap: float
    stem_length: float
    stem_angle: float              # negative = rise
    handlebar_reach: float
    handlebar_drop: float
    crank_length: float
    pedal_angle: float             # right crank, degrees from +X (90 = down)
    hand_position: HandPosition = HandPosition.HOODS
    seat_post_length: float

    # Optional per-setup overrides of the saddle defaults in settings
    saddle_setback: Optional[float] = None
    saddle_length: Optional[float] = None
    sitbone_offset: Optional[float] = None


class RiderSetup(BaseModel):
    model_config = _INPUT_CONFIG

    rider_height: float
    rider_inseam: float
    torso_angle: float             # degrees from horizontal
    shoe_thickness: float


class BikeData(BaseModel):
    model_config = _INPUT_CONFIG

    brand: str
    model: str
    size: str
    geometry: BikeGeometry
    cockpit: CockpitSetup
    rider: RiderSetup


# ------------ Outputs ------------

class Point2D(NamedTuple):
    """Drawing-space coordinate: origin at BB, +x forward, +y down."""
    x: float
    y: float


class Segment(NamedTuple):
    from_id: str
    to_id: str


class PointId(str, Enum):
    BB = "bb"
    HEAD_TUBE_TOP = "headTubeTop"
    HEAD_TUBE_BOTTOM = "headTubeBottom"
    SEAT_TUBE_TOP = "seatTubeTop"
    FRONT_WHEEL = "frontWheel"
    REAR_WHEEL = "rearWheel"

    SPACER_UP = "spacerUp"
    STEM_FRONT = "stemFront"
    HANDLEBAR_CENTER = "handlebarCenter"
    HANDLEBAR_DROP_END = "handlebarDropEnd"  # only present with a drop arc

    SEAT_POST_TOP = "seatPostTop"
    SADDLE_TOP = "saddleTop"
    SADDLE_LEN_FWD = "saddleLenFwd"
    SADDLE_LEN_AFT = "saddleLenAft"

    PEDAL_RIGHT = "pedalRight"
    PEDAL_LEFT = "pedalLeft"
    PEDAL_RIGHT_TOP = "pedalRightTop"
    PEDAL_RIGHT_BOTTOM = "pedalRightBottom"
    PEDAL_LEFT_TOP = "pedalLeftTop"
    PEDAL_LEFT_BOTTOM = "pedalLeftBottom"

    CLEAT_TOP = "cleatTop"
    CLEAT_BOTTOM = "cleatBottom"
    FOOT_CONTACT = "footContact"
    KNEE = "knee"
    KNEE_NEW = "kneeNew"
    HIP = "hip"
    HIP_JOINT = "hipJoint"
    SHOULDER = "shoulder"
    NECK_TOP = "neckTop"
    HEAD_CENTER = "headCenter"
    ELBOW = "elbow"


HANDLEBAR_ARC_PREFIX = "handlebarArc"

WHEEL_POINT_IDS = (PointId.FRONT_WHEEL, PointId.REAR_WHEEL)

KEY_POINT_IDS = (
    PointId.BB,
    PointId.HEAD_TUBE_TOP,
    PointId.STEM_FRONT,
    PointId.HANDLEBAR_CENTER,
    PointId.SEAT_TUBE_TOP,
    PointId.HEAD_TUBE_BOTTOM,
    PointId.SPACER_UP,
    PointId.FRONT_WHEEL,
    PointId.REAR_WHEEL,
    PointId.SEAT_POST_TOP,
    PointId.SADDLE_TOP,
    PointId.HIP_JOINT,
    PointId.PEDAL_RIGHT,
    PointId.PEDAL_LEFT,
    PointId.KNEE,
    PointId.KNEE_NEW,
    PointId.FOOT_CONTACT,
    PointId.CLEAT_TOP,
    PointId.CLEAT_BOTTOM,
    PointId.HIP,
    PointId.SHOULDER,
    PointId.NECK_TOP,
    PointId.HEAD_CENTER,
    PointId.ELBOW,
)


def arc_point_id(index: int) -> str:
    return f"{HANDLEBAR_ARC_PREFIX}{index}"


class GeometryResult(BaseModel):
    """
    Everything a renderer needs for one bike: named points, the lines
    between them, and the fit metrics derived from the rider pose.
    """
    points: Dict[PointId, Point2D]
    handlebar_arc: List[Point2D] = Field(default_factory=list)
    segments: List[Segment] = Field(default_factory=list)
    rider_segments: List[Segment] = Field(default_factory=list)

    head_width: float = 0.0        # drawing units, for the head ellipse
    head_height: float = 0.0

    knee_angle: float                       # deg, at the current pedal angle
    knee_angle_at_90: float                 # deg, crank pointing down
    knee_angle_at_270: float                # deg, crank pointing up
    saddle_handlebar_drop: float            # mm, positive = saddle higher
    knee_to_pedal_x_at_0: float             # mm, positive = knee behind the axle
    shoulder_angle: float                   # deg, hip joint -> shoulder -> elbow
    elbow_angle: float                      # deg, shoulder -> elbow -> hand
    ankle_angle_at_270: float               # deg, cleat -> foot -> knee

    def point(self, point_id: str) -> Optional[Point2D]:
        """Look up a fixed point or a handlebar arc point by its string id."""
        if isinstance(point_id, str) and point_id.startswith(HANDLEBAR_ARC_PREFIX):
            suffix = point_id[len(HANDLEBAR_ARC_PREFIX):]
            if not suffix.isdigit():
                return None
            index = int(suffix)
            if index < len(self.handlebar_arc):
                return self.handlebar_arc[index]
            return None
        try:
            return self.points.get(PointId(point_id))
        except ValueError:
            return None

    def has_point(self, point_id: str) -> bool:
        return self.point(point_id) is not None

    def drawable_segments(self) -> List[Segment]:
        """Frame and rider segments whose endpoints both exist."""
        return [
            seg for seg in (*self.segments, *self.rider_segments)
            if self.has_point(seg.from_id) and self.has_point(seg.to_id)
        ]
