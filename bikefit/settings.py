# bikefit/settings.py
"""
Engine tuning constants.

Anthropometric ratios and component sizes are empirical and vary between
fitters, so they live here instead of in the placement code. Every value can
be overridden through the environment, e.g. ``BIKEFIT_SCALE=1.0`` or
``BIKEFIT_ANATOMY__UPPER_LEG_RATIO=0.54``.
"""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeometryDefaults(BaseModel):
    """Fallbacks for frame fields the catalog may leave out (mm)."""

    chainstay_length: float = 410.0
    front_center: float = 600.0
    head_tube_length: float = 0.0


class CockpitConstants(BaseModel):
    headset_bearing_diameter: float = 31.8  # mm
    handlebar_arc_steps: int = Field(12, ge=1)
    handlebar_arc_epsilon: float = 0.001  # drawing units; smaller drops get no arc
    pedal_width: float = 50.0  # mm, full width of the drawn pedal


class SaddleConstants(BaseModel):
    saddle_length: float = 255.0  # mm
    saddle_setback: float = 40.0  # mm behind the seatpost clamp
    sitbone_offset: float = 0.0  # mm behind the saddle reference point


class AnatomyRatios(BaseModel):
    """Segment lengths as fractions of inseam (legs) or body height (rest)."""

    upper_leg_ratio: float = 0.56
    lower_leg_ratio: float = 0.44
    hip_joint_offset_ratio: float = 0.095  # saddle contact -> hip joint, of inseam

    head_ratio: float = 0.12
    neck_ratio: float = 0.055
    head_width_ratio: float = 0.7  # of head height
    upper_arm_ratio: float = 0.186
    lower_arm_ratio: float = 0.146

    neck_angle: float = 60.0  # degrees from horizontal


class FootConstants(BaseModel):
    cleat_setback: float = 130.0  # mm, pedal axle -> ball of the foot
    foot_angle_default: float = 10.0  # degrees, at the bottom of the stroke


class EngineSettings(BaseSettings):
    """Top-level engine configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BIKEFIT_",
        env_nested_delimiter="__",
    )

    scale: float = Field(0.8, gt=0, description="Drawing units per millimetre.")

    defaults: GeometryDefaults = Field(default_factory=GeometryDefaults)
    cockpit: CockpitConstants = Field(default_factory=CockpitConstants)
    saddle: SaddleConstants = Field(default_factory=SaddleConstants)
    anatomy: AnatomyRatios = Field(default_factory=AnatomyRatios)
    foot: FootConstants = Field(default_factory=FootConstants)


settings = EngineSettings()
