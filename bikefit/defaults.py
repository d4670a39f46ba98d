# bikefit/defaults.py
from bikefit.schemas import CockpitSetup, HandPosition, RiderSetup

# Selected on start-up when nothing else is chosen
DEFAULT_BIKE_SELECTION = {
    "brand": "Cannondale",
    "model": "SuperSix Evo4",
    "size": "58",
}

DEFAULT_COCKPIT = CockpitSetup(
    spacer_height=30,
    headset_cap=5,
    stem_length=80,
    stem_angle=-6,
    handlebar_reach=75,
    handlebar_drop=125,
    crank_length=165,
    pedal_angle=0,
    hand_position=HandPosition.HOODS,
    seat_post_length=210,
)

DEFAULT_RIDER = RiderSetup(
    rider_height=1830,
    rider_inseam=890,
    torso_angle=30,
    shoe_thickness=15,
)
