"""
conftest.py: shared fixtures for the bikefit test suite.

All tests are pure unit tests; the engine does no I/O, so no external
fixtures are needed beyond a temporary directory for catalog files.
"""

import pytest

from bikefit.defaults import DEFAULT_COCKPIT, DEFAULT_RIDER
from bikefit.schemas import BikeData, BikeGeometry
from bikefit.settings import EngineSettings


# ---------------------------------------------------------------------------
# Geometry fixtures
# ---------------------------------------------------------------------------

REFERENCE_GEOMETRY = {
    "stack": 560,
    "reach": 390,
    "headTubeAngle": 73,
    "seatTubeAngle": 74,
    "forkLength": 370,
    "bbDrop": 70,
    "headTubeLength": 150,
    "seatTubeLength": 520,
    "chainstayLength": 410,
    "frontCenter": 600,
}


@pytest.fixture(scope="session")
def engine_settings():
    """Engine settings with every default (scale 0.8)."""
    return EngineSettings()


@pytest.fixture
def reference_geometry():
    """
    Endurance road frame used across the suite:
    stack 560, reach 390, HTA 73, STA 74, BB drop 70, chainstay 410,
    front centre 600, head tube 150, seat tube 520.
    """
    return BikeGeometry.model_validate(REFERENCE_GEOMETRY)


@pytest.fixture
def reference_bike(reference_geometry):
    """Reference frame with the default cockpit (hoods, 0 deg) and rider (183 cm)."""
    return BikeData(
        brand="Test",
        model="Endurance",
        size="56",
        geometry=reference_geometry,
        cockpit=DEFAULT_COCKPIT,
        rider=DEFAULT_RIDER,
    )


def with_cockpit(bike, **changes):
    """Copy of `bike` with some cockpit fields replaced."""
    return bike.model_copy(update={"cockpit": bike.cockpit.model_copy(update=changes)})


def with_rider(bike, **changes):
    return bike.model_copy(update={"rider": bike.rider.model_copy(update=changes)})


def with_geometry(bike, **changes):
    return bike.model_copy(update={"geometry": bike.geometry.model_copy(update=changes)})
