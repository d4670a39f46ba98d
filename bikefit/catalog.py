# bikefit/catalog.py
"""
Bike catalog: brand -> model -> size -> frame geometry.

Catalog files are hand-maintained JSON, so a malformed size entry is
skipped with a warning instead of throwing away the whole catalog.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from bikefit.defaults import DEFAULT_COCKPIT, DEFAULT_RIDER
from bikefit.schemas import BikeData, BikeGeometry, CockpitSetup, RiderSetup

logger = logging.getLogger(__name__)


class BikeNotFoundError(LookupError):
    """Raised when a brand / model / size is not in the catalog."""


class BikeCatalog(BaseModel):
    bikes: Dict[str, Dict[str, Dict[str, BikeGeometry]]] = Field(default_factory=dict)

    def brands(self) -> List[str]:
        return sorted(self.bikes)

    def models(self, brand: str) -> List[str]:
        return sorted(self.bikes.get(brand, {}))

    def sizes(self, brand: str, model: str) -> List[str]:
        return list(self.bikes.get(brand, {}).get(model, {}))

    def get_geometry(self, brand: str, model: str, size: str) -> BikeGeometry:
        try:
            return self.bikes[brand][model][size]
        except KeyError:
            raise BikeNotFoundError(f"No geometry for {brand!r} {model!r} size {size!r}") from None

    def build_bike(
        self,
        brand: str,
        model: str,
        size: str,
        cockpit: Optional[CockpitSetup] = None,
        rider: Optional[RiderSetup] = None,
    ) -> BikeData:
        """Assemble engine input for one catalog entry, defaulting cockpit and rider."""
        return BikeData(
            brand=brand,
            model=model,
            size=size,
            geometry=self.get_geometry(brand, model, size),
            cockpit=cockpit if cockpit is not None else DEFAULT_COCKPIT,
            rider=rider if rider is not None else DEFAULT_RIDER,
        )


def parse_catalog(data: Any) -> BikeCatalog:
    """Validate a decoded catalog document, dropping invalid entries."""
    if not isinstance(data, dict):
        logger.warning("Bike catalog is not a mapping (%s); using empty catalog", type(data).__name__)
        return BikeCatalog()

    bikes: Dict[str, Dict[str, Dict[str, BikeGeometry]]] = {}
    for brand, models in data.items():
        if not isinstance(models, dict):
            logger.warning("Skipping brand %r: expected a mapping of models", brand)
            continue
        for model, sizes in models.items():
            if not isinstance(sizes, dict):
                logger.warning("Skipping %s %r: expected a mapping of sizes", brand, model)
                continue
            for size, raw in sizes.items():
                try:
                    geometry = BikeGeometry.model_validate(raw)
                except ValidationError as exc:
                    logger.warning(
                        "Skipping invalid geometry for %s %s size %s: %s",
                        brand, model, size, exc,
                    )
                    continue
                bikes.setdefault(brand, {}).setdefault(model, {})[str(size)] = geometry

    return BikeCatalog(bikes=bikes)


def load_catalog(path: Union[str, Path]) -> BikeCatalog:
    """Read and validate a catalog JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return parse_catalog(data)
