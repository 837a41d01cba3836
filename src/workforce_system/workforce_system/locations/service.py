from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.ids import new_id
from ..common.validators import optional_text, require_coordinates, require_non_empty
from ..core.exceptions import NotFoundError
from .model import Coordinates, Location
from .repository import LocationRepository

logger = logging.getLogger(__name__)


class LocationService:
    def __init__(self, locations: LocationRepository):
        self._locations = locations

    def list_locations(self) -> Sequence[Location]:
        return self._locations.list_all()

    def get_location(self, location_id: str) -> Location:
        location = self._locations.get_by_id(location_id)
        if not location:
            raise NotFoundError("Location not found")
        return location

    def create_location(
        self,
        *,
        name: str,
        address: str,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        description: Optional[str] = None,
    ) -> Location:
        name = require_non_empty(name, "Name")
        address = require_non_empty(address, "Address")

        coordinates = None
        if latitude is not None or longitude is not None:
            lat, lon = require_coordinates(latitude, longitude)
            coordinates = Coordinates(latitude=lat, longitude=lon)

        location = Location(
            location_id=new_id(),
            name=name,
            address=address,
            coordinates=coordinates,
            description=optional_text(description),
        )
        self._locations.add(location)
        logger.info(f"Location created: {location.location_id} ({location.name})")
        return location
