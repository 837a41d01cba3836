from __future__ import annotations

from typing import Optional, Sequence

from ..storage.collections import JsonCollection
from .model import Coordinates, Location
from .repository import LocationRepository


def _to_model(r: dict) -> Location:
    coords = r.get("coordinates")
    coordinates = None
    if isinstance(coords, dict) and coords.get("latitude") is not None and coords.get("longitude") is not None:
        coordinates = Coordinates(latitude=float(coords["latitude"]), longitude=float(coords["longitude"]))
    return Location(
        location_id=str(r["id"]),
        name=r.get("name") or "",
        address=r.get("address") or "",
        coordinates=coordinates,
        description=r.get("description") or None,
    )


def _to_record(loc: Location) -> dict:
    record = {
        "id": loc.location_id,
        "name": loc.name,
        "address": loc.address,
    }
    if loc.coordinates:
        record["coordinates"] = {
            "latitude": loc.coordinates.latitude,
            "longitude": loc.coordinates.longitude,
        }
    if loc.description:
        record["description"] = loc.description
    return record


class JsonLocationRepository(LocationRepository):
    def __init__(self, collection: JsonCollection):
        self._collection = collection

    def list_all(self) -> Sequence[Location]:
        return [_to_model(r) for r in self._collection.load() if r.get("id") is not None]

    def get_by_id(self, location_id: str) -> Optional[Location]:
        for loc in self.list_all():
            if loc.location_id == location_id:
                return loc
        return None

    def add(self, location: Location) -> None:
        with self._collection.mutate() as records:
            records.append(_to_record(location))
