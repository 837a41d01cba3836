from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Location:
    """Domain entity: a guarded site shifts and check-ins point at."""

    location_id: str
    name: str
    address: str
    coordinates: Optional[Coordinates] = None
    description: Optional[str] = None
