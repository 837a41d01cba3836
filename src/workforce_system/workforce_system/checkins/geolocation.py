"""Device geolocation collaborators used at check-in time.

The provider is the only fallible external call on the check-in path: it
either yields a position or raises LocationUnavailableError. Reverse
geocoding is best-effort and never raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import requests

from ..common.validators import require_coordinates
from ..core.exceptions import LocationUnavailableError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeoPosition:
    latitude: float
    longitude: float
    accuracy: Optional[float] = None


class GeolocationProvider(Protocol):
    def current_position(self) -> GeoPosition:
        """Return the device position or raise LocationUnavailableError."""

        raise NotImplementedError


class ReverseGeocoder(Protocol):
    def reverse(self, latitude: float, longitude: float) -> Optional[str]:
        """Return a "street city region" string, or None when unknown."""

        raise NotImplementedError


class UnavailableGeolocationProvider(GeolocationProvider):
    """Used when the client did not send coordinates (permission denied)."""

    def __init__(self, reason: str = "Location permission is required to check in"):
        self._reason = reason

    def current_position(self) -> GeoPosition:
        raise LocationUnavailableError(self._reason)


class FixedGeolocationProvider(GeolocationProvider):
    """Position reported by the client together with the check-in request."""

    def __init__(self, position: GeoPosition):
        self._position = position

    def current_position(self) -> GeoPosition:
        return self._position


def position_from_payload(payload: dict) -> Optional[GeoPosition]:
    """Build a GeoPosition from request data; None when no coordinates were sent."""
    latitude = payload.get("latitude")
    longitude = payload.get("longitude")
    if latitude in (None, "") and longitude in (None, ""):
        return None
    try:
        lat, lon = require_coordinates(latitude, longitude)
    except ValidationError as e:
        raise LocationUnavailableError(str(e)) from e
    accuracy = payload.get("accuracy")
    return GeoPosition(latitude=lat, longitude=lon, accuracy=float(accuracy) if accuracy not in (None, "") else None)


def format_address(street: Optional[str], city: Optional[str], region: Optional[str]) -> Optional[str]:
    text = " ".join(part.strip() for part in (street, city, region) if part and part.strip())
    return text or None


class NullReverseGeocoder(ReverseGeocoder):
    def reverse(self, latitude: float, longitude: float) -> Optional[str]:
        return None


class NominatimReverseGeocoder(ReverseGeocoder):
    """Reverse geocoding through an OpenStreetMap Nominatim endpoint."""

    def __init__(self, base_url: str = "https://nominatim.openstreetmap.org", *, timeout: float = 5.0, session=None):
        self._url = base_url.rstrip("/") + "/reverse"
        self._timeout = timeout
        self._session = session or requests.Session()

    def reverse(self, latitude: float, longitude: float) -> Optional[str]:
        headers = {
            "User-Agent": "workforce-system/1.0 (check-in address lookup)",
            "Accept": "application/json",
        }
        params = {"format": "jsonv2", "lat": latitude, "lon": longitude}
        try:
            response = self._session.get(self._url, params=params, headers=headers, timeout=self._timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f"Reverse geocoding failed for ({latitude}, {longitude}): {e}")
            return None

        address = data.get("address") if isinstance(data, dict) else None
        if not isinstance(address, dict):
            return None
        street = " ".join(p for p in (address.get("house_number"), address.get("road")) if p)
        city = address.get("city") or address.get("town") or address.get("village")
        return format_address(street, city, address.get("state"))
