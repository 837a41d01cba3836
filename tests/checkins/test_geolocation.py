from __future__ import annotations

import pytest
import requests

from src.workforce_system.workforce_system.checkins.geolocation import (
    NominatimReverseGeocoder,
    UnavailableGeolocationProvider,
    format_address,
    position_from_payload,
)
from src.workforce_system.workforce_system.core.exceptions import LocationUnavailableError


class _Response:
    def __init__(self, payload, status=200):
        self._payload = payload
        self._status = status

    def raise_for_status(self):
        if self._status >= 400:
            raise requests.exceptions.HTTPError(f"{self._status}")

    def json(self):
        return self._payload


class _Session:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


def test_position_from_payload():
    assert position_from_payload({}) is None

    pos = position_from_payload({"latitude": "40.5", "longitude": -74, "accuracy": 10})
    assert (pos.latitude, pos.longitude, pos.accuracy) == (40.5, -74.0, 10.0)

    with pytest.raises(LocationUnavailableError):
        position_from_payload({"latitude": 91, "longitude": 0})
    with pytest.raises(LocationUnavailableError):
        position_from_payload({"latitude": 10})


def test_unavailable_provider_raises():
    with pytest.raises(LocationUnavailableError):
        UnavailableGeolocationProvider().current_position()


def test_format_address_skips_missing_parts():
    assert format_address("12 Main St", None, "NY") == "12 Main St NY"
    assert format_address(None, " ", None) is None


def test_nominatim_reverse_builds_address():
    session = _Session(
        _Response({"address": {"house_number": "12", "road": "Main St", "town": "Springfield", "state": "IL"}})
    )
    geocoder = NominatimReverseGeocoder("https://geo.example.com/", session=session)

    assert geocoder.reverse(39.8, -89.6) == "12 Main St Springfield IL"
    url, kwargs = session.calls[0]
    assert url == "https://geo.example.com/reverse"
    assert kwargs["params"]["lat"] == 39.8


@pytest.mark.parametrize(
    "session",
    [
        _Session(error=requests.exceptions.ConnectionError("offline")),
        _Session(_Response({}, status=503)),
        _Session(_Response(["unexpected"])),
    ],
)
def test_nominatim_reverse_failures_return_none(session):
    assert NominatimReverseGeocoder(session=session).reverse(1.0, 2.0) is None
