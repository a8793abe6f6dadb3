"""
Location acquisition for proximity searches.

Device position first (bounded wait), then a single network-based
geolocation request, then an optional reverse geocode. Nothing is cached:
each call re-acquires.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Tuple

from incident_hub.core.enums import LocationFailure, LocationSource
from incident_hub.core.errors import LocationUnavailable
from incident_hub.models.location import UserLocation
from incident_hub.services.maps_client import GoogleMapsClient, MapsError

logger = logging.getLogger(__name__)

DevicePosition = Callable[[], Awaitable[Tuple[float, float]]]

FAILURE_MESSAGES = {
    LocationFailure.permission_denied: "Location access denied by user.",
    LocationFailure.unavailable: "Location information is unavailable.",
    LocationFailure.timeout: "Location request timed out.",
    LocationFailure.network: "Network location lookup failed.",
}


class DevicePositionError(Exception):
    def __init__(self, cause: LocationFailure):
        super().__init__(FAILURE_MESSAGES[cause])
        self.cause = cause


def device_position_from_client(
    lat: Optional[float],
    lng: Optional[float],
    error: Optional[LocationFailure] = None,
) -> Optional[DevicePosition]:
    """
    Wrap what the client reported about its device position.

    Coordinates win over an error. Returns None when the client sent
    neither, which the acquirer treats as "unavailable".
    """
    if lat is not None and lng is not None:
        async def _position():
            return lat, lng
        return _position

    if error is not None:
        async def _failed():
            raise DevicePositionError(error)
        return _failed

    return None


class LocationAcquirer:
    def __init__(self, maps: GoogleMapsClient, device_timeout: float = 5.0):
        self.maps = maps
        self.device_timeout = device_timeout

    async def _from_device(self, device: Optional[DevicePosition]):
        if device is None:
            return None, LocationFailure.unavailable
        try:
            lat, lng = await asyncio.wait_for(device(), timeout=self.device_timeout)
            return (float(lat), float(lng)), None
        except asyncio.TimeoutError:
            return None, LocationFailure.timeout
        except DevicePositionError as exc:
            return None, exc.cause

    async def acquire(
        self,
        device: Optional[DevicePosition] = None,
        include_address: bool = True,
    ) -> UserLocation:
        coords, cause = await self._from_device(device)
        source = LocationSource.device

        if coords is None:
            logger.info("Device position failed (%s)", cause.value)
            if self.maps.configured:
                try:
                    coords = await self.maps.geolocate()
                    source = LocationSource.network
                except MapsError as exc:
                    logger.warning("Network geolocation failed: %s", exc)
                    cause = LocationFailure.network

        if coords is None:
            raise LocationUnavailable(FAILURE_MESSAGES[cause], cause=cause.value)

        address = None
        if include_address and self.maps.configured:
            try:
                address = await self.maps.reverse_geocode(*coords)
            except MapsError as exc:
                # coordinates alone are still a usable location
                logger.info("Reverse geocoding failed: %s", exc)

        return UserLocation(
            latitude=coords[0],
            longitude=coords[1],
            address=address,
            source=source,
        )
