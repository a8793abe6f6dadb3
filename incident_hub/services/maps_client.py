"""
Thin async client for the Google Maps Geolocation and Geocoding APIs.

One request per call, no retries. Callers decide what a failure means.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

import httpx

from incident_hub.core.config import Settings

logger = logging.getLogger(__name__)


class MapsError(Exception):
    pass


class GoogleMapsClient:
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = settings.google_maps_api_key
        self.geolocation_url = settings.geolocation_url
        self.geocoding_url = settings.geocoding_url
        self.timeout = settings.maps_timeout_seconds
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def geolocate(self) -> Tuple[float, float]:
        """Approximate (lat, lng) of the caller from its IP / network."""
        if not self.configured:
            raise MapsError("Google Maps API key not configured")
        try:
            async with self._client() as client:
                r = await client.post(
                    self.geolocation_url,
                    params={"key": self.api_key},
                    json={"considerIp": True, "wifiAccessPoints": [], "cellTowers": []},
                )
        except httpx.HTTPError as exc:
            raise MapsError(f"Geolocation request failed: {exc}") from exc

        if r.status_code != 200:
            raise MapsError(f"Google Maps Geolocation API error: {r.status_code}")

        try:
            loc = r.json()["location"]
            return float(loc["lat"]), float(loc["lng"])
        except (ValueError, KeyError, TypeError) as exc:
            raise MapsError("Malformed geolocation response") from exc

    async def reverse_geocode(self, lat: float, lng: float) -> Optional[str]:
        """Formatted address for a point, None when the provider has none."""
        if not self.configured:
            raise MapsError("Google Maps API key not configured")
        try:
            async with self._client() as client:
                r = await client.get(
                    self.geocoding_url,
                    params={"latlng": f"{lat},{lng}", "key": self.api_key},
                )
        except httpx.HTTPError as exc:
            raise MapsError(f"Geocoding request failed: {exc}") from exc

        if r.status_code != 200:
            raise MapsError(f"Google Maps Geocoding API error: {r.status_code}")

        try:
            data = r.json()
        except ValueError as exc:
            raise MapsError("Malformed geocoding response") from exc

        if not isinstance(data, dict):
            raise MapsError("Malformed geocoding response")
        results = data.get("results") or []
        if data.get("status") != "OK" or not results:
            return None
        if not isinstance(results, list) or not isinstance(results[0], dict):
            raise MapsError("Malformed geocoding response")
        return results[0].get("formatted_address")
