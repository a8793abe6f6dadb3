# incident_hub/api/deps.py
"""
Shared FastAPI dependencies. Tests override `get_db`, `get_settings`,
`get_profile_cache` and `get_maps_client`.
"""
from typing import Optional

from fastapi import Depends, Header

from incident_hub.core.config import Settings, get_settings
from incident_hub.core.errors import AuthRequired
from incident_hub.core.security import bearer_token
from incident_hub.db.session import get_db
from incident_hub.services.auth_service import AuthService
from incident_hub.services.location_service import LocationAcquirer
from incident_hub.services.maps_client import GoogleMapsClient
from incident_hub.services.profile_cache import ProfileCache, profile_cache
from incident_hub.services.profiles_service import ProfileService
from incident_hub.services.reports_service import ReportService
from incident_hub.services.storage import PhotoStorage


def get_profile_cache() -> ProfileCache:
    return profile_cache


def get_maps_client(settings: Settings = Depends(get_settings)) -> GoogleMapsClient:
    return GoogleMapsClient(settings)


def get_location_acquirer(
    maps: GoogleMapsClient = Depends(get_maps_client),
    settings: Settings = Depends(get_settings),
) -> LocationAcquirer:
    return LocationAcquirer(maps, device_timeout=settings.device_timeout_seconds)


def get_auth_service(
    db=Depends(get_db),
    cache: ProfileCache = Depends(get_profile_cache),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(db, cache, session_ttl_hours=settings.session_ttl_hours)


def get_profile_service(
    db=Depends(get_db),
    cache: ProfileCache = Depends(get_profile_cache),
) -> ProfileService:
    return ProfileService(db, cache)


def get_report_service(
    db=Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ReportService:
    return ReportService(db, PhotoStorage(settings), max_photos=settings.max_photos)


def get_session_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    return bearer_token(authorization)


async def get_optional_principal(
    token: Optional[str] = Depends(get_session_token),
    auth: AuthService = Depends(get_auth_service),
) -> Optional[str]:
    return await auth.principal_for_token(token)


async def get_current_principal(
    principal_id: Optional[str] = Depends(get_optional_principal),
) -> str:
    if principal_id is None:
        raise AuthRequired("Authentication error. Please log in again.")
    return principal_id
