from typing import Optional

from fastapi import APIRouter, Depends, Query

from incident_hub.api.deps import get_location_acquirer
from incident_hub.core.enums import LocationFailure
from incident_hub.core.errors import ValidationFailed
from incident_hub.models.location import UserLocation
from incident_hub.services.location_service import LocationAcquirer, device_position_from_client

router = APIRouter(prefix="/locations", tags=["Locations"])


@router.get("/current", response_model=UserLocation)
async def current_location(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    device_error: Optional[LocationFailure] = Query(None),
    include_address: bool = Query(True),
    acquirer: LocationAcquirer = Depends(get_location_acquirer),
):
    """
    Resolve the caller's location: device coordinates when sent, else a
    network estimate. Each call re-acquires.
    """
    if (lat is None) != (lng is None):
        raise ValidationFailed("lat and lng must be provided together", field="lat")
    device = device_position_from_client(lat, lng, device_error)
    return await acquirer.acquire(device=device, include_address=include_address)
