from __future__ import annotations

from typing import Optional

from pydantic import Field

from incident_hub.core.enums import LocationSource
from incident_hub.models.common import HubBaseModel


class UserLocation(HubBaseModel):
    """Where the caller is right now. Built per search, never stored."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: Optional[str] = None
    source: Optional[LocationSource] = None
