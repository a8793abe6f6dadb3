from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, model_validator

from incident_hub.core.enums import ReportStatus
from incident_hub.models.common import HubBaseModel


class Report(HubBaseModel):
    id: str
    profile_id: str
    location_string: str = ""
    description: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    photo_urls: List[str] = Field(default_factory=list)
    status: ReportStatus = ReportStatus.pending
    created_at: datetime
    updated_at: datetime
    reporter_name: Optional[str] = None

    @model_validator(mode="after")
    def _coordinates_paired(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must both be set or both be empty")
        return self


class RankedReport(Report):
    """A report with its great-circle distance (km) from a search center."""

    distance: float
    distance_label: str


class ReportSummary(HubBaseModel):
    id: str
    location_string: Optional[str] = None
    description: str
    status: ReportStatus
    created_at: datetime
    profile_id: str
