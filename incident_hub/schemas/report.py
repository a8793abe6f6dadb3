from pydantic import BaseModel, Field
from typing import List, Optional

from incident_hub.core.enums import ReportStatus
from incident_hub.models.location import UserLocation
from incident_hub.models.report import RankedReport, Report


class ReportCreate(BaseModel):
    description: str = ""
    location_string: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    address: Optional[str] = None


class NearbyReportsOut(BaseModel):
    center: UserLocation
    radius_km: float
    status: Optional[ReportStatus] = None
    count: int
    reports: List[RankedReport]


class NearbyStatsOut(BaseModel):
    center: UserLocation
    radius_km: float
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    resolved: int = 0
    closed: int = 0


class NearestReportOut(BaseModel):
    center: UserLocation
    radius_km: float
    report: Optional[RankedReport] = None


class ReportSearchOut(BaseModel):
    query: str
    count: int
    reports: List[Report]
