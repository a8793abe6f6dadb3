from typing import Dict, List

from pydantic import BaseModel, Field

from incident_hub.models.profile import Profile
from incident_hub.models.report import Report


class CitizenDashboardOut(BaseModel):
    profile: Profile
    total_reports: int = 0
    reports_by_status: Dict[str, int] = Field(default_factory=dict)


class ContractorDashboardOut(BaseModel):
    profile: Profile
    open_reports: int = 0
    reports_by_status: Dict[str, int] = Field(default_factory=dict)
    latest_reports: List[Report] = Field(default_factory=list)
