from __future__ import annotations

from typing import Dict

from incident_hub.core.enums import ReportStatus
from incident_hub.core.errors import store_errors
from incident_hub.models.profile import Profile
from incident_hub.repositories.report_repository import ReportRepository
from incident_hub.schemas.dashboard import CitizenDashboardOut, ContractorDashboardOut
from incident_hub.services.reports_service import ReportService

OPEN_STATUSES = {ReportStatus.pending.value, ReportStatus.in_progress.value}


def _all_statuses(counts: Dict[str, int]) -> Dict[str, int]:
    return {s.value: counts.get(s.value, 0) for s in ReportStatus}


class DashboardService:
    def __init__(self, db):
        self.reports = ReportRepository(db)
        self.report_service = ReportService(db)

    @store_errors("Failed to load dashboard")
    async def citizen(self, profile: Profile) -> CitizenDashboardOut:
        counts = _all_statuses(await self.reports.count_by_status(profile.id))
        return CitizenDashboardOut(
            profile=profile,
            total_reports=sum(counts.values()),
            reports_by_status=counts,
        )

    @store_errors("Failed to load dashboard")
    async def contractor(self, profile: Profile, latest: int = 5) -> ContractorDashboardOut:
        counts = _all_statuses(await self.reports.count_by_status())
        return ContractorDashboardOut(
            profile=profile,
            open_reports=sum(v for k, v in counts.items() if k in OPEN_STATUSES),
            reports_by_status=counts,
            latest_reports=await self.report_service.latest(latest),
        )
