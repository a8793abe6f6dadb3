from fastapi import APIRouter, Depends

from incident_hub.api.deps import get_current_principal, get_profile_service
from incident_hub.db.session import get_db
from incident_hub.schemas.dashboard import CitizenDashboardOut, ContractorDashboardOut
from incident_hub.services.dashboard_service import DashboardService
from incident_hub.services.profiles_service import ProfileService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=None)
async def dashboard(
    principal_id: str = Depends(get_current_principal),
    profiles: ProfileService = Depends(get_profile_service),
    db=Depends(get_db),
) -> CitizenDashboardOut | ContractorDashboardOut:
    """Role based landing data: contractors see the platform, citizens their own reports."""
    profile = await profiles.require(principal_id)
    service = DashboardService(db)
    if profile.is_contractor:
        return await service.contractor(profile)
    return await service.citizen(profile)
