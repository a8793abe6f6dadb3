from fastapi import APIRouter, Depends

from incident_hub.api.deps import get_current_principal, get_profile_service
from incident_hub.db.session import get_db
from incident_hub.models.transaction import Transaction
from incident_hub.schemas.contribution import ContributionCreate, ContributionsOut
from incident_hub.services.contributions_service import ContributionService, contribution_stats
from incident_hub.services.profiles_service import ProfileService

router = APIRouter(tags=["Contributions"])


def get_contribution_service(db=Depends(get_db)) -> ContributionService:
    return ContributionService(db)


@router.get("/contributions/mine", response_model=ContributionsOut)
async def my_contributions(
    principal_id: str = Depends(get_current_principal),
    profiles: ProfileService = Depends(get_profile_service),
    contributions: ContributionService = Depends(get_contribution_service),
):
    profile = await profiles.require(principal_id)
    rows = await contributions.for_profile_reports(profile.id)
    return ContributionsOut(stats=contribution_stats(rows), transactions=rows)


@router.post(
    "/reports/{report_id}/contributions",
    response_model=Transaction,
    status_code=201,
)
async def record_contribution(
    report_id: str,
    body: ContributionCreate,
    principal_id: str = Depends(get_current_principal),
    contributions: ContributionService = Depends(get_contribution_service),
):
    return await contributions.record(report_id, body)
