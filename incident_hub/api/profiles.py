from typing import Optional

from fastapi import APIRouter, Body, Depends

from incident_hub.api.deps import (
    get_current_principal,
    get_optional_principal,
    get_profile_service,
    get_report_service,
)
from incident_hub.models.profile import Profile
from incident_hub.models.report import Report
from incident_hub.schemas.profile import ProfileCreate, ProfileResolutionOut, ProfileUpdate
from incident_hub.services.profiles_service import ProfileService, assert_same_principal
from incident_hub.services.reports_service import ReportService

router = APIRouter(prefix="/profiles", tags=["Profiles"])


# =========================
# Onboarding questionnaire
# =========================
@router.post("", response_model=Profile, status_code=201)
async def create_profile(
    body: ProfileCreate,
    principal_id: str = Depends(get_current_principal),
    profiles: ProfileService = Depends(get_profile_service),
):
    return await profiles.create(principal_id, body)


@router.get("/me", response_model=Profile)
async def get_my_profile(
    principal_id: str = Depends(get_current_principal),
    profiles: ProfileService = Depends(get_profile_service),
):
    return await profiles.require(principal_id)


@router.post("/resolve", response_model=ProfileResolutionOut)
async def resolve_profile(
    fallback: Optional[Profile] = Body(default=None, embed=True),
    principal_id: Optional[str] = Depends(get_optional_principal),
    profiles: ProfileService = Depends(get_profile_service),
):
    """
    Session profile when there is one, otherwise the `fallback` the client
    already holds. `source` says which one was used.
    """
    res = await profiles.resolve(principal_id, fallback)
    return ProfileResolutionOut(profile=res.profile, source=res.source, notice=res.notice)


@router.patch("/me", response_model=ProfileResolutionOut)
async def update_my_profile(
    changes: ProfileUpdate = Body(..., embed=True),
    fallback: Optional[Profile] = Body(default=None, embed=True),
    principal_id: Optional[str] = Depends(get_optional_principal),
    profiles: ProfileService = Depends(get_profile_service),
):
    res = await profiles.update(await profiles.resolve(principal_id, fallback), changes)
    return ProfileResolutionOut(profile=res.profile, source=res.source, notice=res.notice)


@router.get("/{profile_id}", response_model=Profile)
async def get_profile(
    profile_id: str,
    principal_id: str = Depends(get_current_principal),
    profiles: ProfileService = Depends(get_profile_service),
):
    assert_same_principal(principal_id, profile_id)
    return await profiles.require(profile_id)


@router.get("/{profile_id}/reports", response_model=list[Report])
async def list_profile_reports(
    profile_id: str,
    principal_id: str = Depends(get_current_principal),
    reports: ReportService = Depends(get_report_service),
):
    assert_same_principal(principal_id, profile_id)
    return await reports.list_for_profile(profile_id)
