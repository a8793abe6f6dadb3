from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from incident_hub.api.deps import (
    get_current_principal,
    get_location_acquirer,
    get_profile_service,
    get_report_service,
)
from incident_hub.core.enums import LocationFailure, ReportStatus
from incident_hub.core.errors import ValidationFailed
from incident_hub.models.location import UserLocation
from incident_hub.models.report import Report
from incident_hub.schemas.report import (
    NearbyReportsOut,
    NearbyStatsOut,
    NearestReportOut,
    ReportCreate,
    ReportSearchOut,
)
from incident_hub.services.location_service import LocationAcquirer, device_position_from_client
from incident_hub.services.profiles_service import ProfileService
from incident_hub.services.reports_service import (
    DEFAULT_RADIUS_KM,
    NEAREST_RADIUS_KM,
    RADIUS_PRESETS_KM,
    ReportService,
)
from incident_hub.services.storage import PhotoUpload

router = APIRouter(prefix="/reports", tags=["Reports"])


# -------------------------
# Helpers
# -------------------------

def _parse_float(raw: Optional[str], field: str) -> Optional[float]:
    if raw is None or str(raw).strip() == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValidationFailed(f"Invalid number for {field}", field=field)


async def _center(
    acquirer: LocationAcquirer,
    lat: Optional[float],
    lng: Optional[float],
    device_error: Optional[LocationFailure],
    include_address: bool,
) -> UserLocation:
    if (lat is None) != (lng is None):
        raise ValidationFailed("lat and lng must be provided together", field="lat")
    device = device_position_from_client(lat, lng, device_error)
    return await acquirer.acquire(device=device, include_address=include_address)


# =========================
# Reports around me
# =========================
@router.get("/nearby", response_model=NearbyReportsOut)
async def reports_nearby(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    device_error: Optional[LocationFailure] = Query(None),
    radius_km: float = Query(DEFAULT_RADIUS_KM, gt=0, le=500),
    status: Optional[ReportStatus] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=500),
    include_address: bool = Query(True),
    acquirer: LocationAcquirer = Depends(get_location_acquirer),
    reports: ReportService = Depends(get_report_service),
):
    center = await _center(acquirer, lat, lng, device_error, include_address)
    rows = await reports.search_nearby(center, radius_km, status=status, limit=limit)
    return NearbyReportsOut(
        center=center, radius_km=radius_km, status=status, count=len(rows), reports=rows
    )


@router.get("/nearby/stats", response_model=NearbyStatsOut)
async def reports_nearby_stats(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    device_error: Optional[LocationFailure] = Query(None),
    radius_km: float = Query(DEFAULT_RADIUS_KM, gt=0, le=500),
    acquirer: LocationAcquirer = Depends(get_location_acquirer),
    reports: ReportService = Depends(get_report_service),
):
    center = await _center(acquirer, lat, lng, device_error, include_address=False)
    stats = await reports.nearby_stats(center, radius_km)
    return NearbyStatsOut(center=center, radius_km=radius_km, **stats)


@router.get("/nearby/nearest", response_model=NearestReportOut)
async def nearest_report(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    device_error: Optional[LocationFailure] = Query(None),
    radius_km: float = Query(NEAREST_RADIUS_KM, gt=0, le=500),
    acquirer: LocationAcquirer = Depends(get_location_acquirer),
    reports: ReportService = Depends(get_report_service),
):
    center = await _center(acquirer, lat, lng, device_error, include_address=False)
    report = await reports.nearest_report(center, radius_km)
    return NearestReportOut(center=center, radius_km=radius_km, report=report)


@router.get("/radius-presets")
async def radius_presets():
    """Search radii offered in the radius picker."""
    return {"default_km": DEFAULT_RADIUS_KM, "presets_km": list(RADIUS_PRESETS_KM)}


# =========================
# Locate a specific report (address search)
# =========================
@router.get("/search", response_model=ReportSearchOut)
async def search_reports(
    q: str = Query(""),
    reports: ReportService = Depends(get_report_service),
):
    rows = await reports.search_by_text(q)
    return ReportSearchOut(query=q.strip(), count=len(rows), reports=rows)


@router.get("/latest", response_model=List[Report])
async def latest_reports(
    limit: int = Query(3, ge=1, le=50),
    reports: ReportService = Depends(get_report_service),
):
    return await reports.latest(limit)


@router.get("/mine", response_model=List[Report])
async def my_reports(
    principal_id: str = Depends(get_current_principal),
    reports: ReportService = Depends(get_report_service),
):
    return await reports.list_for_profile(principal_id)


# =========================
# Report an incident
# =========================
@router.post("", response_model=Report, status_code=201)
async def submit_report(
    description: str = Form(""),
    location_string: Optional[str] = Form(None),
    latitude: Optional[str] = Form(None),
    longitude: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    photos: List[UploadFile] = File(default=[]),
    principal_id: str = Depends(get_current_principal),
    profiles: ProfileService = Depends(get_profile_service),
    reports: ReportService = Depends(get_report_service),
):
    profile = await profiles.require(principal_id)

    lat = _parse_float(latitude, "latitude")
    lng = _parse_float(longitude, "longitude")
    if lat is not None and not -90 <= lat <= 90:
        raise ValidationFailed("Latitude must be between -90 and 90", field="latitude")
    if lng is not None and not -180 <= lng <= 180:
        raise ValidationFailed("Longitude must be between -180 and 180", field="longitude")

    body = ReportCreate(
        description=description,
        location_string=location_string,
        latitude=lat,
        longitude=lng,
        address=address,
    )
    uploads = [
        PhotoUpload(
            filename=f.filename or "",
            content_type=f.content_type or "",
            data=await f.read(),
        )
        for f in photos
    ]
    return await reports.submit(profile, body, uploads)


@router.get("/{report_id}", response_model=Report)
async def get_report(report_id: str, reports: ReportService = Depends(get_report_service)):
    return await reports.get(report_id)
