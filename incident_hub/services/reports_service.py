from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pymongo.errors import PyMongoError

from incident_hub.core.enums import ReportStatus
from incident_hub.core.errors import NotFound, ValidationFailed, store_errors
from incident_hub.mapper.documents import to_report_out
from incident_hub.models.common import new_id, utcnow
from incident_hub.models.location import UserLocation
from incident_hub.models.profile import Profile
from incident_hub.models.report import RankedReport, Report
from incident_hub.repositories.profile_repository import ProfileRepository
from incident_hub.repositories.report_repository import ReportRepository
from incident_hub.schemas.report import ReportCreate
from incident_hub.services.geo import bounding_box, format_distance, rank_by_distance
from incident_hub.services.storage import PhotoStorage, PhotoUpload, validate_photos

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_KM = 5.0
NEAREST_RADIUS_KM = 10.0
RADIUS_PRESETS_KM = (2, 5, 10, 15)


def _check_radius(radius_km: float) -> float:
    if radius_km is None or not radius_km > 0:
        raise ValidationFailed("Radius must be greater than 0 km", field="radius_km")
    return float(radius_km)


def default_location_label(body: ReportCreate) -> Optional[str]:
    if body.address:
        return body.address
    if body.latitude is not None and body.longitude is not None:
        return f"{body.latitude:.6f}, {body.longitude:.6f}"
    return None


class ReportService:
    def __init__(self, db, storage: Optional[PhotoStorage] = None, max_photos: int = 5):
        self.reports = ReportRepository(db)
        self.profiles = ProfileRepository(db)
        self.storage = storage
        self.max_photos = max_photos

    async def _with_names(self, docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        names = await self.profiles.names_by_ids([d.get("profile_id") for d in docs])
        return [to_report_out(d, names.get(d.get("profile_id"))) for d in docs]

    # -------------------------
    # Proximity search
    # -------------------------
    @store_errors("Failed to fetch reports")
    async def fetch_candidates(
        self,
        center: UserLocation,
        radius_km: float,
        status: Optional[ReportStatus] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Reports inside the bounding box around `center`, newest first."""
        box = bounding_box(center.latitude, center.longitude, _check_radius(radius_km))
        return await self.reports.find_in_bounds(
            box, status=status.value if status else None, limit=limit
        )

    async def search_nearby(
        self,
        center: UserLocation,
        radius_km: float = DEFAULT_RADIUS_KM,
        status: Optional[ReportStatus] = None,
        limit: Optional[int] = None,
    ) -> List[RankedReport]:
        candidates = await self.fetch_candidates(center, radius_km, status, limit)
        ranked = rank_by_distance(candidates, center.latitude, center.longitude, radius_km)
        rows = await self._with_names(ranked)
        logger.debug(
            "Nearby search (%.5f, %.5f) r=%skm: %d candidates, %d in range",
            center.latitude, center.longitude, radius_km, len(candidates), len(rows),
        )
        return [
            RankedReport(**row, distance_label=format_distance(row["distance"]))
            for row in rows
        ]

    async def nearby_stats(
        self, center: UserLocation, radius_km: float = DEFAULT_RADIUS_KM
    ) -> Dict[str, int]:
        reports = await self.search_nearby(center, radius_km)
        stats = {"total": len(reports)}
        for s in ReportStatus:
            stats[s.value] = sum(1 for r in reports if r.status == s)
        return stats

    async def nearest_report(
        self, center: UserLocation, radius_km: float = NEAREST_RADIUS_KM
    ) -> Optional[RankedReport]:
        reports = await self.search_nearby(center, radius_km)
        return reports[0] if reports else None

    # -------------------------
    # Listings
    # -------------------------
    @store_errors("Failed to search for reports. Please try again.")
    async def search_by_text(self, text: str) -> List[Report]:
        if not text or not text.strip():
            raise ValidationFailed("Please enter an address to search for", field="q")
        docs = await self.reports.search_text(text)
        return [Report(**row) for row in await self._with_names(docs)]

    @store_errors("Failed to fetch latest reports. Please try again.")
    async def latest(self, limit: int = 3) -> List[Report]:
        docs = await self.reports.latest(limit)
        return [Report(**row) for row in await self._with_names(docs)]

    @store_errors("Failed to load your reports. Please try again.")
    async def list_for_profile(self, profile_id: str) -> List[Report]:
        docs = await self.reports.list_by_profile(profile_id)
        return [Report(**row) for row in await self._with_names(docs)]

    @store_errors("Failed to load report")
    async def get(self, report_id: str) -> Report:
        doc = await self.reports.get(report_id)
        if not doc:
            raise NotFound("Report not found")
        return Report(**(await self._with_names([doc]))[0])

    # -------------------------
    # Submission
    # -------------------------
    @store_errors("Failed to submit incident. Please try again.")
    async def submit(
        self,
        profile: Profile,
        body: ReportCreate,
        photos: Optional[List[PhotoUpload]] = None,
    ) -> Report:
        photos = photos or []

        description = (body.description or "").strip()
        if not description:
            raise ValidationFailed("Please provide a description of the incident", field="description")
        if (body.latitude is None) != (body.longitude is None):
            raise ValidationFailed("Latitude and longitude must be provided together", field="latitude")

        location_string = (body.location_string or "").strip() or default_location_label(body)
        if not location_string:
            raise ValidationFailed("Please select a location for the incident", field="location_string")

        validate_photos(photos, self.max_photos)

        # photos go first: a failed upload aborts the whole submission
        photo_keys: List[str] = []
        if photos:
            if self.storage is None:
                raise ValidationFailed("Photo uploads are not enabled", field="photos")
            photo_keys = self.storage.upload_all(profile.id, photos)
        photo_urls = [self.storage.public_url(k) for k in photo_keys]

        now = utcnow()
        doc = {
            "_id": new_id(),
            "profile_id": profile.id,
            "location_string": location_string,
            "description": description,
            "latitude": body.latitude,
            "longitude": body.longitude,
            "address": (body.address or "").strip() or None,
            "photo_urls": photo_urls,
            "status": ReportStatus.pending.value,
            "created_at": now,
            "updated_at": now,
        }
        try:
            await self.reports.insert(doc)
        except PyMongoError:
            # no report points at the photos, so they go too
            if photo_keys:
                self.storage.delete_all(photo_keys)
            raise
        logger.info("Report %s submitted by %s (%d photos)", doc["_id"], profile.id, len(photo_urls))
        return Report(**to_report_out(doc, profile.name))
