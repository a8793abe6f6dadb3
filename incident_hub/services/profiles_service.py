from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pymongo.errors import DuplicateKeyError

from incident_hub.core.enums import ProfileSource
from incident_hub.core.errors import (
    AuthRequired,
    Conflict,
    ProfileMismatch,
    ProfileMissing,
    ValidationFailed,
    store_errors,
)
from incident_hub.mapper.documents import with_id
from incident_hub.models.common import utcnow
from incident_hub.models.profile import Profile
from incident_hub.repositories.profile_repository import ProfileRepository
from incident_hub.schemas.profile import ProfileCreate, ProfileUpdate
from incident_hub.services.profile_cache import ProfileCache

logger = logging.getLogger(__name__)

LOCAL_ONLY_NOTICE = "Profile updated locally. Please sign in to save changes to your account."


@dataclass
class ProfileResolution:
    """Which source supplied the profile: the session's stored one or a caller fallback."""

    profile: Profile
    source: ProfileSource
    notice: Optional[str] = None


def assert_same_principal(principal_id: Optional[str], profile_id: str) -> None:
    if principal_id is None:
        raise AuthRequired("No user session found. Please log in.")
    if principal_id != profile_id:
        raise ProfileMismatch("Session does not match this profile. Please log in again.")


def _clean_text(value: Optional[str], field: str, label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationFailed(f"{label} is required", field=field)
    return value


def _clean_age(value) -> int:
    try:
        age = int(value)
    except (TypeError, ValueError):
        raise ValidationFailed("Please enter a valid age between 1 and 150", field="age")
    if age < 1 or age > 150:
        raise ValidationFailed("Please enter a valid age between 1 and 150", field="age")
    return age


def validate_profile_fields(patch: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if "name" in patch:
        out["name"] = _clean_text(patch["name"], "name", "Name")
    if "age" in patch:
        out["age"] = _clean_age(patch["age"])
    if "gender" in patch:
        out["gender"] = _clean_text(patch["gender"], "gender", "Gender")
    if "profession" in patch:
        out["profession"] = _clean_text(patch["profession"], "profession", "Profession")
    return out


class ProfileService:
    def __init__(self, db, cache: ProfileCache):
        self.repo = ProfileRepository(db)
        self.cache = cache

    @store_errors("An error occurred while creating your profile")
    async def create(self, principal_id: str, body: ProfileCreate) -> Profile:
        if body.role is None:
            raise ValidationFailed("Role is required", field="role")
        fields = validate_profile_fields(body.model_dump(exclude={"role"}))

        if await self.repo.get(principal_id):
            raise Conflict("Profile already exists")

        now = utcnow()
        doc = {
            "_id": principal_id,
            **fields,
            "role": body.role.value,
            "created_at": now,
            "updated_at": now,
        }
        try:
            await self.repo.insert(doc)
        except DuplicateKeyError:
            raise Conflict("Profile already exists")

        profile = Profile(**with_id(doc))
        self.cache.put(profile)
        logger.info("Profile created for %s (%s)", principal_id, profile.role.value)
        return profile

    @store_errors("Error loading user profile. Please try again.")
    async def get(self, principal_id: str) -> Optional[Profile]:
        cached = self.cache.get(principal_id)
        if cached is not None:
            return cached
        doc = await self.repo.get(principal_id)
        if not doc:
            return None
        profile = Profile(**with_id(doc))
        self.cache.put(profile)
        return profile

    async def require(self, principal_id: str) -> Profile:
        profile = await self.get(principal_id)
        if profile is None:
            raise ProfileMissing("No profile found. Please complete your profile setup.")
        return profile

    async def resolve(
        self, principal_id: Optional[str], fallback: Optional[Profile] = None
    ) -> ProfileResolution:
        """
        Session profile first, then the caller supplied fallback.
        """
        if principal_id is not None:
            profile = await self.get(principal_id)
            if profile is not None:
                return ProfileResolution(profile, ProfileSource.session)
            if fallback is None:
                raise ProfileMissing("No profile found. Please complete your profile setup.")
            logger.warning("No stored profile for %s, using fallback", principal_id)
            return ProfileResolution(fallback, ProfileSource.fallback)

        if fallback is None:
            raise AuthRequired("No authenticated user found")
        return ProfileResolution(fallback, ProfileSource.fallback)

    @store_errors("Failed to update profile")
    async def update(self, resolution: ProfileResolution, body: ProfileUpdate) -> ProfileResolution:
        fields = validate_profile_fields(body.model_dump(exclude_unset=True))

        if resolution.source == ProfileSource.fallback:
            # no session to write through: the change stays with the caller
            local = resolution.profile.model_copy(update=fields)
            return ProfileResolution(local, ProfileSource.fallback, LOCAL_ONLY_NOTICE)

        if not fields:
            return resolution

        fields["updated_at"] = utcnow()
        doc = await self.repo.update(resolution.profile.id, fields)
        if not doc:
            self.cache.clear(resolution.profile.id)
            raise ProfileMissing("No profile found. Please complete your profile setup.")

        profile = Profile(**with_id(doc))
        self.cache.put(profile)
        return ProfileResolution(profile, ProfileSource.session)
