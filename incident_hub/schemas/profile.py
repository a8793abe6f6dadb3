from pydantic import BaseModel
from typing import Optional

from incident_hub.core.enums import ProfileSource, UserRole
from incident_hub.models.profile import Profile


# -------------------------
# Onboarding questionnaire
# -------------------------
class ProfileCreate(BaseModel):
    name: str = ""
    age: Optional[int] = None
    gender: str = ""
    profession: str = ""
    role: Optional[UserRole] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    profession: Optional[str] = None


class ProfileResolutionOut(BaseModel):
    profile: Profile
    source: ProfileSource
    notice: Optional[str] = None
