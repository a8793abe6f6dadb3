from __future__ import annotations

from datetime import datetime

from incident_hub.core.enums import UserRole
from incident_hub.models.common import HubBaseModel


class Profile(HubBaseModel):
    id: str
    name: str
    age: int
    gender: str
    profession: str
    role: UserRole
    created_at: datetime
    updated_at: datetime

    @property
    def is_contractor(self) -> bool:
        return self.role == UserRole.contractor
