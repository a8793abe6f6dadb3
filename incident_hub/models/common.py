# incident_hub/models/common.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict


def new_id() -> str:
    """Opaque unique token used as `_id` for every stored document."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    # naive UTC, the way pymongo hands datetimes back
    return datetime.now(timezone.utc).replace(tzinfo=None)


class HubBaseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


def as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
