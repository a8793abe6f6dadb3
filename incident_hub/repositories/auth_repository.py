from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from incident_hub.db.mongo import SESSIONS, USERS


class UserRepository:
    def __init__(self, db):
        self.col = db[USERS]

    async def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return await self.col.find_one({"email": email})

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        await self.col.insert_one(document)
        return document


class SessionRepository:
    def __init__(self, db):
        self.col = db[SESSIONS]

    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        await self.col.insert_one(document)
        return document

    async def get_active(self, token: str, now: datetime) -> Optional[Dict[str, Any]]:
        return await self.col.find_one({"_id": token, "expires_at": {"$gt": now}})

    async def delete(self, token: str) -> bool:
        res = await self.col.delete_one({"_id": token})
        return res.deleted_count == 1
