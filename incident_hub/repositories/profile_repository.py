from __future__ import annotations

from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument

from incident_hub.db.mongo import PROFILES


class ProfileRepository:
    def __init__(self, db):
        self.col = db[PROFILES]

    async def get(self, profile_id: str) -> Optional[Dict[str, Any]]:
        return await self.col.find_one({"_id": profile_id})

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        await self.col.insert_one(document)
        return document

    async def update(self, profile_id: str, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await self.col.find_one_and_update(
            {"_id": profile_id},
            {"$set": patch},
            return_document=ReturnDocument.AFTER,
        )

    async def names_by_ids(self, ids: List[str]) -> Dict[str, str]:
        if not ids:
            return {}

        names = {}
        async for p in self.col.find({"_id": {"$in": list(set(ids))}}, {"name": 1}):
            names[p["_id"]] = p.get("name")
        return names
