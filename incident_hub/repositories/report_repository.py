from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING

from incident_hub.db.mongo import REPORTS
from incident_hub.services.geo import BoundingBox


class ReportRepository:
    def __init__(self, db):
        self.col = db[REPORTS]

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        await self.col.insert_one(document)
        return document

    async def get(self, report_id: str) -> Optional[Dict[str, Any]]:
        return await self.col.find_one({"_id": report_id})

    async def find_in_bounds(
        self,
        box: BoundingBox,
        status: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        filt = box.to_query()
        if status:
            filt["status"] = status
        cursor = self.col.find(filt).sort("created_at", DESCENDING)
        if limit:
            cursor = cursor.limit(limit)
        return await cursor.to_list(length=limit)

    async def search_text(self, text: str, limit: int = 200) -> List[Dict[str, Any]]:
        pattern = re.escape(text.strip())
        filt = {
            "$or": [
                {"location_string": {"$regex": pattern, "$options": "i"}},
                {"address": {"$regex": pattern, "$options": "i"}},
            ]
        }
        cursor = self.col.find(filt).sort("created_at", DESCENDING).limit(limit)
        return await cursor.to_list(length=limit)

    async def latest(self, limit: int = 3) -> List[Dict[str, Any]]:
        cursor = self.col.find({}).sort("created_at", DESCENDING).limit(limit)
        return await cursor.to_list(length=limit)

    async def list_by_profile(self, profile_id: str) -> List[Dict[str, Any]]:
        cursor = self.col.find({"profile_id": profile_id}).sort("created_at", DESCENDING)
        return await cursor.to_list(length=None)

    async def ids_by_profile(self, profile_id: str) -> List[str]:
        ids = []
        async for doc in self.col.find({"profile_id": profile_id}, {"_id": 1}):
            ids.append(doc["_id"])
        return ids

    async def get_many(self, ids: List[str]) -> Dict[str, Dict[str, Any]]:
        if not ids:
            return {}
        out = {}
        async for doc in self.col.find({"_id": {"$in": list(ids)}}):
            out[doc["_id"]] = doc
        return out

    async def count_by_status(self, profile_id: Optional[str] = None) -> Dict[str, int]:
        filt: Dict[str, Any] = {}
        if profile_id:
            filt["profile_id"] = profile_id
        counts: Dict[str, int] = {}
        async for doc in self.col.find(filt, {"status": 1}):
            status = doc.get("status") or "pending"
            counts[status] = counts.get(status, 0) + 1
        return counts
