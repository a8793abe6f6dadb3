from __future__ import annotations

from typing import Any, Dict, List

from pymongo import DESCENDING

from incident_hub.db.mongo import TRANSACTIONS


class TransactionRepository:
    def __init__(self, db):
        self.col = db[TRANSACTIONS]

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        await self.col.insert_one(document)
        return document

    async def list_for_reports(self, report_ids: List[str]) -> List[Dict[str, Any]]:
        if not report_ids:
            return []
        cursor = self.col.find({"report_id": {"$in": list(report_ids)}}).sort(
            "transaction_time", DESCENDING
        )
        return await cursor.to_list(length=None)
