from __future__ import annotations

import logging
from typing import List

from incident_hub.core.errors import NotFound, store_errors
from incident_hub.mapper.documents import to_transaction_out
from incident_hub.models.common import as_naive_utc, new_id, utcnow
from incident_hub.models.transaction import Transaction
from incident_hub.repositories.report_repository import ReportRepository
from incident_hub.repositories.transaction_repository import TransactionRepository
from incident_hub.schemas.contribution import ContributionCreate, ContributionStats

logger = logging.getLogger(__name__)


def contribution_stats(transactions: List[Transaction]) -> ContributionStats:
    total = len(transactions)
    verified = sum(1 for t in transactions if t.transaction_verified)
    return ContributionStats(
        total_contributions=total,
        total_amount=round(sum(t.amount or 0 for t in transactions), 2),
        verified_contributions=verified,
        pending_contributions=total - verified,
    )


class ContributionService:
    def __init__(self, db):
        self.transactions = TransactionRepository(db)
        self.reports = ReportRepository(db)

    @store_errors("Failed to load contributions. Please try again.")
    async def for_profile_reports(self, profile_id: str) -> List[Transaction]:
        """Contributions made toward any report owned by `profile_id`, newest first."""
        report_ids = await self.reports.ids_by_profile(profile_id)
        if not report_ids:
            return []

        rows = await self.transactions.list_for_reports(report_ids)
        reports = await self.reports.get_many(list({r["report_id"] for r in rows}))
        return [Transaction(**to_transaction_out(r, reports.get(r["report_id"]))) for r in rows]

    @store_errors("Failed to record contribution. Please try again.")
    async def record(self, report_id: str, body: ContributionCreate) -> Transaction:
        report = await self.reports.get(report_id)
        if not report:
            raise NotFound("Report not found")

        now = utcnow()
        doc = {
            "_id": new_id(),
            "transaction_id": body.transaction_id,
            "report_id": report_id,
            "amount": round(float(body.amount), 2),
            "name": body.name.strip(),
            "account": body.account,
            "transaction_verified": False,
            "transaction_time": as_naive_utc(body.transaction_time) if body.transaction_time else now,
            "created_at": now,
        }
        await self.transactions.insert(doc)
        logger.info("Contribution %s of %.2f recorded for report %s", doc["_id"], doc["amount"], report_id)
        return Transaction(**to_transaction_out(doc, report))
