from __future__ import annotations

from datetime import datetime
from typing import Optional

from incident_hub.models.common import HubBaseModel
from incident_hub.models.report import ReportSummary


class Transaction(HubBaseModel):
    id: str
    transaction_id: Optional[str] = None
    report_id: str
    amount: float
    name: str
    account: Optional[str] = None
    transaction_verified: bool = False
    transaction_time: datetime
    created_at: datetime
    report: Optional[ReportSummary] = None
