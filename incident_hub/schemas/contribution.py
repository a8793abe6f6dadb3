from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from incident_hub.models.transaction import Transaction


class ContributionCreate(BaseModel):
    amount: float = Field(gt=0)
    name: str = Field(min_length=1)
    account: Optional[str] = None
    transaction_id: Optional[str] = None
    transaction_time: Optional[datetime] = None


class ContributionStats(BaseModel):
    total_contributions: int = 0
    total_amount: float = 0.0
    verified_contributions: int = 0
    pending_contributions: int = 0


class ContributionsOut(BaseModel):
    stats: ContributionStats
    transactions: List[Transaction]
