"""Domain model for scheduled income drops."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


class IncomeEventStatus:
    PENDING = "pending"
    PAID = "paid"


@dataclass(slots=True)
class IncomeEvent:
    id: str
    deposit_id: str
    user_id: str
    amount_cents: int
    drop_number: int
    due_at: datetime
    status: str
    paid_at: Optional[datetime]
