"""Domain model for deposits."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


class DepositStatus:
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"

    TERMINAL = frozenset({CONFIRMED, FAILED})


@dataclass(slots=True)
class Deposit:
    id: str
    user_id: str
    plan_id: Optional[str]
    amount_usd_cents: int
    method: str
    gateway: str
    mch_order_no: str
    status: str
    gateway_ref: Optional[str]
    local_amount: Optional[Decimal]
    local_currency: Optional[str]
    fx_rate: Optional[Decimal]
    confirmed_at: Optional[datetime]
    created_at: Optional[datetime]
    referrals_paid_at: Optional[datetime] = None

    @property
    def is_confirmed(self) -> bool:
        return self.status == DepositStatus.CONFIRMED
