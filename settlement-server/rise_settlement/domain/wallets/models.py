"""Domain models for wallet operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


class TransactionType:
    DEPOSIT = "deposit"
    INCOME = "income"
    REFERRAL = "referral"


@dataclass(slots=True)
class WalletSnapshot:
    user_id: str
    available_cents: int
    pending_cents: int
    total_earned_cents: int
    updated_at: Optional[datetime]


@dataclass(slots=True)
class WalletTransactionRecord:
    id: str
    user_id: str
    type: str
    amount_cents: int
    balance_after_cents: int
    reference_id: str
    meta: Optional[dict[str, Any]]
    created_at: Optional[datetime]
