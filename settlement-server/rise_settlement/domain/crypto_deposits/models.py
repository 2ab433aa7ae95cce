"""Domain model for manual crypto deposit submissions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


class CryptoDepositStatus:
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(slots=True)
class CryptoDepositRecord:
    id: str
    user_id: str
    plan_id: Optional[str]
    currency: str
    amount_crypto: Optional[Decimal]
    tx_hash: str
    proof_path: Optional[str]
    status: str
    amount_usd_cents: Optional[int]
    admin_id: Optional[str]
    admin_note: Optional[str]
    deposit_id: Optional[str]
    created_at: Optional[datetime]
