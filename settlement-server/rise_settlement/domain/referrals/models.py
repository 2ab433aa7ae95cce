"""Domain model for referral bonus audit rows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class ReferralRecord:
    id: str
    referrer_id: str
    referred_id: str
    level: int
    bonus_cents: int
    deposit_id: str
    created_at: Optional[datetime]
