"""Domain model for investment plans."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Plan:
    id: str
    name: str
    deposit_usd_cents: int
    payout_per_drop_cents: int
    drops_count: int
    is_locked: bool = False
