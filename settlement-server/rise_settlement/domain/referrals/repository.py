"""Repository interface for referrals and the upline lookup."""

from __future__ import annotations

from typing import Protocol, Sequence

from rise_settlement.db.models import Referral as ReferralModel


class ReferralRepository(Protocol):
    async def get_referrer_id(self, user_id: str) -> str | None:
        ...

    async def add(
        self,
        *,
        referrer_id: str,
        referred_id: str,
        level: int,
        bonus_cents: int,
        deposit_id: str,
    ) -> ReferralModel:
        ...

    async def list_for_deposit(self, deposit_id: str) -> Sequence[ReferralModel]:
        ...

    async def list_for_referrer(self, referrer_id: str, limit: int, offset: int) -> Sequence[ReferralModel]:
        ...
