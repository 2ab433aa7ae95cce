"""Repository interface for deposits."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Protocol

from rise_settlement.db.models import Deposit as DepositModel


class DepositRepository(Protocol):
    async def create(
        self,
        *,
        user_id: str,
        plan_id: str | None,
        amount_usd_cents: int,
        method: str,
        gateway: str,
        mch_order_no: str,
        local_amount: Decimal | None,
        local_currency: str | None,
        fx_rate: Decimal | None,
    ) -> DepositModel:
        ...

    async def get(self, deposit_id: str) -> DepositModel | None:
        ...

    async def get_by_order_no(self, mch_order_no: str) -> DepositModel | None:
        ...

    async def mark_confirmed(
        self,
        deposit_id: str,
        *,
        gateway_ref: str | None,
        confirmed_at: datetime,
    ) -> DepositModel | None:
        ...

    async def mark_failed(self, deposit_id: str, *, gateway_ref: str | None) -> DepositModel | None:
        ...

    async def claim_referral_fan_out(self, deposit_id: str, *, at: datetime) -> bool:
        ...
