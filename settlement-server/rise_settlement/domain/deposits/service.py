"""Deposit ledger service."""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.db.models import Deposit as DepositModel
from rise_settlement.infrastructure.database.repositories.deposit_repository import SqlDepositRepository

from .exceptions import DepositNotFoundError
from .models import Deposit
from .repository import DepositRepository


def generate_order_no(prefix: str = "WS") -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{secrets.token_hex(3)}"


@dataclass(slots=True)
class DepositService:
    repository: DepositRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "DepositService":
        return cls(SqlDepositRepository(session))

    async def create_pending(
        self,
        *,
        user_id: str,
        amount_usd_cents: int,
        method: str,
        gateway: str,
        plan_id: Optional[str] = None,
        mch_order_no: Optional[str] = None,
        local_amount: Optional[Decimal] = None,
        local_currency: Optional[str] = None,
        fx_rate: Optional[Decimal] = None,
    ) -> Deposit:
        """Persist the pending deposit that an outbound payment request refers to.

        The row must exist before the gateway can call back, since the
        callback is matched on ``mch_order_no`` and unknown orders are never
        created speculatively.
        """
        if amount_usd_cents <= 0:
            raise ValueError("deposit amount must be positive")
        model = await self.repository.create(
            user_id=user_id,
            plan_id=plan_id,
            amount_usd_cents=amount_usd_cents,
            method=method,
            gateway=gateway,
            mch_order_no=mch_order_no or generate_order_no(),
            local_amount=local_amount,
            local_currency=local_currency,
            fx_rate=fx_rate,
        )
        return self._to_domain(model)

    async def get(self, deposit_id: str) -> Deposit | None:
        model = await self.repository.get(deposit_id)
        return self._to_domain(model) if model else None

    async def get_by_order_no(self, mch_order_no: str) -> Deposit | None:
        model = await self.repository.get_by_order_no(mch_order_no)
        return self._to_domain(model) if model else None

    async def require_by_order_no(self, mch_order_no: str) -> Deposit:
        deposit = await self.get_by_order_no(mch_order_no)
        if deposit is None:
            raise DepositNotFoundError(f"deposit not found for order {mch_order_no}")
        return deposit

    async def mark_confirmed(
        self, deposit_id: str, *, gateway_ref: Optional[str], confirmed_at: datetime
    ) -> Deposit | None:
        """Move a pending deposit to confirmed; ``None`` when it was no longer pending."""
        model = await self.repository.mark_confirmed(
            deposit_id, gateway_ref=gateway_ref, confirmed_at=confirmed_at
        )
        return self._to_domain(model) if model else None

    async def mark_failed(self, deposit_id: str, *, gateway_ref: Optional[str]) -> Deposit | None:
        model = await self.repository.mark_failed(deposit_id, gateway_ref=gateway_ref)
        return self._to_domain(model) if model else None

    async def claim_referral_fan_out(self, deposit_id: str, *, at: datetime) -> bool:
        """Mark a confirmed deposit's referral fan-out as done.

        Returns ``False`` when it was already marked, which makes the fan-out
        run at most once even when it pays nobody.
        """
        return await self.repository.claim_referral_fan_out(deposit_id, at=at)

    @staticmethod
    def _to_domain(model: DepositModel) -> Deposit:
        return Deposit(
            id=model.id,
            user_id=model.user_id,
            plan_id=model.plan_id,
            amount_usd_cents=model.amount_usd_cents,
            method=model.method,
            gateway=model.gateway,
            mch_order_no=model.mch_order_no,
            status=model.status,
            gateway_ref=model.gateway_ref,
            local_amount=model.local_amount,
            local_currency=model.local_currency,
            fx_rate=model.fx_rate,
            confirmed_at=model.confirmed_at,
            created_at=model.created_at,
            referrals_paid_at=model.referrals_paid_at,
        )
