"""SQLAlchemy implementation for the deposit ledger"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.db.models import Deposit


class SqlDepositRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

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
    ) -> Deposit:
        deposit = Deposit(
            user_id=user_id,
            plan_id=plan_id,
            amount_usd_cents=amount_usd_cents,
            method=method,
            gateway=gateway,
            mch_order_no=mch_order_no,
            local_amount=local_amount,
            local_currency=local_currency,
            fx_rate=fx_rate,
            status="pending",
        )
        self.session.add(deposit)
        await self.session.flush()
        await self.session.refresh(deposit)
        return deposit

    async def get(self, deposit_id: str) -> Deposit | None:
        return await self.session.get(Deposit, deposit_id, populate_existing=True)

    async def get_by_order_no(self, mch_order_no: str) -> Deposit | None:
        stmt = (
            select(Deposit)
            .where(Deposit.mch_order_no == mch_order_no)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def mark_confirmed(
        self,
        deposit_id: str,
        *,
        gateway_ref: str | None,
        confirmed_at: datetime,
    ) -> Deposit | None:
        return await self._transition(
            deposit_id,
            status="confirmed",
            gateway_ref=gateway_ref,
            confirmed_at=confirmed_at,
        )

    async def mark_failed(self, deposit_id: str, *, gateway_ref: str | None) -> Deposit | None:
        return await self._transition(deposit_id, status="failed", gateway_ref=gateway_ref)

    async def _transition(self, deposit_id: str, *, status: str, **values) -> Deposit | None:
        # compare-and-swap on the pending state; concurrent writers see zero rows
        values = {key: value for key, value in values.items() if value is not None}
        stmt = (
            update(Deposit)
            .where(Deposit.id == deposit_id, Deposit.status == "pending")
            .values(status=status, **values)
            .execution_options(synchronize_session=False)
            .returning(Deposit.id)
        )
        result = await self.session.execute(stmt)
        if result.scalar_one_or_none() is None:
            return None
        return await self.get(deposit_id)

    async def claim_referral_fan_out(self, deposit_id: str, *, at: datetime) -> bool:
        """Stamp ``referrals_paid_at`` once; ``False`` when the fan-out already ran."""
        stmt = (
            update(Deposit)
            .where(
                Deposit.id == deposit_id,
                Deposit.status == "confirmed",
                Deposit.referrals_paid_at.is_(None),
            )
            .values(referrals_paid_at=at)
            .execution_options(synchronize_session=False)
            .returning(Deposit.id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None
