"""SQLAlchemy implementation for manual crypto deposit submissions"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.db.models import CryptoDeposit


class SqlCryptoDepositRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        *,
        user_id: str,
        plan_id: str | None,
        currency: str,
        amount_crypto: Decimal | None,
        tx_hash: str,
        proof_path: str | None,
    ) -> CryptoDeposit:
        submission = CryptoDeposit(
            user_id=user_id,
            plan_id=plan_id,
            currency=currency,
            amount_crypto=amount_crypto,
            tx_hash=tx_hash,
            proof_path=proof_path,
            status="pending",
        )
        self.session.add(submission)
        await self.session.flush()
        await self.session.refresh(submission)
        return submission

    async def get(self, submission_id: str) -> CryptoDeposit | None:
        return await self.session.get(CryptoDeposit, submission_id, populate_existing=True)

    async def list_by_status(self, status: str, limit: int, offset: int) -> list[CryptoDeposit]:
        stmt = (
            select(CryptoDeposit)
            .where(CryptoDeposit.status == status)
            .order_by(desc(CryptoDeposit.created_at))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def transition(self, submission_id: str, *, status: str, **values: Any) -> CryptoDeposit | None:
        stmt = (
            update(CryptoDeposit)
            .where(CryptoDeposit.id == submission_id, CryptoDeposit.status == "pending")
            .values(status=status, **values)
            .execution_options(synchronize_session=False)
            .returning(CryptoDeposit.id)
        )
        result = await self.session.execute(stmt)
        if result.scalar_one_or_none() is None:
            return None
        return await self.get(submission_id)

    async def link_deposit(self, submission_id: str, deposit_id: str) -> None:
        stmt = (
            update(CryptoDeposit)
            .where(CryptoDeposit.id == submission_id)
            .values(deposit_id=deposit_id)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
