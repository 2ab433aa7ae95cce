"""SQLAlchemy implementation for wallet domain"""

from __future__ import annotations

from typing import Any

from sqlalchemy import desc, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.db.models import Wallet, WalletTransaction


class SqlWalletRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_wallet(self, user_id: str) -> Wallet | None:
        return await self.session.get(Wallet, user_id, populate_existing=True)

    async def wallet_exists(self, user_id: str) -> bool:
        stmt = select(Wallet.user_id).where(Wallet.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def create_wallet(self, user_id: str) -> Wallet:
        wallet = Wallet(user_id=user_id, available_cents=0, pending_cents=0, total_earned_cents=0)
        try:
            # a concurrent insert only unwinds this savepoint, not the caller's transaction
            async with self.session.begin_nested():
                self.session.add(wallet)
                await self.session.flush()
        except IntegrityError:
            existing = await self.get_wallet(user_id)
            if existing is None:
                raise
            return existing
        await self.session.refresh(wallet)
        return wallet

    async def increment_balance(self, user_id: str, delta_cents: int) -> tuple[int, int] | None:
        stmt = (
            update(Wallet)
            .where(Wallet.user_id == user_id)
            .values(
                available_cents=Wallet.available_cents + delta_cents,
                total_earned_cents=Wallet.total_earned_cents + delta_cents,
            )
            .execution_options(synchronize_session=False)
            .returning(Wallet.available_cents, Wallet.total_earned_cents)
        )
        result = await self.session.execute(stmt)
        row = result.first()
        if row is None:
            return None
        return row[0], row[1]

    async def has_transaction(self, *, user_id: str, type: str, reference_id: str) -> bool:
        stmt = (
            select(WalletTransaction.id)
            .where(
                WalletTransaction.user_id == user_id,
                WalletTransaction.type == type,
                WalletTransaction.reference_id == reference_id,
            )
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def add_transaction(
        self,
        *,
        user_id: str,
        type: str,
        amount_cents: int,
        balance_after_cents: int,
        reference_id: str,
        meta: dict[str, Any] | None,
    ) -> WalletTransaction:
        tx = WalletTransaction(
            user_id=user_id,
            type=type,
            amount_cents=amount_cents,
            balance_after_cents=balance_after_cents,
            reference_id=reference_id,
            meta=meta,
        )
        self.session.add(tx)
        await self.session.flush()
        await self.session.refresh(tx)
        return tx

    async def list_transactions(
        self,
        user_id: str,
        limit: int,
        offset: int,
        reference_id: str | None = None,
    ) -> list[WalletTransaction]:
        stmt = select(WalletTransaction).where(WalletTransaction.user_id == user_id)
        if reference_id is not None:
            stmt = stmt.where(WalletTransaction.reference_id == reference_id)
        stmt = stmt.order_by(desc(WalletTransaction.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
