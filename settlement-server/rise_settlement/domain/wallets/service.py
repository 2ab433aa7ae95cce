"""Wallet domain service"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.db.models import Wallet as WalletModel, WalletTransaction as WalletTransactionModel
from rise_settlement.infrastructure.database.repositories.wallet_repository import SqlWalletRepository

from .exceptions import WalletNotFoundError
from .models import WalletSnapshot, WalletTransactionRecord
from .repository import WalletRepository

logger = logging.getLogger(__name__)


def compute_deposit_bonus(amount_cents: int, rate: Decimal) -> int:
    """Deposit incentive in cents, rounded half up."""
    if rate <= 0:
        return 0
    return int((Decimal(amount_cents) * rate).quantize(Decimal(1), rounding=ROUND_HALF_UP))


@dataclass(slots=True)
class WalletService:
    repository: WalletRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "WalletService":
        return cls(SqlWalletRepository(session))

    async def ensure_wallet(self, user_id: str) -> WalletSnapshot:
        wallet = await self.repository.get_wallet(user_id)
        if wallet is None:
            wallet = await self.repository.create_wallet(user_id)
        return self._to_snapshot(wallet)

    async def get_wallet(self, user_id: str) -> WalletSnapshot | None:
        wallet = await self.repository.get_wallet(user_id)
        return self._to_snapshot(wallet) if wallet else None

    async def wallet_exists(self, user_id: str) -> bool:
        return await self.repository.wallet_exists(user_id)

    async def has_transaction(self, *, user_id: str, type: str, reference_id: str) -> bool:
        return await self.repository.has_transaction(user_id=user_id, type=type, reference_id=reference_id)

    async def credit(
        self,
        *,
        user_id: str,
        amount_cents: int,
        type: str,
        reference_id: str,
        meta: Optional[dict[str, Any]] = None,
    ) -> WalletTransactionRecord:
        """Atomically add to available and lifetime earnings and record the ledger row.

        The increment runs as one UPDATE at the database so concurrent
        settlements for the same user serialize on the wallet row.
        """
        if amount_cents < 0:
            raise ValueError("credit amount must not be negative")
        balances = await self.repository.increment_balance(user_id, amount_cents)
        if balances is None:
            raise WalletNotFoundError(f"wallet not found for user {user_id}")
        available_cents, _ = balances
        tx = await self.repository.add_transaction(
            user_id=user_id,
            type=type,
            amount_cents=amount_cents,
            balance_after_cents=available_cents,
            reference_id=reference_id,
            meta=meta,
        )
        logger.debug("Credited %s cents (%s) to user %s, ref %s", amount_cents, type, user_id, reference_id)
        return self._to_transaction(tx)

    async def credit_once(
        self,
        *,
        user_id: str,
        amount_cents: int,
        type: str,
        reference_id: str,
        meta: Optional[dict[str, Any]] = None,
    ) -> WalletTransactionRecord | None:
        """Credit unless a ledger row of ``type`` already references ``reference_id``."""
        if await self.repository.has_transaction(user_id=user_id, type=type, reference_id=reference_id):
            logger.info("Skipping duplicate %s credit for user %s, ref %s", type, user_id, reference_id)
            return None
        return await self.credit(
            user_id=user_id,
            amount_cents=amount_cents,
            type=type,
            reference_id=reference_id,
            meta=meta,
        )

    async def list_transactions(
        self,
        user_id: str,
        limit: int = 20,
        offset: int = 0,
        reference_id: Optional[str] = None,
    ) -> list[WalletTransactionRecord]:
        rows = await self.repository.list_transactions(user_id, limit, offset, reference_id)
        return [self._to_transaction(row) for row in rows]

    @staticmethod
    def _to_snapshot(model: WalletModel) -> WalletSnapshot:
        return WalletSnapshot(
            user_id=model.user_id,
            available_cents=model.available_cents,
            pending_cents=model.pending_cents,
            total_earned_cents=model.total_earned_cents,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_transaction(model: WalletTransactionModel) -> WalletTransactionRecord:
        return WalletTransactionRecord(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            amount_cents=model.amount_cents,
            balance_after_cents=model.balance_after_cents,
            reference_id=model.reference_id,
            meta=model.meta,
            created_at=model.created_at,
        )
