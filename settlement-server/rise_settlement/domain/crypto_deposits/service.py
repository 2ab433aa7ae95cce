"""Manual crypto deposits reviewed by an administrator.

An approved submission becomes an ordinary ``crypto_manual`` deposit and is
settled by the same code path as gateway callbacks, so the method's bonus,
the income schedule and the referral fan-out apply unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.core.config import SettlementSettings
from rise_settlement.db.models import CryptoDeposit as CryptoDepositModel
from rise_settlement.domain.deposits import DepositService
from rise_settlement.domain.settlement import SettlementResult, SettlementService
from rise_settlement.infrastructure.database.repositories.crypto_deposit_repository import (
    SqlCryptoDepositRepository,
)

from .exceptions import (
    CryptoDepositNotFoundError,
    CryptoDepositStateError,
    DuplicateTransactionError,
)
from .models import CryptoDepositRecord, CryptoDepositStatus
from .repository import CryptoDepositRepository

logger = logging.getLogger(__name__)

CRYPTO_METHOD = "crypto_manual"
CRYPTO_GATEWAY = "crypto"


@dataclass(slots=True)
class CryptoApproval:
    submission: CryptoDepositRecord
    settlement: SettlementResult


@dataclass(slots=True)
class CryptoDepositService:
    session: AsyncSession
    repository: CryptoDepositRepository
    deposits: DepositService
    settlement: SettlementService

    @classmethod
    def with_session(cls, session: AsyncSession, settings: SettlementSettings) -> "CryptoDepositService":
        return cls(
            session=session,
            repository=SqlCryptoDepositRepository(session),
            deposits=DepositService.with_session(session),
            settlement=SettlementService.with_session(session, settings),
        )

    async def submit(
        self,
        *,
        user_id: str,
        tx_hash: str,
        currency: str = "USDT",
        amount_crypto: Optional[Decimal] = None,
        plan_id: Optional[str] = None,
        proof_path: Optional[str] = None,
    ) -> CryptoDepositRecord:
        tx_hash = tx_hash.strip()
        if not tx_hash:
            raise ValueError("transaction hash is required")
        try:
            model = await self.repository.create(
                user_id=user_id,
                plan_id=plan_id,
                currency=currency,
                amount_crypto=amount_crypto,
                tx_hash=tx_hash,
                proof_path=proof_path,
            )
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateTransactionError(f"transaction {tx_hash} was already submitted") from exc
        logger.info("Crypto deposit %s submitted by %s", model.id, user_id)
        return self._to_domain(model)

    async def get(self, submission_id: str) -> CryptoDepositRecord:
        model = await self.repository.get(submission_id)
        if model is None:
            raise CryptoDepositNotFoundError(f"crypto deposit {submission_id} not found")
        return self._to_domain(model)

    async def list_by_status(
        self, status: str = CryptoDepositStatus.PENDING, limit: int = 50, offset: int = 0
    ) -> list[CryptoDepositRecord]:
        return [self._to_domain(row) for row in await self.repository.list_by_status(status, limit, offset)]

    async def approve(
        self,
        submission_id: str,
        *,
        amount_usd_cents: int,
        admin_id: str,
        admin_note: Optional[str] = None,
    ) -> CryptoApproval:
        if amount_usd_cents <= 0:
            raise ValueError("valid USD amount is required")
        await self.get(submission_id)

        try:
            approved = await self.repository.transition(
                submission_id,
                status=CryptoDepositStatus.APPROVED,
                amount_usd_cents=amount_usd_cents,
                admin_id=admin_id,
                admin_note=admin_note,
            )
            if approved is None:
                raise CryptoDepositStateError(f"crypto deposit {submission_id} has already been processed")

            deposit = await self.deposits.create_pending(
                user_id=approved.user_id,
                plan_id=approved.plan_id,
                amount_usd_cents=amount_usd_cents,
                method=CRYPTO_METHOD,
                gateway=CRYPTO_GATEWAY,
                mch_order_no=f"CR-{approved.id}",
            )
            await self.repository.link_deposit(approved.id, deposit.id)
            result = await self.settlement.confirm(deposit.mch_order_no, approved.tx_hash)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if result.newly_confirmed:
            await self.settlement.distribute_referrals(result)

        logger.info(
            "Crypto deposit %s approved by %s: %s cents",
            submission_id,
            admin_id,
            amount_usd_cents,
        )
        return CryptoApproval(submission=await self.get(submission_id), settlement=result)

    async def reject(
        self, submission_id: str, *, admin_id: str, admin_note: Optional[str] = None
    ) -> CryptoDepositRecord:
        await self.get(submission_id)
        rejected = await self.repository.transition(
            submission_id,
            status=CryptoDepositStatus.REJECTED,
            admin_id=admin_id,
            admin_note=admin_note,
        )
        if rejected is None:
            await self.session.rollback()
            raise CryptoDepositStateError(f"crypto deposit {submission_id} has already been processed")
        await self.session.commit()
        logger.info("Crypto deposit %s rejected by %s", submission_id, admin_id)
        return self._to_domain(rejected)

    @staticmethod
    def _to_domain(model: CryptoDepositModel) -> CryptoDepositRecord:
        return CryptoDepositRecord(
            id=model.id,
            user_id=model.user_id,
            plan_id=model.plan_id,
            currency=model.currency,
            amount_crypto=model.amount_crypto,
            tx_hash=model.tx_hash,
            proof_path=model.proof_path,
            status=model.status,
            amount_usd_cents=model.amount_usd_cents,
            admin_id=model.admin_id,
            admin_note=model.admin_note,
            deposit_id=model.deposit_id,
            created_at=model.created_at,
        )
