"""Deposit settlement: the confirmed-deposit ledger transaction.

``confirm`` runs inside the caller's transaction and performs, as one unit,
the pending -> confirmed compare-and-swap, the wallet credit (plus the
method's deposit bonus), the ledger rows and the first income drop. The
status compare-and-swap is the idempotency anchor: of any number of
concurrent or repeated deliveries exactly one sees the pending row.

Referral bonuses are paid afterwards in a separate transaction by
``confirm_and_distribute``; a failure there is logged and reported but never
undoes the committed settlement.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.core.clock import utcnow
from rise_settlement.core.config import SettlementSettings
from rise_settlement.domain.deposits import Deposit, DepositService, DepositStateError, DepositStatus
from rise_settlement.domain.income import IncomeScheduler
from rise_settlement.domain.plans import Plan, PlanService
from rise_settlement.domain.referrals import ReferralService
from rise_settlement.domain.wallets import (
    TransactionType,
    WalletNotFoundError,
    WalletService,
    compute_deposit_bonus,
)

from .models import SettlementOutcome, SettlementResult

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SettlementService:
    session: AsyncSession
    deposits: DepositService
    wallets: WalletService
    plans: PlanService
    scheduler: IncomeScheduler
    referrals: ReferralService
    settings: SettlementSettings
    clock: Callable[[], datetime] = field(default=utcnow)

    @classmethod
    def with_session(
        cls,
        session: AsyncSession,
        settings: SettlementSettings,
        clock: Callable[[], datetime] = utcnow,
    ) -> "SettlementService":
        wallets = WalletService.with_session(session)
        referrals = ReferralService.with_session(session, settings.referral_rates, clock)
        return cls(
            session=session,
            deposits=DepositService.with_session(session),
            wallets=wallets,
            plans=PlanService.with_session(session),
            scheduler=IncomeScheduler.with_session(session, settings.drop_interval_hours),
            referrals=referrals,
            settings=settings,
            clock=clock,
        )

    async def confirm(self, mch_order_no: str, gateway_ref: Optional[str] = None) -> SettlementResult:
        deposit = await self.deposits.require_by_order_no(mch_order_no)

        if deposit.status == DepositStatus.CONFIRMED:
            logger.info("Deposit already processed: %s", mch_order_no)
            return SettlementResult(deposit=deposit, outcome=SettlementOutcome.ALREADY_CONFIRMED)
        if deposit.status == DepositStatus.FAILED:
            raise DepositStateError(f"deposit {mch_order_no} already failed, refusing to confirm")

        # checked before any write so a missing wallet never leaves a half-applied deposit
        if not await self.wallets.wallet_exists(deposit.user_id):
            raise WalletNotFoundError(f"wallet not found for user {deposit.user_id}")
        plan: Optional[Plan] = None
        if deposit.plan_id is not None:
            plan = await self.plans.require(deposit.plan_id)

        now = self.clock()
        confirmed = await self.deposits.mark_confirmed(
            deposit.id, gateway_ref=gateway_ref, confirmed_at=now
        )
        if confirmed is None:
            return await self._lost_race(deposit)

        result = SettlementResult(deposit=confirmed, outcome=SettlementOutcome.CONFIRMED)
        amount = confirmed.amount_usd_cents
        bonus = compute_deposit_bonus(amount, self.settings.bonus_rate_for(confirmed.method))

        deposit_tx = await self.wallets.credit_once(
            user_id=confirmed.user_id,
            amount_cents=amount,
            type=TransactionType.DEPOSIT,
            reference_id=confirmed.id,
            meta=self._deposit_meta(confirmed, f"Deposit confirmed via {confirmed.gateway}"),
        )
        if deposit_tx is not None:
            result.transactions.append(deposit_tx)
        if bonus > 0:
            bonus_tx = await self.wallets.credit_once(
                user_id=confirmed.user_id,
                amount_cents=bonus,
                type=TransactionType.INCOME,
                reference_id=confirmed.id,
                meta=self._deposit_meta(confirmed, "Deposit bonus"),
            )
            if bonus_tx is not None:
                result.transactions.append(bonus_tx)

        if plan is not None:
            result.income_event = await self.scheduler.schedule_first(confirmed, plan, now)

        logger.info(
            "Deposit %s confirmed: %s cents + %s bonus credited to %s",
            mch_order_no,
            amount,
            bonus,
            confirmed.user_id,
        )
        return result

    async def confirm_and_distribute(
        self, mch_order_no: str, gateway_ref: Optional[str] = None
    ) -> SettlementResult:
        """Commit the settlement, then pay referral bonuses in their own transaction."""
        try:
            result = await self.confirm(mch_order_no, gateway_ref)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if result.newly_confirmed:
            await self.distribute_referrals(result)
        return result

    async def distribute_referrals(self, result: SettlementResult) -> None:
        try:
            result.referrals = await self.referrals.fan_out(result.deposit)
            await self.session.commit()
        except Exception as exc:
            await self.session.rollback()
            logger.exception("Referral fan-out failed for deposit %s", result.deposit.id)
            result.referral_error = str(exc) or exc.__class__.__name__

    async def fail(self, mch_order_no: str, gateway_ref: Optional[str] = None) -> SettlementResult:
        """Record an unsuccessful payment; terminal deposits are left untouched."""
        deposit = await self.deposits.require_by_order_no(mch_order_no)
        if deposit.status in DepositStatus.TERMINAL:
            return SettlementResult(deposit=deposit, outcome=SettlementOutcome.ALREADY_TERMINAL)

        failed = await self.deposits.mark_failed(deposit.id, gateway_ref=gateway_ref)
        if failed is None:
            current = await self.deposits.get(deposit.id)
            return SettlementResult(deposit=current or deposit, outcome=SettlementOutcome.ALREADY_TERMINAL)

        logger.info("Deposit %s marked failed", mch_order_no)
        return SettlementResult(deposit=failed, outcome=SettlementOutcome.FAILED)

    async def hold(self, mch_order_no: str) -> SettlementResult:
        """Acknowledge an in-progress notification without touching the deposit."""
        deposit = await self.deposits.require_by_order_no(mch_order_no)
        logger.info("Deposit %s still %s, gateway reports payment in progress", mch_order_no, deposit.status)
        return SettlementResult(deposit=deposit, outcome=SettlementOutcome.UNCHANGED)

    async def _lost_race(self, deposit: Deposit) -> SettlementResult:
        current = await self.deposits.get(deposit.id)
        if current is not None and current.is_confirmed:
            logger.info("Deposit %s confirmed by a concurrent delivery", deposit.mch_order_no)
            return SettlementResult(deposit=current, outcome=SettlementOutcome.ALREADY_CONFIRMED)
        raise DepositStateError(f"deposit {deposit.mch_order_no} is no longer pending")

    @staticmethod
    def _deposit_meta(deposit: Deposit, description: str) -> dict[str, Any]:
        return {
            "description": description,
            "deposit_id": deposit.id,
            "mch_order_no": deposit.mch_order_no,
            "gateway": deposit.gateway,
            "gateway_ref": deposit.gateway_ref,
            "local_amount": str(deposit.local_amount) if deposit.local_amount is not None else None,
            "local_currency": deposit.local_currency,
            "fx_rate": str(deposit.fx_rate) if deposit.fx_rate is not None else None,
        }
