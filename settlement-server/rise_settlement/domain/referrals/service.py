"""Multi-level referral bonus fan-out."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_FLOOR, Decimal
from typing import Callable, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.core.clock import utcnow
from rise_settlement.db.models import Referral as ReferralModel
from rise_settlement.domain.deposits import Deposit, DepositService
from rise_settlement.domain.wallets import TransactionType, WalletService
from rise_settlement.infrastructure.database.repositories.referral_repository import SqlReferralRepository

from .models import ReferralRecord
from .repository import ReferralRepository

logger = logging.getLogger(__name__)

DEFAULT_REFERRAL_RATES = (Decimal("0.20"), Decimal("0.03"), Decimal("0.02"))


def compute_referral_bonus(amount_cents: int, rate: Decimal) -> int:
    """Referral bonus in cents, always rounded down."""
    return int((Decimal(amount_cents) * rate).to_integral_value(rounding=ROUND_FLOOR))


@dataclass(slots=True)
class ReferralService:
    repository: ReferralRepository
    wallets: WalletService
    deposits: DepositService
    rates: Sequence[Decimal] = field(default=DEFAULT_REFERRAL_RATES)
    clock: Callable[[], datetime] = field(default=utcnow)

    @classmethod
    def with_session(
        cls,
        session: AsyncSession,
        rates: Sequence[Decimal] = DEFAULT_REFERRAL_RATES,
        clock: Callable[[], datetime] = utcnow,
    ) -> "ReferralService":
        return cls(
            repository=SqlReferralRepository(session),
            wallets=WalletService.with_session(session),
            deposits=DepositService.with_session(session),
            rates=tuple(rates),
            clock=clock,
        )

    async def fan_out(self, deposit: Deposit) -> list[ReferralRecord]:
        """Credit the depositor's upline, one level per configured rate.

        The walk is bounded by the number of rates, which also keeps a
        referral cycle from looping. Referrers without a wallet are skipped
        but the walk still continues to their own referrer.

        The deposit is stamped first; a deposit already stamped pays nothing,
        including one whose earlier fan-out found no eligible referrer.
        """
        records: list[ReferralRecord] = []
        if not await self.deposits.claim_referral_fan_out(deposit.id, at=self.clock()):
            logger.info("Referral fan-out already done for deposit %s", deposit.id)
            return records

        current_ref = await self.repository.get_referrer_id(deposit.user_id)

        for level, rate in enumerate(self.rates, start=1):
            if not current_ref:
                break
            bonus = compute_referral_bonus(deposit.amount_usd_cents, rate)

            if await self.wallets.wallet_exists(current_ref):
                await self.wallets.credit(
                    user_id=current_ref,
                    amount_cents=bonus,
                    type=TransactionType.REFERRAL,
                    reference_id=deposit.id,
                    meta={
                        "description": f"Referral bonus L{level}",
                        "level": level,
                        "percentage": float(rate * 100),
                        "referred_user_id": deposit.user_id,
                        "deposit_id": deposit.id,
                    },
                )
                model = await self.repository.add(
                    referrer_id=current_ref,
                    referred_id=deposit.user_id,
                    level=level,
                    bonus_cents=bonus,
                    deposit_id=deposit.id,
                )
                records.append(self._to_domain(model))
                logger.info(
                    "Referral L%s bonus %s cents to %s for deposit %s",
                    level,
                    bonus,
                    current_ref,
                    deposit.id,
                )
            else:
                logger.info("Referrer %s (L%s) has no wallet, no bonus credited", current_ref, level)

            current_ref = await self.repository.get_referrer_id(current_ref)

        return records

    async def replay(self, deposit: Deposit) -> Optional[list[ReferralRecord]]:
        """Re-run the fan-out for a deposit whose earlier attempt was rolled back.

        Returns ``None`` when the fan-out already ran for this deposit.
        """
        current = await self.deposits.get(deposit.id)
        if current is None or current.referrals_paid_at is not None:
            logger.info("Referral fan-out already done for deposit %s", deposit.id)
            return None
        return await self.fan_out(current)

    async def list_for_deposit(self, deposit_id: str) -> list[ReferralRecord]:
        return [self._to_domain(row) for row in await self.repository.list_for_deposit(deposit_id)]

    @staticmethod
    def _to_domain(model: ReferralModel) -> ReferralRecord:
        return ReferralRecord(
            id=model.id,
            referrer_id=model.referrer_id,
            referred_id=model.referred_id,
            level=model.level,
            bonus_cents=model.bonus_cents,
            deposit_id=model.deposit_id,
            created_at=model.created_at,
        )
