"""Result types of a settlement attempt."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from rise_settlement.domain.deposits import Deposit
from rise_settlement.domain.income import IncomeEvent
from rise_settlement.domain.referrals import ReferralRecord
from rise_settlement.domain.wallets import WalletTransactionRecord


class SettlementOutcome:
    CONFIRMED = "confirmed"
    ALREADY_CONFIRMED = "already_confirmed"
    FAILED = "failed"
    ALREADY_TERMINAL = "already_terminal"
    UNCHANGED = "unchanged"


@dataclass(slots=True)
class SettlementResult:
    deposit: Deposit
    outcome: str
    transactions: list[WalletTransactionRecord] = field(default_factory=list)
    income_event: Optional[IncomeEvent] = None
    referrals: list[ReferralRecord] = field(default_factory=list)
    referral_error: Optional[str] = None

    @property
    def newly_confirmed(self) -> bool:
        return self.outcome == SettlementOutcome.CONFIRMED
