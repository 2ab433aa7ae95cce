"""Repository interface for manual crypto deposits."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Protocol

from rise_settlement.db.models import CryptoDeposit as CryptoDepositModel


class CryptoDepositRepository(Protocol):
    async def create(
        self,
        *,
        user_id: str,
        plan_id: str | None,
        currency: str,
        amount_crypto: Decimal | None,
        tx_hash: str,
        proof_path: str | None,
    ) -> CryptoDepositModel:
        ...

    async def get(self, submission_id: str) -> CryptoDepositModel | None:
        ...

    async def list_by_status(self, status: str, limit: int, offset: int) -> list[CryptoDepositModel]:
        ...

    async def transition(self, submission_id: str, *, status: str, **values: Any) -> CryptoDepositModel | None:
        ...

    async def link_deposit(self, submission_id: str, deposit_id: str) -> None:
        ...
