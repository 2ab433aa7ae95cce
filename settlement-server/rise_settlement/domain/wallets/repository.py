"""Repository protocol for wallet operations."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from rise_settlement.db.models import Wallet as WalletModel, WalletTransaction as WalletTransactionModel


class WalletRepository(Protocol):
    async def get_wallet(self, user_id: str) -> WalletModel | None:
        ...

    async def wallet_exists(self, user_id: str) -> bool:
        ...

    async def create_wallet(self, user_id: str) -> WalletModel:
        ...

    async def increment_balance(self, user_id: str, delta_cents: int) -> tuple[int, int] | None:
        ...

    async def has_transaction(self, *, user_id: str, type: str, reference_id: str) -> bool:
        ...

    async def add_transaction(
        self,
        *,
        user_id: str,
        type: str,
        amount_cents: int,
        balance_after_cents: int,
        reference_id: str,
        meta: dict[str, Any] | None,
    ) -> WalletTransactionModel:
        ...

    async def list_transactions(
        self,
        user_id: str,
        limit: int,
        offset: int,
        reference_id: str | None = None,
    ) -> Sequence[WalletTransactionModel]:
        ...
