"""Repository interface for income events."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from rise_settlement.db.models import IncomeEvent as IncomeEventModel


class IncomeEventRepository(Protocol):
    async def create(
        self,
        *,
        deposit_id: str,
        user_id: str,
        amount_cents: int,
        drop_number: int,
        due_at: datetime,
    ) -> IncomeEventModel:
        ...

    async def get(self, event_id: str) -> IncomeEventModel | None:
        ...

    async def list_due(self, now: datetime, limit: int) -> Sequence[IncomeEventModel]:
        ...

    async def mark_paid(self, event_id: str, *, paid_at: datetime) -> IncomeEventModel | None:
        ...

    async def list_for_deposit(self, deposit_id: str) -> Sequence[IncomeEventModel]:
        ...
