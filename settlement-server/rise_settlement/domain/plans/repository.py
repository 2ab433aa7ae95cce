"""Repository interface for plans."""

from __future__ import annotations

from typing import Protocol, Sequence

from rise_settlement.db.models import Plan as PlanModel


class PlanRepository(Protocol):
    async def get(self, plan_id: str) -> PlanModel | None:
        ...

    async def list_plans(self) -> Sequence[PlanModel]:
        ...

    async def upsert(
        self,
        *,
        plan_id: str,
        name: str,
        deposit_usd_cents: int,
        payout_per_drop_cents: int,
        drops_count: int,
        is_locked: bool,
    ) -> PlanModel:
        ...
