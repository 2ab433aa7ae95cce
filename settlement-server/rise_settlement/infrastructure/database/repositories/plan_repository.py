"""SQLAlchemy implementation for the plan catalogue"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.db.models import Plan


class SqlPlanRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, plan_id: str) -> Plan | None:
        return await self.session.get(Plan, plan_id)

    async def list_plans(self) -> list[Plan]:
        result = await self.session.execute(select(Plan).order_by(Plan.deposit_usd_cents))
        return list(result.scalars().all())

    async def upsert(
        self,
        *,
        plan_id: str,
        name: str,
        deposit_usd_cents: int,
        payout_per_drop_cents: int,
        drops_count: int,
        is_locked: bool,
    ) -> Plan:
        plan = await self.get(plan_id)
        if plan is None:
            plan = Plan(id=plan_id)
            self.session.add(plan)
        plan.name = name
        plan.deposit_usd_cents = deposit_usd_cents
        plan.payout_per_drop_cents = payout_per_drop_cents
        plan.drops_count = drops_count
        plan.is_locked = is_locked
        await self.session.flush()
        await self.session.refresh(plan)
        return plan
