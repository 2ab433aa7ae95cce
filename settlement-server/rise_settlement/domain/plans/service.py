"""Plan catalogue service."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.db.models import Plan as PlanModel
from rise_settlement.infrastructure.database.repositories.plan_repository import SqlPlanRepository

from .exceptions import PlanNotFoundError
from .models import Plan
from .repository import PlanRepository


@dataclass(slots=True)
class PlanService:
    repository: PlanRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "PlanService":
        return cls(SqlPlanRepository(session))

    async def get(self, plan_id: str) -> Plan | None:
        model = await self.repository.get(plan_id)
        return self._to_domain(model) if model else None

    async def require(self, plan_id: str) -> Plan:
        plan = await self.get(plan_id)
        if plan is None:
            raise PlanNotFoundError(f"plan {plan_id} not found")
        return plan

    async def list_plans(self) -> list[Plan]:
        return [self._to_domain(row) for row in await self.repository.list_plans()]

    async def save(self, plan: Plan) -> Plan:
        if plan.drops_count <= 0:
            raise ValueError("plan must have at least one drop")
        model = await self.repository.upsert(
            plan_id=plan.id,
            name=plan.name,
            deposit_usd_cents=plan.deposit_usd_cents,
            payout_per_drop_cents=plan.payout_per_drop_cents,
            drops_count=plan.drops_count,
            is_locked=plan.is_locked,
        )
        return self._to_domain(model)

    @staticmethod
    def _to_domain(model: PlanModel) -> Plan:
        return Plan(
            id=model.id,
            name=model.name,
            deposit_usd_cents=model.deposit_usd_cents,
            payout_per_drop_cents=model.payout_per_drop_cents,
            drops_count=model.drops_count,
            is_locked=model.is_locked,
        )
