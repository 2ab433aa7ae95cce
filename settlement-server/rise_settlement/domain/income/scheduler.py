"""Schedules the recurring income drops of a confirmed deposit."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.db.models import IncomeEvent as IncomeEventModel
from rise_settlement.domain.deposits import Deposit
from rise_settlement.domain.plans import Plan
from rise_settlement.infrastructure.database.repositories.income_event_repository import (
    SqlIncomeEventRepository,
)

from .models import IncomeEvent
from .repository import IncomeEventRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IncomeScheduler:
    repository: IncomeEventRepository
    drop_interval: timedelta = timedelta(hours=22)

    @classmethod
    def with_session(cls, session: AsyncSession, drop_interval_hours: int = 22) -> "IncomeScheduler":
        return cls(SqlIncomeEventRepository(session), timedelta(hours=drop_interval_hours))

    async def schedule_first(self, deposit: Deposit, plan: Plan, now: datetime) -> IncomeEvent:
        model = await self.repository.create(
            deposit_id=deposit.id,
            user_id=deposit.user_id,
            amount_cents=plan.payout_per_drop_cents,
            drop_number=1,
            due_at=now + self.drop_interval,
        )
        logger.info("Scheduled drop 1/%s for deposit %s", plan.drops_count, deposit.id)
        return self.to_domain(model)

    async def schedule_next(self, event: IncomeEvent, plan: Plan, now: datetime) -> Optional[IncomeEvent]:
        """Create drop N+1, or return ``None`` once the plan's last drop has been paid."""
        if event.drop_number >= plan.drops_count:
            logger.info("All %s drops completed for deposit %s", plan.drops_count, event.deposit_id)
            return None
        model = await self.repository.create(
            deposit_id=event.deposit_id,
            user_id=event.user_id,
            amount_cents=plan.payout_per_drop_cents,
            drop_number=event.drop_number + 1,
            due_at=now + self.drop_interval,
        )
        logger.info(
            "Scheduled drop %s/%s for deposit %s",
            model.drop_number,
            plan.drops_count,
            event.deposit_id,
        )
        return self.to_domain(model)

    async def list_for_deposit(self, deposit_id: str) -> list[IncomeEvent]:
        return [self.to_domain(row) for row in await self.repository.list_for_deposit(deposit_id)]

    @staticmethod
    def to_domain(model: IncomeEventModel) -> IncomeEvent:
        return IncomeEvent(
            id=model.id,
            deposit_id=model.deposit_id,
            user_id=model.user_id,
            amount_cents=model.amount_cents,
            drop_number=model.drop_number,
            due_at=model.due_at,
            status=model.status,
            paid_at=model.paid_at,
        )
