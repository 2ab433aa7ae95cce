"""SQLAlchemy implementation for income events"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.db.models import IncomeEvent


class SqlIncomeEventRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        *,
        deposit_id: str,
        user_id: str,
        amount_cents: int,
        drop_number: int,
        due_at: datetime,
    ) -> IncomeEvent:
        event = IncomeEvent(
            deposit_id=deposit_id,
            user_id=user_id,
            amount_cents=amount_cents,
            drop_number=drop_number,
            due_at=due_at,
            status="pending",
        )
        self.session.add(event)
        await self.session.flush()
        await self.session.refresh(event)
        return event

    async def get(self, event_id: str) -> IncomeEvent | None:
        return await self.session.get(IncomeEvent, event_id, populate_existing=True)

    async def list_due(self, now: datetime, limit: int) -> list[IncomeEvent]:
        stmt = (
            select(IncomeEvent)
            .where(IncomeEvent.status == "pending", IncomeEvent.due_at <= now)
            .order_by(IncomeEvent.due_at.asc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def mark_paid(self, event_id: str, *, paid_at: datetime) -> IncomeEvent | None:
        stmt = (
            update(IncomeEvent)
            .where(IncomeEvent.id == event_id, IncomeEvent.status == "pending")
            .values(status="paid", paid_at=paid_at)
            .execution_options(synchronize_session=False)
            .returning(IncomeEvent.id)
        )
        result = await self.session.execute(stmt)
        if result.scalar_one_or_none() is None:
            return None
        return await self.get(event_id)

    async def list_for_deposit(self, deposit_id: str) -> list[IncomeEvent]:
        stmt = (
            select(IncomeEvent)
            .where(IncomeEvent.deposit_id == deposit_id)
            .order_by(IncomeEvent.drop_number.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
