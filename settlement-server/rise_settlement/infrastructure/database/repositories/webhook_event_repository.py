"""SQLAlchemy implementation for the webhook event log"""

from __future__ import annotations

from typing import Any

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.db.models import WebhookEvent


class SqlWebhookEventRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        *,
        gateway: str,
        payload: dict[str, Any],
        source_ip: str | None,
        mch_order_no: str | None,
    ) -> WebhookEvent:
        event = WebhookEvent(
            gateway=gateway,
            payload=payload,
            source_ip=source_ip,
            mch_order_no=mch_order_no,
            signature_ok=False,
            processed=False,
        )
        self.session.add(event)
        await self.session.flush()
        await self.session.refresh(event)
        return event

    async def get(self, event_id: str) -> WebhookEvent | None:
        return await self.session.get(WebhookEvent, event_id, populate_existing=True)

    async def update(self, event_id: str, **values: Any) -> None:
        stmt = (
            update(WebhookEvent)
            .where(WebhookEvent.id == event_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def list_events(
        self,
        *,
        gateway: str | None,
        mch_order_no: str | None,
        limit: int,
        offset: int,
    ) -> list[WebhookEvent]:
        stmt = select(WebhookEvent)
        if gateway:
            stmt = stmt.where(WebhookEvent.gateway == gateway)
        if mch_order_no:
            stmt = stmt.where(WebhookEvent.mch_order_no == mch_order_no)
        stmt = stmt.order_by(desc(WebhookEvent.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
