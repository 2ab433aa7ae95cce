"""Append-only log of every inbound gateway notification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.db.models import WebhookEvent as WebhookEventModel
from rise_settlement.infrastructure.database.repositories.webhook_event_repository import (
    SqlWebhookEventRepository,
)

from .models import WebhookEventRecord
from .repository import WebhookEventRepository

MAX_ERROR_LENGTH = 2000


@dataclass(slots=True)
class WebhookEventService:
    repository: WebhookEventRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "WebhookEventService":
        return cls(SqlWebhookEventRepository(session))

    async def record(
        self,
        gateway: str,
        payload: dict[str, Any],
        source_ip: Optional[str],
        mch_order_no: Optional[str] = None,
    ) -> WebhookEventRecord:
        model = await self.repository.create(
            gateway=gateway,
            payload=payload,
            source_ip=source_ip,
            mch_order_no=mch_order_no,
        )
        return self._to_domain(model)

    async def get(self, event_id: str) -> WebhookEventRecord | None:
        model = await self.repository.get(event_id)
        return self._to_domain(model) if model else None

    async def mark_signature(self, event_id: str, ok: bool) -> None:
        values: dict[str, Any] = {"signature_ok": ok}
        if not ok:
            values["error"] = "invalid signature"
        await self.repository.update(event_id, **values)

    async def mark_processed(self, event_id: str, error: Optional[str] = None) -> None:
        await self.repository.update(event_id, processed=True, error=_truncate(error))

    async def mark_error(self, event_id: str, error: str) -> None:
        await self.repository.update(event_id, error=_truncate(error))

    async def list_events(
        self,
        gateway: Optional[str] = None,
        mch_order_no: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[WebhookEventRecord]:
        models = await self.repository.list_events(
            gateway=gateway, mch_order_no=mch_order_no, limit=limit, offset=offset
        )
        return [self._to_domain(model) for model in models]

    @staticmethod
    def _to_domain(model: WebhookEventModel) -> WebhookEventRecord:
        return WebhookEventRecord(
            id=model.id,
            gateway=model.gateway,
            payload=model.payload or {},
            mch_order_no=model.mch_order_no,
            signature_ok=bool(model.signature_ok),
            processed=bool(model.processed),
            source_ip=model.source_ip,
            error=model.error,
            created_at=model.created_at,
        )


def _truncate(error: Optional[str]) -> Optional[str]:
    if error is None:
        return None
    return error[:MAX_ERROR_LENGTH]
