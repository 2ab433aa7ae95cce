"""Repository interface for the webhook event log."""

from __future__ import annotations

from typing import Any, Protocol

from rise_settlement.db.models import WebhookEvent as WebhookEventModel


class WebhookEventRepository(Protocol):
    async def create(
        self,
        *,
        gateway: str,
        payload: dict[str, Any],
        source_ip: str | None,
        mch_order_no: str | None,
    ) -> WebhookEventModel:
        ...

    async def get(self, event_id: str) -> WebhookEventModel | None:
        ...

    async def update(self, event_id: str, **values: Any) -> None:
        ...

    async def list_events(
        self,
        *,
        gateway: str | None,
        mch_order_no: str | None,
        limit: int,
        offset: int,
    ) -> list[WebhookEventModel]:
        ...
