"""Domain models for inbound gateway notifications."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass(slots=True)
class WebhookEventRecord:
    id: str
    gateway: str
    payload: dict[str, Any]
    mch_order_no: Optional[str]
    signature_ok: bool
    processed: bool
    source_ip: Optional[str]
    error: Optional[str]
    created_at: Optional[datetime]


@dataclass(slots=True, frozen=True)
class WebhookReply:
    """What the gateway receives back: only the exact success token stops retries."""

    status_code: int
    body: str

    @property
    def acknowledged(self) -> bool:
        return self.status_code == 200
