"""Gateway adapter protocol and the normalized callback fields."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Mapping, Optional, Protocol

from rise_settlement.core.signature import KeyOrder


class TradeOutcome:
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    # created, paying or any state the gateway may still move on from
    PENDING = "pending"


@dataclass(slots=True, frozen=True)
class NormalizedFields:
    mch_order_no: Optional[str]
    gateway_ref: Optional[str]
    outcome: str
    amount: Optional[str] = None
    signature: Optional[str] = None

    @property
    def trade_succeeded(self) -> bool:
        return self.outcome == TradeOutcome.SUCCEEDED

    @property
    def trade_failed(self) -> bool:
        return self.outcome == TradeOutcome.FAILED


class GatewayAdapter(Protocol):
    name: str
    secret: str
    key_order: KeyOrder
    success_token: str
    failure_token: str

    def parse_fields(self, raw: Mapping[str, str]) -> NormalizedFields:
        ...


def first_present(raw: Mapping[str, str], *keys: str) -> Optional[str]:
    """Return the first non-empty value among ``keys``."""
    for key in keys:
        value = raw.get(key)
        if value is not None and value.strip() != "":
            return value.strip()
    return None


def classify_trade(
    value: Optional[str], success_values: Collection[str], failure_values: Collection[str]
) -> str:
    """Map a gateway status code; codes outside both sets leave the order pending."""
    if value in success_values:
        return TradeOutcome.SUCCEEDED
    if value in failure_values:
        return TradeOutcome.FAILED
    return TradeOutcome.PENDING
