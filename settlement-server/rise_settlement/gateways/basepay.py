"""Basepay (aiffpay) collection callback."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from rise_settlement.core.config import BasepaySettings
from rise_settlement.core.signature import KeyOrder

from .base import NormalizedFields, classify_trade, first_present

SUCCESS_RESULT = "1"


@dataclass(slots=True)
class BasepayAdapter:
    secret: str
    success_token: str = "success"
    failure_token: str = "FAIL"
    key_order: KeyOrder = "locale"
    failure_results: frozenset[str] = field(default_factory=frozenset)
    name: str = "basepay"

    @classmethod
    def from_settings(cls, settings: BasepaySettings) -> "BasepayAdapter":
        return cls(
            secret=settings.collection_key,
            success_token=settings.success_token,
            failure_token=settings.failure_token,
            key_order=settings.key_order,
            failure_results=frozenset(settings.failure_results),
        )

    def parse_fields(self, raw: Mapping[str, str]) -> NormalizedFields:
        return NormalizedFields(
            mch_order_no=first_present(raw, "mchOrderNo", "mch_order_no"),
            gateway_ref=first_present(raw, "orderNo", "tradeNo"),
            outcome=classify_trade(
                first_present(raw, "tradeResult"), {SUCCESS_RESULT}, self.failure_results
            ),
            amount=first_present(raw, "amount", "tradeAmount"),
            signature=first_present(raw, "sign"),
        )
