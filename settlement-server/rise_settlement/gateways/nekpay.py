"""NEKpay payment notification callback."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from rise_settlement.core.config import NekpaySettings
from rise_settlement.core.signature import KeyOrder

from .base import NormalizedFields, classify_trade, first_present

# order states: 0 created, 1 paying, 2 paid, 3 failed
PAID_STATE = "2"
FAILED_STATE = "3"


@dataclass(slots=True)
class NekpayAdapter:
    secret: str
    success_token: str = "SUCCESS"
    failure_token: str = "FAIL"
    key_order: KeyOrder = "byte"
    name: str = "nekpay"

    @classmethod
    def from_settings(cls, settings: NekpaySettings) -> "NekpayAdapter":
        return cls(
            secret=settings.secret_key,
            success_token=settings.success_token,
            failure_token=settings.failure_token,
            key_order=settings.key_order,
        )

    def parse_fields(self, raw: Mapping[str, str]) -> NormalizedFields:
        return NormalizedFields(
            mch_order_no=first_present(raw, "mchOrderNo"),
            gateway_ref=first_present(raw, "payOrderId"),
            outcome=classify_trade(first_present(raw, "state"), {PAID_STATE}, {FAILED_STATE}),
            amount=first_present(raw, "amount"),
            signature=first_present(raw, "sign"),
        )
