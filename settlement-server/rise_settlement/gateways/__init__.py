"""Payment gateway callback adapters."""

from .base import GatewayAdapter, NormalizedFields, TradeOutcome
from .basepay import BasepayAdapter
from .nekpay import NekpayAdapter
from .registry import build_gateway_registry

__all__ = [
    "GatewayAdapter",
    "NormalizedFields",
    "TradeOutcome",
    "BasepayAdapter",
    "NekpayAdapter",
    "build_gateway_registry",
]
