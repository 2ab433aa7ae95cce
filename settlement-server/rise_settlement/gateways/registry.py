"""Builds the gateway adapter table from settings."""

from __future__ import annotations

from rise_settlement.core.config import Settings

from .base import GatewayAdapter
from .basepay import BasepayAdapter
from .nekpay import NekpayAdapter


def build_gateway_registry(settings: Settings) -> dict[str, GatewayAdapter]:
    adapters: list[GatewayAdapter] = [
        BasepayAdapter.from_settings(settings.gateways.basepay),
        NekpayAdapter.from_settings(settings.gateways.nekpay),
    ]
    return {adapter.name: adapter for adapter in adapters}
