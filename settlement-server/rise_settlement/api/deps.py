"""Reusable FastAPI dependencies."""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.core.config import Settings, get_settings
from rise_settlement.core.network import ip_in_networks
from rise_settlement.infrastructure.database.session import get_session


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def client_ip(request: Request) -> str | None:
    """Caller address, taken from proxy headers only when the peer is a trusted proxy.

    ``X-Forwarded-For`` is read right to left and the first hop that is not
    itself a trusted proxy wins, so entries prepended by the caller are ignored.
    """
    peer = request.client.host if request.client else None
    proxies = get_app_settings(request).security.trusted_proxies
    if not ip_in_networks(peer, proxies):
        return peer

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
        for hop in reversed(hops):
            if not ip_in_networks(hop, proxies):
                return hop
        if hops:
            return hops[0]
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return peer


__all__ = ["get_db_session", "get_app_settings", "client_ip"]
