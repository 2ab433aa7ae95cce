"""Gateway callback ingestion.

Every notification is written to the event log and committed before any
other work, so a crash later in the pipeline still leaves an audit row.
Settlement then runs through ``SettlementService``; the reply carries the
gateway's exact success token only when the notification has been fully
handled (settled, failed, still in progress, or a harmless duplicate);
anything else makes the gateway retry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.core.clock import utcnow
from rise_settlement.core.config import SecuritySettings, Settings
from rise_settlement.core.network import ip_in_networks
from rise_settlement.core.signature import verify
from rise_settlement.domain.deposits import DepositNotFoundError, DepositStateError
from rise_settlement.domain.plans import PlanNotFoundError
from rise_settlement.domain.settlement import SettlementResult, SettlementService
from rise_settlement.domain.wallets import WalletNotFoundError
from rise_settlement.gateways import GatewayAdapter, build_gateway_registry

from .events import WebhookEventService
from .exceptions import (
    GatewayNotConfiguredError,
    SignatureMismatchError,
    UnknownGatewayError,
    UntrustedSourceError,
    WebhookError,
    WebhookValidationError,
)
from .models import WebhookReply
from .parsing import decode_body, normalize_params

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WebhookService:
    session: AsyncSession
    events: WebhookEventService
    settlement: SettlementService
    gateways: dict[str, GatewayAdapter]
    security: SecuritySettings = field(default_factory=SecuritySettings)

    @classmethod
    def with_session(
        cls,
        session: AsyncSession,
        settings: Settings,
        clock: Callable[[], datetime] = utcnow,
    ) -> "WebhookService":
        return cls(
            session=session,
            events=WebhookEventService.with_session(session),
            settlement=SettlementService.with_session(session, settings.settlement, clock),
            gateways=build_gateway_registry(settings),
            security=settings.security,
        )

    def adapter_for(self, gateway: str) -> GatewayAdapter:
        adapter = self.gateways.get(gateway.lower())
        if adapter is None:
            raise UnknownGatewayError(f"unknown gateway: {gateway}")
        return adapter

    async def handle_body(
        self,
        gateway: str,
        body: bytes,
        content_type: Optional[str],
        source_ip: Optional[str],
    ) -> WebhookReply:
        """Decode a raw request body, keeping undecodable bodies in the log."""
        try:
            raw = decode_body(body, content_type)
        except WebhookValidationError as exc:
            text = body.decode("utf-8", errors="replace")
            return await self.handle(gateway, {"raw_body": text}, source_ip, parse_error=exc)
        return await self.handle(gateway, raw, source_ip)

    async def handle(
        self,
        gateway: str,
        raw: Mapping[str, Any],
        source_ip: Optional[str],
        *,
        parse_error: Optional[WebhookValidationError] = None,
    ) -> WebhookReply:
        adapter = self.adapter_for(gateway)

        event = await self.events.record(
            adapter.name, dict(raw), source_ip, mch_order_no=_order_hint(adapter, raw)
        )
        await self.session.commit()
        logger.info("%s callback received from %s (event %s)", adapter.name, source_ip, event.id)

        try:
            if parse_error is not None:
                raise parse_error
            result = await self._process(adapter, event.id, raw, source_ip)
        except (WebhookValidationError, SignatureMismatchError) as exc:
            return await self._reject(adapter, event.id, exc, 400)
        except UntrustedSourceError as exc:
            return await self._reject(adapter, event.id, exc, 403)
        except DepositNotFoundError as exc:
            return await self._reject(adapter, event.id, exc, 404)
        except DepositStateError as exc:
            # acknowledged so the gateway stops retrying; needs manual reconciliation
            await self.session.rollback()
            logger.error("Callback conflicts with deposit state (event %s): %s", event.id, exc)
            await self._finish(event.id, error=str(exc))
            return WebhookReply(200, adapter.success_token)
        except (WalletNotFoundError, PlanNotFoundError, GatewayNotConfiguredError) as exc:
            logger.error("Callback could not be settled (event %s): %s", event.id, exc)
            return await self._reject(adapter, event.id, exc, 500)
        except WebhookError as exc:
            return await self._reject(adapter, event.id, exc, 400)
        except SQLAlchemyError as exc:
            logger.exception("Database error while processing callback event %s", event.id)
            return await self._reject(adapter, event.id, exc, 500)

        await self._finish(event.id, error=result.referral_error)
        return WebhookReply(200, adapter.success_token)

    async def _process(
        self,
        adapter: GatewayAdapter,
        event_id: str,
        raw: Mapping[str, Any],
        source_ip: Optional[str],
    ) -> SettlementResult:
        params = normalize_params(raw)

        if not self.is_trusted_source(source_ip):
            if self.security.enforce_callback_ip_allowlist:
                raise UntrustedSourceError(f"callback from untrusted source {source_ip}")
            logger.warning("%s callback from unlisted source %s", adapter.name, source_ip)

        if not adapter.secret:
            raise GatewayNotConfiguredError(f"{adapter.name} signing key is not configured")

        fields = adapter.parse_fields(params)
        if not verify(params, fields.signature, adapter.secret, adapter.key_order):
            logger.warning("Invalid %s signature for order %s", adapter.name, fields.mch_order_no)
            await self.events.mark_signature(event_id, ok=False)
            await self.session.commit()
            raise SignatureMismatchError("invalid signature")

        await self.events.mark_signature(event_id, ok=True)
        await self.session.commit()

        if not fields.mch_order_no:
            raise WebhookValidationError("missing merchant order number")

        if fields.trade_succeeded:
            return await self.settlement.confirm_and_distribute(fields.mch_order_no, fields.gateway_ref)

        if fields.trade_failed:
            logger.info("%s reports unsuccessful trade for %s", adapter.name, fields.mch_order_no)
            result = await self.settlement.fail(fields.mch_order_no, fields.gateway_ref)
            await self.session.commit()
            return result

        logger.info("%s reports %s still in progress", adapter.name, fields.mch_order_no)
        return await self.settlement.hold(fields.mch_order_no)

    def is_trusted_source(self, source_ip: Optional[str]) -> bool:
        allowed = self.security.callback_allowed_ips
        if not allowed:
            return True
        return ip_in_networks(source_ip, allowed)

    async def _reject(
        self, adapter: GatewayAdapter, event_id: str, exc: Exception, status_code: int
    ) -> WebhookReply:
        await self.session.rollback()
        logger.warning("Rejected %s callback (event %s): %s", adapter.name, event_id, exc)
        try:
            await self.events.mark_error(event_id, str(exc) or exc.__class__.__name__)
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            logger.exception("Failed to record error on webhook event %s", event_id)
        return WebhookReply(status_code, adapter.failure_token)

    async def _finish(self, event_id: str, error: Optional[str] = None) -> None:
        await self.events.mark_processed(event_id, error=error)
        await self.session.commit()


def _order_hint(adapter: GatewayAdapter, raw: Mapping[str, Any]) -> Optional[str]:
    flat = {str(k): v for k, v in raw.items() if isinstance(v, str)}
    return adapter.parse_fields(flat).mch_order_no
