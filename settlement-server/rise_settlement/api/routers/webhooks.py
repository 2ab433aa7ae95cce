"""Payment gateway callbacks (Basepay, NEKpay)."""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.api.deps import client_ip, get_app_settings, get_db_session
from rise_settlement.core.config import Settings
from rise_settlement.domain.webhooks import UnknownGatewayError, WebhookService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{gateway}", response_class=PlainTextResponse)
async def receive_callback(
    gateway: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    """The gateway only stops retrying when the body is exactly its success token."""
    service = WebhookService.with_session(db, settings)
    source_ip = client_ip(request)
    content_type = request.headers.get("content-type", "")

    try:
        if content_type.startswith("multipart/form-data"):
            form = await request.form()
            raw = {key: value for key, value in form.items() if isinstance(value, str)}
            reply = await service.handle(gateway, raw, source_ip)
        else:
            body = await request.body()
            reply = await service.handle_body(gateway, body, content_type, source_ip)
    except UnknownGatewayError:
        logger.warning("Callback for unknown gateway %r from %s", gateway, source_ip)
        return PlainTextResponse("FAIL", status_code=404)

    return PlainTextResponse(reply.body, status_code=reply.status_code)
