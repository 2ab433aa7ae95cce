"""Gateway callback ingestion exports"""

from .events import WebhookEventService
from .exceptions import (
    GatewayNotConfiguredError,
    SignatureMismatchError,
    UnknownGatewayError,
    UntrustedSourceError,
    WebhookError,
    WebhookValidationError,
)
from .models import WebhookEventRecord, WebhookReply
from .service import WebhookService

__all__ = [
    "WebhookEventRecord",
    "WebhookReply",
    "WebhookEventService",
    "WebhookService",
    "WebhookError",
    "WebhookValidationError",
    "SignatureMismatchError",
    "UnknownGatewayError",
    "UntrustedSourceError",
    "GatewayNotConfiguredError",
]
