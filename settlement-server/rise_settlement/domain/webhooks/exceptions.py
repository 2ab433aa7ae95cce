"""Webhook ingestion exceptions."""


class WebhookError(Exception):
    """Base class for webhook ingestion errors."""


class WebhookValidationError(WebhookError):
    """Raised when a callback body cannot be turned into a flat parameter map."""


class SignatureMismatchError(WebhookError):
    """Raised when the callback signature does not match the gateway secret."""


class UnknownGatewayError(WebhookError):
    """Raised when a callback arrives for a gateway that is not configured."""


class UntrustedSourceError(WebhookError):
    """Raised when the allow-list is enforced and the caller is not on it."""


class GatewayNotConfiguredError(WebhookError):
    """Raised when a gateway has no signing secret configured."""
