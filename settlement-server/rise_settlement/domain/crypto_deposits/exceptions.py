"""Manual crypto deposit exceptions."""


class CryptoDepositError(Exception):
    """Base class for manual crypto deposit errors."""


class CryptoDepositNotFoundError(CryptoDepositError):
    """Raised when a submission does not exist."""


class CryptoDepositStateError(CryptoDepositError):
    """Raised when a submission has already been approved or rejected."""


class DuplicateTransactionError(CryptoDepositError):
    """Raised when a transaction hash has already been submitted."""
