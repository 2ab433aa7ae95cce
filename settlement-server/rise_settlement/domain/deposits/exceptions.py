"""Deposit ledger specific exceptions."""


class DepositError(Exception):
    """Base class for deposit ledger errors."""


class DepositNotFoundError(DepositError):
    """Raised when no deposit matches the merchant order number."""


class DepositStateError(DepositError):
    """Raised when a transition would move a deposit out of a terminal state."""
