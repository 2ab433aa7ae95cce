"""Wallet domain specific exceptions."""


class WalletError(Exception):
    """Base class for wallet domain errors."""


class WalletNotFoundError(WalletError):
    """Raised when the user has no wallet to credit."""
