"""Deposit ledger exports"""

from .exceptions import DepositError, DepositNotFoundError, DepositStateError
from .models import Deposit, DepositStatus
from .service import DepositService

__all__ = [
    "Deposit",
    "DepositStatus",
    "DepositService",
    "DepositError",
    "DepositNotFoundError",
    "DepositStateError",
]
