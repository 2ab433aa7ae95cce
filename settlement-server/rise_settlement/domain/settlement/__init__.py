"""Deposit settlement exports"""

from .models import SettlementOutcome, SettlementResult
from .service import SettlementService

__all__ = ["SettlementOutcome", "SettlementResult", "SettlementService"]
