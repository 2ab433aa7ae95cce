"""Income drop scheduling and payout exports"""

from .models import IncomeEvent, IncomeEventStatus
from .processor import IncomeEventProcessor
from .scheduler import IncomeScheduler

__all__ = [
    "IncomeEvent",
    "IncomeEventStatus",
    "IncomeEventProcessor",
    "IncomeScheduler",
]
