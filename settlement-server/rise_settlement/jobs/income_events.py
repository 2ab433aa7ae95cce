"""Run one batch of due income events.

Intended for cron: ``python -m rise_settlement.jobs.income_events``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys

from rise_settlement.core.config import get_settings
from rise_settlement.core.log_config import configure_logging
from rise_settlement.domain.income import IncomeEventProcessor
from rise_settlement.domain.jobs import JobSummary
from rise_settlement.infrastructure.database.session import dispose_engine, get_session_factory

logger = logging.getLogger(__name__)


async def run_income_job() -> JobSummary:
    settings = get_settings()
    try:
        async with get_session_factory()() as session:
            return await IncomeEventProcessor.with_session(session, settings).run()
    finally:
        await dispose_engine()


def main() -> int:
    configure_logging(get_settings())
    try:
        summary = asyncio.run(run_income_job())
    except Exception:
        logger.exception("Income event job failed")
        return 1
    print(json.dumps({"status": summary.status, **summary.as_dict()}))
    return 0


if __name__ == "__main__":
    sys.exit(main())
