"""Worker process that reports approvals missing their calendar entry.

An approved time-off request whose entry insert failed is a recoverable
inconsistency. The worker only reports these; an admin re-runs them through
``POST /approvals/{id}/materialize``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from app.config import get_settings
from app.db import session_scope
from app.services.approval_store import find_unmaterialized

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def report_unmaterialized(session: AsyncSession) -> int:
    """Log every approved request without an entry and return how many there are."""
    pending = await find_unmaterialized(session)
    for request in pending:
        logger.warning(
            "Approval request %s (%s) approved at %s has no time-off entry",
            request.id,
            request.type,
            request.approved_at,
        )
    return len(pending)


async def run_reconciliation_loop() -> None:
    """Main worker loop."""
    settings = get_settings()
    logger.info("Reconciliation worker started (interval=%ss)", settings.reconciliation_interval_seconds)

    while True:
        try:
            async with session_scope() as session:
                count = await report_unmaterialized(session)
            logger.info("Reconciliation run complete: unmaterialized=%d", count)
        except Exception:
            logger.exception("Reconciliation run failed")

        await asyncio.sleep(settings.reconciliation_interval_seconds)


def main() -> None:
    """Entry point for the worker process."""
    logging.basicConfig(level=get_settings().log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    asyncio.run(run_reconciliation_loop())


if __name__ == "__main__":
    main()
