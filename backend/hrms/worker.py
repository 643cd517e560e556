"""Worker process for the scheduled accrual jobs.

Wakes once per ``scheduler_interval_seconds`` (daily by default). On January 1
it carries unused days of the closed year forward; on the first day of every
month it runs the monthly accrual. Carry-forward runs first so a new year's
rows exist before the January accrual touches them. Both jobs are safe to
repeat on the same day: carry-forward overwrites from the closed year and the
monthly accrual skips rows already stamped with the current period.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from hrms.config import LOG_FORMAT, get_settings
from hrms.db import dispose_engine, get_session_factory
from hrms.services.accrual import run_monthly_accrual, run_year_end_carry_forward

logger = logging.getLogger(__name__)


def is_carry_forward_date(day: date) -> bool:
    return day.month == 1 and day.day == 1


def is_accrual_date(day: date) -> bool:
    return day.day == 1


async def run_scheduled_jobs(today: date) -> None:
    """Run whichever jobs are due on ``today``, each in its own session.

    A failing job is logged and does not stop the other.
    """
    session_factory = get_session_factory()

    if is_carry_forward_date(today):
        try:
            async with session_factory() as session:
                await run_year_end_carry_forward(session, today)
        except Exception:
            logger.exception("Year-end carry-forward failed for %s", today)

    if is_accrual_date(today):
        try:
            async with session_factory() as session:
                await run_monthly_accrual(session, today)
        except Exception:
            logger.exception("Monthly accrual failed for %s", today)


async def run_scheduler_loop(interval_seconds: int | None = None) -> None:
    """Main worker loop. Runs until cancelled."""
    if interval_seconds is None:
        interval_seconds = get_settings().scheduler_interval_seconds

    logger.info("Accrual scheduler started (interval=%ds)", interval_seconds)
    try:
        while True:
            await run_scheduled_jobs(date.today())
            await asyncio.sleep(interval_seconds)
    except asyncio.CancelledError:
        logger.info("Accrual scheduler stopped")
        raise
    finally:
        await dispose_engine()


def main() -> None:
    """Entry point for the worker process."""
    logging.basicConfig(level=get_settings().log_level, format=LOG_FORMAT)
    try:
        asyncio.run(run_scheduler_loop())
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
