"""In-process daily trigger for automatic charge generation."""
import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable

from bpay.services.dates import now_local
from bpay.services.recurrence import RecurrenceGenerator

logger = logging.getLogger(__name__)


def seconds_until(hour: int, now: datetime) -> float:
    """Seconds from now until the next occurrence of hour:00 (tomorrow if already past)."""
    target = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


async def run_daily_trigger(
    make_generator: Callable[[], RecurrenceGenerator],
    hour: int,
    clock: Callable[[], datetime] = now_local,
) -> None:
    """Sleep until the configured hour, run the daily check, repeat until cancelled."""
    while True:
        await asyncio.sleep(seconds_until(hour, clock()))
        try:
            result = await make_generator().check_and_generate_today()
        except Exception:
            logger.exception("Automatic charge generation failed")
            continue
        if result is not None:
            logger.info(
                "Automatic generation for %s created %d charges",
                result.target_month,
                result.charges_created,
            )
