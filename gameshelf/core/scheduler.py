# gameshelf/core/scheduler.py
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

logger = logging.getLogger(__name__)

_scheduler: Optional[AsyncIOScheduler] = None

def _ensure_scheduler() -> AsyncIOScheduler:
    global _scheduler
    if _scheduler is None:
        _scheduler = AsyncIOScheduler()
        _scheduler.start()
    return _scheduler

def schedule_daily_midnight(func: Callable, *, job_id: str = "daily_midnight", hour: int = 0, minute: int = 0):
    """
    Run func every day at hour:minute local time (new puzzles drop at midnight).
    - func may be a plain callable, an async function, or return a coroutine.
    - job_id ensures idempotency (replace_existing=True).
    """
    sched = _ensure_scheduler()

    def _runner():
        result = func()
        if asyncio.iscoroutine(result):
            asyncio.create_task(result)

    sched.add_job(
        _runner,
        CronTrigger(hour=hour, minute=minute),
        id=job_id,
        replace_existing=True
    )
    logger.info("Scheduled job %s daily at %02d:%02d", job_id, hour, minute)
