# wordle_league/core/scheduler.py
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

_scheduler: Optional[AsyncIOScheduler] = None

def _ensure_scheduler() -> AsyncIOScheduler:
    global _scheduler
    if _scheduler is None:
        _scheduler = AsyncIOScheduler()
        _scheduler.start()
    return _scheduler

def _wrap(coro_func: Callable, job_id: str):
    # Coroutine jobs run on the scheduler's event loop (the bot's loop)
    async def _runner():
        logger.debug("scheduler: running job %s", job_id)
        result = coro_func()
        if asyncio.iscoroutine(result):
            await result
    return _runner

def schedule_daily(coro_func: Callable, *, job_id: str = "daily", hour: int = 0, minute: int = 0, tz: str = "UTC"):
    """
    Schedule an async task to run daily at the given local time.
    - coro_func can be an async function or a callable returning a coroutine.
    - job_id ensures idempotency (replace_existing=True).
    """
    sched = _ensure_scheduler()
    sched.add_job(
        _wrap(coro_func, job_id),
        CronTrigger(hour=hour, minute=minute, timezone=tz),
        id=job_id,
        replace_existing=True
    )
    logger.info("scheduler: job %s runs daily at %02d:%02d %s", job_id, hour, minute, tz)

def schedule_every(coro_func: Callable, *, job_id: str, minutes: int):
    """Schedule a task every N minutes (same idempotency rules as schedule_daily)."""
    sched = _ensure_scheduler()
    sched.add_job(
        _wrap(coro_func, job_id),
        IntervalTrigger(minutes=minutes),
        id=job_id,
        replace_existing=True
    )
    logger.info("scheduler: job %s runs every %s minutes", job_id, minutes)
