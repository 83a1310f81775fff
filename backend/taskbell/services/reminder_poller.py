"""Periodic reminder polling.

Reminders are best effort: every ``interval_seconds`` the poller fetches
the current todos and runs one evaluation pass. A todo whose reminder
window falls between two polls can be missed; nothing catches up on it.
The same pass is triggered directly (``poll_once``) whenever the caller
knows the todo list changed.

To stop the poller, cancel the coroutine/task.
"""
import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime
from typing import Any

from taskbell.services.notification_center import NotificationCenter

logger = logging.getLogger(__name__)

TaskFetcher = Callable[[], Iterable[Any] | Awaitable[Iterable[Any]]]


async def _fetch(fetch_tasks: TaskFetcher) -> list[Any]:
    result = fetch_tasks()
    if inspect.isawaitable(result):
        result = await result
    return list(result)


async def poll_once(
    center: NotificationCenter,
    fetch_tasks: TaskFetcher,
    now: datetime | None = None,
) -> int:
    """Fetch todos and run one reminder pass. Returns notifications added."""
    if not center.loaded:
        await center.load()

    try:
        tasks = await _fetch(fetch_tasks)
    except Exception:
        logger.exception("Fetching todos for reminder pass failed")
        return 0

    added = await center.evaluate(tasks, now)
    return len(added)


def make_reminder_check(
    center: NotificationCenter,
    fetch_tasks: TaskFetcher,
) -> Callable[[], Awaitable[int]]:
    """Bind a single reminder pass for callers that just changed the todo list."""

    async def check() -> int:
        try:
            return await poll_once(center, fetch_tasks)
        except Exception:
            logger.exception("Reminder pass after todo change failed")
            return 0

    return check


async def run_reminder_poller(
    center: NotificationCenter,
    fetch_tasks: TaskFetcher,
    *,
    interval_seconds: float = 60.0,
) -> None:
    """Poll forever, one reminder pass per interval."""
    sleep_s = max(0.5, float(interval_seconds))
    logger.info("Reminder poller started (interval=%ss)", sleep_s)

    try:
        while True:
            try:
                await poll_once(center, fetch_tasks)
            except Exception:
                logger.exception("Reminder pass failed")
            await asyncio.sleep(sleep_s)
    except asyncio.CancelledError:
        logger.info("Reminder poller stopped")
        raise
