"""Bounded completion polling for vendor tasks.

The poller waits a fixed interval, checks the task status, and repeats until
the task completes, fails, or the attempt limit is reached. There is no
backoff and no jitter. Waiting uses ``asyncio.sleep`` so concurrent polls for
different tasks never block one another.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from freepik_seedream.errors import GenerationFailed, GenerationTimeout
from freepik_seedream.models import GenerationTask

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_MAX_ATTEMPTS = 60

StatusCheck = Callable[[str], Awaitable[GenerationTask]]
Sleep = Callable[[float], Awaitable[object]]


async def wait_for_completion(
    check_status: StatusCheck,
    task_id: str,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    interval: float = DEFAULT_POLL_INTERVAL,
    sleep: Sleep = asyncio.sleep,
) -> GenerationTask:
    """Poll a task until it reaches a terminal state.

    Each attempt sleeps ``interval`` seconds and then performs one status
    check, so a task that completes on attempt k costs exactly k checks.

    Args:
        check_status: Coroutine function returning the current task state.
        task_id: Vendor task identifier.
        max_attempts: Maximum number of status checks.
        interval: Seconds to wait before each check.
        sleep: Awaitable sleep function (injectable for tests).

    Returns:
        The completed task.

    Raises:
        GenerationFailed: If the vendor reports the task as failed.
        GenerationTimeout: If the task is still pending after max_attempts.
        ValueError: If max_attempts or interval is out of range.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    if interval < 0:
        raise ValueError("interval must not be negative")

    for attempt in range(1, max_attempts + 1):
        await sleep(interval)
        task = await check_status(task_id)
        logger.debug(
            "Task %s attempt %d/%d: %s", task_id, attempt, max_attempts, task.status
        )

        if task.is_completed:
            logger.info("Task %s completed after %d checks", task_id, attempt)
            return task

        if task.is_failed:
            logger.warning("Task %s failed", task_id)
            raise GenerationFailed(task_id)

    logger.warning("Task %s still pending after %d checks", task_id, max_attempts)
    raise GenerationTimeout(task_id, max_attempts)


__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_POLL_INTERVAL",
    "StatusCheck",
    "wait_for_completion",
]
