"""Structured fan-out for independent read-only sub-queries."""

import asyncio
import logging
import time
from collections.abc import Coroutine
from typing import Any

from app.domain.exceptions import UpstreamTimeoutException

logger = logging.getLogger(__name__)


def _first_leaf(exc: BaseException) -> BaseException:
    while isinstance(exc, BaseExceptionGroup):
        exc = exc.exceptions[0]
    return exc


async def gather_all(
    *coros: Coroutine[Any, Any, Any],
    timeout: float | None = None,
    operation: str = "fan-out",
) -> list[Any]:
    """Run coroutines concurrently and return their results in argument order.

    The first failure cancels the remaining tasks and is re-raised as-is
    (not wrapped in an ExceptionGroup). When timeout elapses before every
    task finishes, all tasks are cancelled and UpstreamTimeoutException is
    raised.

    Args:
        coros: Independent coroutines to run.
        timeout: Budget in seconds for the whole group; None means unbounded.
        operation: Label used in logs and the timeout error.

    Returns:
        Results in the same order as coros.
    """
    started = time.perf_counter()
    try:
        async with asyncio.timeout(timeout):
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(coro) for coro in coros]
    except TimeoutError as exc:
        logger.warning("%s timed out after %ss (%d tasks)", operation, timeout, len(coros))
        raise UpstreamTimeoutException(operation, timeout or 0.0) from exc
    except BaseExceptionGroup as group_exc:
        first = _first_leaf(group_exc)
        logger.debug(
            "%s failed: %d of %d tasks raised; first: %r",
            operation,
            len(group_exc.exceptions),
            len(coros),
            first,
        )
        raise first
    logger.debug(
        "%s finished %d tasks in %.1fms",
        operation,
        len(tasks),
        (time.perf_counter() - started) * 1000,
    )
    return [task.result() for task in tasks]
