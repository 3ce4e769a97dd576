"""Fire-and-forget task scheduling for best-effort side effects."""

import asyncio
from collections.abc import Awaitable, Coroutine
from typing import Any, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")

# Strong references so the event loop does not garbage-collect running tasks.
_tasks: set[asyncio.Task[Any]] = set()


def spawn(coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task[Any]:
    """Schedule ``coro`` in the background without awaiting it.

    Exceptions are logged and never propagate to the caller.
    """
    task = asyncio.create_task(_guarded(coro, name), name=name)
    _tasks.add(task)
    task.add_done_callback(_tasks.discard)
    return task


async def _guarded(coro: Coroutine[Any, Any, Any], name: str) -> None:
    try:
        await coro
    except asyncio.CancelledError:
        logger.info("background_task_cancelled", task=name)
        raise
    except Exception:
        logger.exception("background_task_failed", task=name)


def pending() -> int:
    """Number of background tasks still running."""
    return len(_tasks)


async def drain(timeout: float | None = None) -> None:
    """Wait for outstanding background tasks (shutdown and tests)."""
    while _tasks:
        current = list(_tasks)
        _, not_done = await asyncio.wait(current, timeout=timeout)
        if not_done:
            logger.warning("background_tasks_timed_out", remaining=len(not_done))
            for task in not_done:
                task.cancel()
            await asyncio.gather(*not_done, return_exceptions=True)
            return


async def best_effort(operation: str, awaitable: Awaitable[T], **context: Any) -> T | None:
    """Await a secondary write, logging and swallowing any failure.

    Returns None when the write failed.
    """
    try:
        return await awaitable
    except Exception:
        logger.warning("best_effort_write_failed", operation=operation, exc_info=True, **context)
        return None
