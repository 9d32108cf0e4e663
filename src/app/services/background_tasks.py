"""Controle de tasks em background (persistência após a resposta USSD)."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable

logger = logging.getLogger(__name__)

_TASK_SEMAPHORE = asyncio.Semaphore(100)
_active_tasks: set[asyncio.Task[Any]] = set()


def schedule_background_task(*, name: str, coroutine: Awaitable[None]) -> int:
    """Agenda task com limite de concorrência; retorna quantas estão ativas."""
    task = asyncio.create_task(_run_with_limit(coroutine), name=name)
    _active_tasks.add(task)
    task.add_done_callback(_on_task_done)
    logger.debug(
        "background_task_scheduled",
        extra={"task_name": name, "active_tasks": len(_active_tasks)},
    )
    return len(_active_tasks)


def active_task_count() -> int:
    return len(_active_tasks)


async def _run_with_limit(coroutine: Awaitable[None]) -> None:
    async with _TASK_SEMAPHORE:
        await coroutine


def _on_task_done(task: asyncio.Task[Any]) -> None:
    _active_tasks.discard(task)
    with contextlib.suppress(asyncio.CancelledError):
        exc = task.exception()
        if exc is not None:
            logger.error(
                "background_task_failed",
                extra={
                    "task_name": task.get_name(),
                    "error_type": type(exc).__name__,
                    "active_tasks": len(_active_tasks),
                },
            )


async def drain_background_tasks(timeout_seconds: float = 10.0) -> int:
    """Aguarda tasks pendentes no shutdown; cancela as que excederem o prazo.

    Returns:
        Quantidade de tasks canceladas.
    """
    if not _active_tasks:
        return 0

    pending_now = list(_active_tasks)
    logger.info(
        "background_tasks_shutdown_wait",
        extra={"pending_tasks": len(pending_now), "timeout_seconds": timeout_seconds},
    )
    _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
    if not pending:
        return 0

    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)
    logger.warning(
        "background_tasks_shutdown_cancelled",
        extra={"cancelled_tasks": len(pending)},
    )
    return len(pending)
