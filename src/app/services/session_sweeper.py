"""Sweep periódico de sessões USSD inativas.

Roda como task asyncio iniciada no lifespan da aplicação. Erros de uma
execução são logados e o loop continua; cancelamento encerra o loop.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from app.observability import record_sweep

if TYPE_CHECKING:
    from app.sessions.manager import SessionManager

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL_SECONDS = 300.0


class SessionSweeper:
    """Executa `SessionManager.sweep_expired()` a cada intervalo.

    Args:
        session_manager: Gerenciador de sessões
        interval_seconds: Intervalo entre execuções
    """

    __slots__ = ("_interval", "_sessions", "_task")

    def __init__(
        self,
        session_manager: SessionManager,
        interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
    ) -> None:
        self._sessions = session_manager
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> list[str]:
        """Executa um sweep; falhas são logadas e retornam lista vazia."""
        started_at = time.perf_counter()
        try:
            expired = await self._sessions.sweep_expired()
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "session_sweep_failed",
                extra={"error_type": type(exc).__name__, "error": str(exc)},
            )
            return []
        record_sweep(len(expired), (time.perf_counter() - started_at) * 1000)
        return expired

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self.run_once()

    def start(self) -> None:
        """Inicia o loop em background (idempotente)."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="ussd-session-sweeper")
        logger.info("session_sweeper_started", extra={"interval_seconds": self._interval})

    async def stop(self) -> None:
        """Cancela o loop e aguarda o término."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("session_sweeper_stopped")
