"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.background_tasks import (
    active_task_count,
    drain_background_tasks,
    schedule_background_task,
)
from app.services.session_sweeper import SessionSweeper

__all__ = [
    "SessionSweeper",
    "active_task_count",
    "drain_background_tasks",
    "schedule_background_task",
]
