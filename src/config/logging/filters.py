"""Filters de logging para injeção de contexto da requisição."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class RequestContextFilter(logging.Filter):
    """Injeta service, correlation_id e ussd_session_id em cada record.

    Valores passados explicitamente via `extra` têm precedência sobre os
    valores do contexto.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Retorna o correlation_id atual ("" se ausente).
        session_id_getter: Retorna o sessionId USSD em processamento.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
        session_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")
        self._get_session_id = session_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Enriquece o record; nunca descarta."""
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        existing_session = getattr(record, "ussd_session_id", None)
        record.ussd_session_id = existing_session if existing_session else self._get_session_id()
        record.service = self._service_name
        return True
