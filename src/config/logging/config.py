"""Configuração centralizada de logging.

Uso:
    from config.logging import configure_logging

    # Na inicialização (app/bootstrap)
    configure_logging(level="INFO", service_name="grochain_ussd")

    # Em qualquer módulo
    logger = logging.getLogger(__name__)
    logger.info("ussd_request_processed", extra={"step": 3})

Sem PII: telefones só aparecem como hash/máscara (ver phone_log_fields).
"""

from __future__ import annotations

import hashlib
import logging
from typing import TYPE_CHECKING

from config.logging.filters import RequestContextFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "grochain_ussd"


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
    session_id_getter: Callable[[], str] | None = None,
) -> None:
    """Configura logging JSON estruturado para o serviço.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id atual.
        session_id_getter: Função que retorna o sessionId USSD atual.

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(
        RequestContextFilter(service_name, correlation_id_getter, session_id_getter)
    )

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substituir handlers existentes para evitar duplicação
    root.handlers = [handler]


def phone_log_fields(phone_number: str) -> dict[str, str]:
    """Identificadores de telefone seguros para log (hash + máscara)."""
    digits = phone_number or ""
    masked = f"{digits[:4]}****{digits[-3:]}" if len(digits) >= 8 else "****"
    return {
        "phone_hash": hashlib.sha256(digits.encode()).hexdigest()[:16],
        "masked_phone": masked,
    }


def log_downstream_failure(
    logger: logging.Logger,
    component: str,
    *,
    session_id: str,
    phone_number: str,
    error: BaseException | str,
) -> None:
    """Registra falha de colaborador externo com identificadores da sessão.

    Nunca levanta exceção: falha de logging não pode derrubar a resposta
    ao chamador.
    """
    try:
        logger.warning(
            "downstream_failure",
            extra={
                "component": component,
                "session_id": session_id,
                "error_type": type(error).__name__ if isinstance(error, BaseException) else "str",
                "error": str(error),
                **phone_log_fields(phone_number),
            },
        )
    except Exception:  # noqa: BLE001
        return
