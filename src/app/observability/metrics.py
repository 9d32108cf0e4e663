"""Registro de métricas via structured logging.

As métricas são registradas como logs estruturados e agregadas
posteriormente (Cloud Logging, BigQuery).

Métricas suportadas:
- Latência: tempo de processamento de cada requisição USSD
- Sessões encerradas: counter por motivo (completed, exited, expired, failed)
- Sweep: quantidade de sessões expiradas por execução

Uso:
    start = time.perf_counter()
    # ... operação ...
    record_latency("ussd", "process_request", (time.perf_counter() - start) * 1000)
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "ussd", "session_store")
        operation: Nome da operação (ex: "process_request")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )


def record_session_closed(
    reason: str,
    menu: str,
    step: int,
    correlation_id: str | None = None,
) -> None:
    """Registra encerramento de sessão USSD.

    Args:
        reason: Motivo (completed, exited, expired, failed)
        menu: Nó do menu onde a sessão terminou
        step: Quantidade de tokens consumidos
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_session_closed",
        extra={
            "metric_type": "session_closed",
            "component": "ussd",
            "reason": reason,
            "menu": menu,
            "step": step,
            "correlation_id": correlation_id,
        },
    )


def record_sweep(expired_count: int, latency_ms: float) -> None:
    """Registra execução do sweep de sessões inativas."""
    logger.info(
        "metric_session_sweep",
        extra={
            "metric_type": "session_sweep",
            "component": "session_sweeper",
            "expired_count": expired_count,
            "latency_ms": round(latency_ms, 2),
        },
    )
