"""Observabilidade — logs estruturados, contexto de requisição, métricas.

Uso:
    from app.observability import get_correlation_id, set_correlation_id
    from app.observability import record_latency, record_session_closed
"""

from app.observability.correlation import (
    get_correlation_id,
    get_ussd_session_id,
    reset_correlation_id,
    reset_ussd_session_id,
    set_correlation_id,
    set_ussd_session_id,
)
from app.observability.metrics import (
    record_latency,
    record_session_closed,
    record_sweep,
)

__all__ = [
    "get_correlation_id",
    "get_ussd_session_id",
    "record_latency",
    "record_session_closed",
    "record_sweep",
    "reset_correlation_id",
    "reset_ussd_session_id",
    "set_correlation_id",
    "set_ussd_session_id",
]
