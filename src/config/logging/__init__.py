"""Configuração de logging estruturado.

Uso:
    from config.logging import configure_logging, log_downstream_failure

Campos obrigatórios em todo log: asctime, level, logger, message, service,
correlation_id, ussd_session_id.
"""

from config.logging.config import (
    configure_logging,
    log_downstream_failure,
    phone_log_fields,
)
from config.logging.filters import RequestContextFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "RequestContextFilter",
    "configure_logging",
    "create_json_formatter",
    "log_downstream_failure",
    "phone_log_fields",
]
