"""Formatters de logging estruturado.

Todo log sai em JSON com os campos obrigatórios abaixo. Campos passados via
`extra` (ex: session_id, phone_hash) são anexados automaticamente pelo
JsonFormatter.
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Ordem estável: facilita leitura em `gcloud logging read`
REQUIRED_LOG_FIELDS: tuple[str, ...] = (
    "asctime",
    "levelname",
    "name",
    "message",
    "service",
    "correlation_id",
    "ussd_session_id",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {
            "asctime": "2026-10-17 10:30:00,123",
            "level": "INFO",
            "logger": "app.use_cases.ussd.process_ussd_request",
            "message": "ussd_request_processed",
            "service": "grochain_ussd",
            "correlation_id": "4f1c...",
            "ussd_session_id": "ATUid_123",
            "step": 3
        }
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)
    return JsonFormatter(format_string, rename_fields=FIELD_RENAME_MAP)
