"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, get_process_ussd_use_case

    # Na inicialização do serviço
    initialize_app()
    validate_runtime_settings()

    # Obter o orquestrador (singleton)
    use_case = get_process_ussd_use_case()
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import TYPE_CHECKING

from app.observability import get_correlation_id, get_ussd_session_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_firestore_settings,
    get_integration_settings,
    get_session_settings,
    get_ussd_settings,
)

if TYPE_CHECKING:
    from app.protocols import AggregatorSenderProtocol
    from app.services import SessionSweeper
    from app.sessions import SessionManager
    from app.use_cases.ussd import ProcessUssdRequestUseCase

# Nome do serviço para logs e métricas
SERVICE_NAME = "grochain_ussd"

# Nível de log padrão (pode ser sobrescrito por env)
DEFAULT_LOG_LEVEL = "INFO"
STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação com todas as configurações necessárias.

    Deve ser chamada uma vez no início do serviço.

    Configura:
    - Logging estruturado JSON com correlation_id e ussd_session_id
    """
    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    configure_logging(
        level=log_level,
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
        session_id_getter=get_ussd_session_id,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes (logging em DEBUG)."""
    configure_logging(
        level="DEBUG",
        service_name=f"{SERVICE_NAME}_test",
        correlation_id_getter=get_correlation_id,
        session_id_getter=get_ussd_session_id,
    )


def collect_settings_errors() -> list[str]:
    """Agrega erros de validação de todas as settings, prefixados por grupo."""
    base = get_base_settings()
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    session = get_session_settings()
    integrations = get_integration_settings()

    errors.extend(f"session: {error}" for error in session.validate(base))
    errors.extend(
        f"session: {error}"
        for error in session.validate_lock_budget(integrations.http_timeout_seconds)
    )
    errors.extend(
        f"ussd: {error}" for error in get_ussd_settings().validate(base.is_production)
    )
    errors.extend(f"integrations: {error}" for error in integrations.validate(base))

    if firestore_in_use():
        firestore_errors = get_firestore_settings().validate(base.gcp_project)
        errors.extend(f"firestore: {error}" for error in firestore_errors)

    return errors


def firestore_in_use() -> bool:
    integrations = get_integration_settings()
    return "firestore" in {
        get_session_settings().audit_backend,
        integrations.records_backend,
        integrations.catalog_backend,
    }


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    environment = get_base_settings().environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors = collect_settings_errors()

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


# ──────────────────────────────────────────────────────────────────────────────
# Getters (lazy initialization com cache)
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_session_manager() -> SessionManager:
    """Obtém SessionManager (singleton) compartilhado por requests e sweep."""
    from app.bootstrap.dependencies import create_session_manager
    return create_session_manager()


@lru_cache(maxsize=1)
def get_process_ussd_use_case() -> ProcessUssdRequestUseCase:
    """Obtém o orquestrador de requisições USSD (singleton)."""
    from app.bootstrap.dependencies import create_process_ussd_use_case
    return create_process_ussd_use_case(get_session_manager())


@lru_cache(maxsize=1)
def get_session_sweeper() -> SessionSweeper:
    """Obtém o sweep de expiração (singleton)."""
    from app.bootstrap.dependencies import create_session_sweeper
    return create_session_sweeper(get_session_manager())


@lru_cache(maxsize=1)
def get_aggregator_sender() -> AggregatorSenderProtocol:
    """Obtém o sender de push ao agregador (singleton)."""
    from app.bootstrap.dependencies import create_aggregator_sender
    return create_aggregator_sender()


def reset_singletons() -> None:
    """Descarta singletons cacheados (usado em shutdown e testes)."""
    get_session_manager.cache_clear()
    get_process_ussd_use_case.cache_clear()
    get_session_sweeper.cache_clear()
    get_aggregator_sender.cache_clear()
