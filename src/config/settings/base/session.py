"""Settings de sessão USSD.

Política única de expiração: sessão ativa sem atividade há mais de
`inactivity_minutes` é expirada (sweep em background ou no próximo request).
O registro permanece no store por `retention_seconds` para que replays de
um sessionId encerrado sejam reconhecidos e rejeitados.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

SessionStoreBackend = Literal["memory", "redis"]
AuditBackend = Literal["memory", "firestore", "disabled"]

# Chamadas sequenciais máximas a serviços externos dentro de um request
MAX_SEQUENTIAL_CALLS = 2
LOCK_MARGIN_SECONDS = 2.0


@dataclass(frozen=True)
class SessionSettings:
    """Configurações de sessão.

    Attributes:
        store_backend: Backend do store de sessão (memory|redis)
        inactivity_minutes: Minutos sem atividade até a sessão expirar
        retention_seconds: TTL do registro da sessão no store
        sweep_interval_seconds: Intervalo do sweep de expiração
        lock_timeout_seconds: Tempo máximo segurando o lock por sessão
        shutdown_drain_seconds: Espera por gravações pendentes no shutdown
        audit_backend: Destino do log de eventos (memory|firestore|disabled)
    """

    store_backend: SessionStoreBackend = "memory"
    inactivity_minutes: int = 30
    retention_seconds: int = 86400  # 24h
    sweep_interval_seconds: int = 300  # 5 min
    lock_timeout_seconds: float = 12.0
    shutdown_drain_seconds: float = 10.0
    audit_backend: AuditBackend = "memory"

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de sessão."""
        errors: list[str] = []

        if self.store_backend not in {"memory", "redis"}:
            errors.append(f"SESSION_STORE_BACKEND inválido: {self.store_backend}")

        if self.store_backend == "memory" and not base.is_development:
            errors.append("SESSION_STORE_BACKEND=memory proibido em staging/production")

        if self.store_backend == "redis" and not base.redis_url:
            errors.append("SESSION_STORE_BACKEND=redis requer REDIS_URL configurado")

        if self.inactivity_minutes <= 0:
            errors.append("SESSION_INACTIVITY_MINUTES deve ser > 0")

        if self.retention_seconds < self.inactivity_minutes * 60:
            errors.append(
                "SESSION_RETENTION_SECONDS deve ser >= SESSION_INACTIVITY_MINUTES em segundos"
            )

        if self.sweep_interval_seconds <= 0:
            errors.append("SESSION_SWEEP_INTERVAL_SECONDS deve ser > 0")

        if self.lock_timeout_seconds <= 0:
            errors.append("SESSION_LOCK_TIMEOUT_SECONDS deve ser > 0")

        if self.shutdown_drain_seconds < 0:
            errors.append("SESSION_SHUTDOWN_DRAIN_SECONDS deve ser >= 0")

        if self.audit_backend == "firestore" and not base.gcp_project:
            errors.append("AUDIT_STORE_BACKEND=firestore requer GCP_PROJECT configurado")

        return errors

    def validate_lock_budget(self, http_timeout_seconds: float) -> list[str]:
        """O lock precisa sobreviver ao pior caso de um request (crédito: 2 chamadas)."""
        minimum = MAX_SEQUENTIAL_CALLS * http_timeout_seconds + LOCK_MARGIN_SECONDS
        if self.lock_timeout_seconds <= minimum:
            return [
                f"SESSION_LOCK_TIMEOUT_SECONDS ({self.lock_timeout_seconds:g}) deve ser > "
                f"{minimum:g} ({MAX_SEQUENTIAL_CALLS} x INTEGRATIONS_HTTP_TIMEOUT_SECONDS "
                f"+ {LOCK_MARGIN_SECONDS:g})"
            ]
        return []


def _load_session_from_env() -> SessionSettings:
    """Carrega SessionSettings de variáveis de ambiente."""
    backend_str = os.getenv("SESSION_STORE_BACKEND", "memory").lower()
    backend: SessionStoreBackend = backend_str if backend_str in ("memory", "redis") else "memory"
    audit_str = os.getenv("AUDIT_STORE_BACKEND", "memory").lower()
    audit: AuditBackend = audit_str if audit_str in ("memory", "firestore", "disabled") else "memory"
    return SessionSettings(
        store_backend=backend,
        inactivity_minutes=int(os.getenv("SESSION_INACTIVITY_MINUTES", "30")),
        retention_seconds=int(os.getenv("SESSION_RETENTION_SECONDS", "86400")),
        sweep_interval_seconds=int(os.getenv("SESSION_SWEEP_INTERVAL_SECONDS", "300")),
        lock_timeout_seconds=float(os.getenv("SESSION_LOCK_TIMEOUT_SECONDS", "12")),
        shutdown_drain_seconds=float(os.getenv("SESSION_SHUTDOWN_DRAIN_SECONDS", "10")),
        audit_backend=audit,
    )


@lru_cache(maxsize=1)
def get_session_settings() -> SessionSettings:
    """Retorna instância cacheada de SessionSettings."""
    return _load_session_from_env()
