"""Settings dos colaboradores externos consumidos pelos fluxos.

Registros de colheita, catálogo de produtos, verificação de BVN e score
de crédito. Cada um tem backend em memória (dev/test) e um backend real.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

StorageBackend = Literal["memory", "firestore"]
ServiceBackend = Literal["memory", "http"]


@dataclass(frozen=True)
class IntegrationSettings:
    """Configurações de integrações externas.

    Attributes:
        records_backend: Persistência de registros de colheita
        catalog_backend: Fonte do catálogo de produtos
        verification_backend: Verificação de identidade (BVN)
        verification_url: Endpoint HTTP de verificação
        credit_score_backend: Provedor de score de crédito
        credit_score_url: Endpoint HTTP de score
        api_key: Chave compartilhada para os serviços HTTP internos
        http_timeout_seconds: Timeout das chamadas HTTP
    """

    records_backend: StorageBackend = "memory"
    catalog_backend: StorageBackend = "memory"
    verification_backend: ServiceBackend = "memory"
    verification_url: str = ""
    credit_score_backend: ServiceBackend = "memory"
    credit_score_url: str = ""
    api_key: str = ""
    http_timeout_seconds: float = 4.0

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de integrações."""
        errors: list[str] = []

        for name, backend in (
            ("RECORDS_BACKEND", self.records_backend),
            ("CATALOG_BACKEND", self.catalog_backend),
        ):
            if backend not in {"memory", "firestore"}:
                errors.append(f"{name} inválido: {backend}")
            if backend == "firestore" and not base.gcp_project:
                errors.append(f"{name}=firestore requer GCP_PROJECT configurado")
            if backend == "memory" and not base.is_development:
                errors.append(f"{name}=memory proibido em staging/production")

        if self.verification_backend == "http" and not self.verification_url:
            errors.append("VERIFICATION_BACKEND=http requer VERIFICATION_URL")

        if self.credit_score_backend == "http" and not self.credit_score_url:
            errors.append("CREDIT_SCORE_BACKEND=http requer CREDIT_SCORE_URL")

        if self.http_timeout_seconds <= 0:
            errors.append("INTEGRATIONS_HTTP_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _storage_backend(env_name: str) -> StorageBackend:
    value = os.getenv(env_name, "memory").lower()
    return value if value in ("memory", "firestore") else "memory"


def _service_backend(env_name: str) -> ServiceBackend:
    value = os.getenv(env_name, "memory").lower()
    return value if value in ("memory", "http") else "memory"


def _load_integrations_from_env() -> IntegrationSettings:
    """Carrega IntegrationSettings de variáveis de ambiente."""
    return IntegrationSettings(
        records_backend=_storage_backend("RECORDS_BACKEND"),
        catalog_backend=_storage_backend("CATALOG_BACKEND"),
        verification_backend=_service_backend("VERIFICATION_BACKEND"),
        verification_url=os.getenv("VERIFICATION_URL", ""),
        credit_score_backend=_service_backend("CREDIT_SCORE_BACKEND"),
        credit_score_url=os.getenv("CREDIT_SCORE_URL", ""),
        api_key=os.getenv("INTEGRATIONS_API_KEY", ""),
        http_timeout_seconds=float(os.getenv("INTEGRATIONS_HTTP_TIMEOUT_SECONDS", "4")),
    )


@lru_cache(maxsize=1)
def get_integration_settings() -> IntegrationSettings:
    """Retorna instância cacheada de IntegrationSettings."""
    return _load_integrations_from_env()
