"""Settings do Firestore.

Collections usadas pelo log de auditoria de sessões e pelos
colaboradores de registros/catálogo.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class FirestoreSettings:
    """Configurações do Firestore.

    Attributes:
        project_id: ID do projeto GCP (usa GCP_PROJECT se não definido)
        collection_session_events: Log append-only de eventos de sessão
        collection_harvests: Registros de colheita
        collection_products: Catálogo de produtos
    """

    project_id: str = ""
    collection_session_events: str = "ussd_session_events"
    collection_harvests: str = "harvests"
    collection_products: str = "products"

    def validate(self, gcp_project: str) -> list[str]:
        """Valida configurações do Firestore."""
        errors: list[str] = []
        if not (self.project_id or gcp_project):
            errors.append("FIRESTORE_PROJECT_ID ou GCP_PROJECT deve estar configurado")
        return errors


def _load_firestore_from_env() -> FirestoreSettings:
    """Carrega FirestoreSettings de variáveis de ambiente."""
    return FirestoreSettings(
        project_id=os.getenv("FIRESTORE_PROJECT_ID", ""),
        collection_session_events=os.getenv(
            "FIRESTORE_COLLECTION_SESSION_EVENTS", "ussd_session_events"
        ),
        collection_harvests=os.getenv("FIRESTORE_COLLECTION_HARVESTS", "harvests"),
        collection_products=os.getenv("FIRESTORE_COLLECTION_PRODUCTS", "products"),
    )


@lru_cache(maxsize=1)
def get_firestore_settings() -> FirestoreSettings:
    """Retorna instância cacheada de FirestoreSettings."""
    return _load_firestore_from_env()
