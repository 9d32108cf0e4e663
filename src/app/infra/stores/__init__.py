"""Stores — implementações concretas de persistência.

Módulos disponíveis:
    - redis_session_store: Sessões USSD usando Redis
    - firestore_audit_store: Log de eventos de sessão usando Firestore
    - firestore_record_store: Registros de colheita usando Firestore
    - firestore_catalog: Catálogo de produtos usando Firestore
    - memory_stores: Stores em memória para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.firestore_audit_store import FirestoreAuditStore
from app.infra.stores.firestore_catalog import FirestoreProductCatalog
from app.infra.stores.firestore_record_store import FirestoreHarvestRecordStore
from app.infra.stores.memory_stores import (
    MemoryAuditStore,
    MemoryHarvestRecordStore,
    MemoryProductCatalog,
    MemorySessionStore,
)
from app.infra.stores.redis_session_store import RedisSessionStore

__all__ = [
    # Firestore
    "FirestoreAuditStore",
    "FirestoreHarvestRecordStore",
    "FirestoreProductCatalog",
    # Memory (dev/test)
    "MemoryAuditStore",
    "MemoryHarvestRecordStore",
    "MemoryProductCatalog",
    "MemorySessionStore",
    # Redis
    "RedisSessionStore",
]
