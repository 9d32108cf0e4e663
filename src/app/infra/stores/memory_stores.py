"""Stores em memória — apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios
e sem coordenação entre processos.
"""

from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from app.domain.product import Product
from app.protocols.audit_store import SessionAuditStoreProtocol
from app.protocols.record_store import HarvestRecordStoreProtocol
from app.protocols.session_store import UssdSessionStoreProtocol
from app.sessions.session_entity import EndReason, UssdSession

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable

    from app.domain.harvest import HarvestRecord
    from app.sessions.audit import SessionEvent

DEFAULT_RETENTION_SECONDS = 86400


class MemorySessionStore(UssdSessionStoreProtocol):
    """Store de sessão em memória — apenas para dev/test.

    Guarda snapshots serializados para que mutações fora do store não
    vazem para o estado persistido.
    """

    def __init__(self, retention_seconds: int = DEFAULT_RETENTION_SECONDS) -> None:
        self._store: dict[str, tuple[dict[str, Any], float]] = {}  # id -> (dict, expires_at)
        # Locks existem só enquanto há requisições segurando ou aguardando
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self._retention_seconds = retention_seconds

    def _get_sync(self, session_id: str) -> UssdSession | None:
        entry = self._store.get(session_id)
        if entry is None:
            return None
        data, expires_at = entry
        if time.time() > expires_at:
            del self._store[session_id]
            return None
        return UssdSession.from_dict(data)

    def _put_sync(self, session: UssdSession) -> None:
        expires_at = time.time() + self._retention_seconds
        self._store[session.session_id] = (session.to_dict(), expires_at)

    async def get(self, session_id: str) -> UssdSession | None:
        """Carrega sessão da memória."""
        return self._get_sync(session_id)

    async def upsert(self, session: UssdSession) -> None:
        """Salva sessão em memória (renova a retenção)."""
        self._put_sync(session)

    async def delete(self, session_id: str) -> bool:
        """Remove sessão da memória."""
        return self._store.pop(session_id, None) is not None

    @asynccontextmanager
    async def lock(self, session_id: str) -> AsyncIterator[None]:
        """Serializa requisições concorrentes da mesma sessão."""
        lock = self._locks.setdefault(session_id, asyncio.Lock())
        self._lock_users[session_id] = self._lock_users.get(session_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._lock_users[session_id] - 1
            if remaining:
                self._lock_users[session_id] = remaining
            else:
                del self._lock_users[session_id]
                del self._locks[session_id]

    async def sweep_expired(
        self,
        max_age_minutes: int,
        now: datetime | None = None,
    ) -> list[str]:
        """Expira sessões ativas antigas; pula as que estão em processamento."""
        moment = now or datetime.now(UTC)
        cutoff = moment - timedelta(minutes=max_age_minutes)
        expired: list[str] = []

        for session_id in list(self._store):
            if session_id in self._locks:
                continue
            async with self.lock(session_id):
                session = self._get_sync(session_id)
                if session is None or not session.is_active:
                    continue
                if session.last_activity >= cutoff:
                    continue
                session.terminate(EndReason.EXPIRED, moment)
                self._put_sync(session)
                expired.append(session_id)

        return expired

    def lock_count(self) -> int:
        """Locks ainda alocados (apenas para testes)."""
        return len(self._locks)

    def active_count(self) -> int:
        """Quantidade de sessões ativas (apenas para testes)."""
        return sum(1 for data, _ in self._store.values() if data.get("is_active"))


class MemoryAuditStore(SessionAuditStoreProtocol):
    """Log de eventos de sessão em memória — apenas para dev/test."""

    def __init__(self, max_records: int = 10000) -> None:
        self._records: list[dict[str, Any]] = []
        self._max_records = max_records

    async def append(self, event: SessionEvent) -> None:
        """Append de evento de sessão."""
        self._records.append(event.to_dict())
        # Limita tamanho para evitar memory leak em dev
        if len(self._records) > self._max_records:
            self._records = self._records[-self._max_records:]

    def get_records(self) -> list[dict[str, Any]]:
        """Retorna todos os registros (apenas para testes)."""
        return list(self._records)


class MemoryHarvestRecordStore(HarvestRecordStoreProtocol):
    """Registros de colheita em memória, indexados por batch_id."""

    def __init__(self) -> None:
        self._records: dict[str, HarvestRecord] = {}

    async def save_harvest(self, record: HarvestRecord) -> None:
        self._records[record.batch_id] = record

    async def recent_harvests(self, phone_number: str, limit: int = 5) -> list[HarvestRecord]:
        mine = [r for r in self._records.values() if r.phone_number == phone_number]
        mine.sort(key=lambda r: r.logged_at, reverse=True)
        return mine[:limit]


_SEED_PRODUCTS: tuple[Product, ...] = (
    Product(product_id="p-maize", name="Yellow Maize", category="Grains", price=450, location="Kaduna"),
    Product(product_id="p-rice", name="Local Rice", category="Grains", price=900, location="Kebbi"),
    Product(product_id="p-sorghum", name="Sorghum", category="Grains", price=380, location="Kano"),
    Product(product_id="p-cassava", name="Cassava Tubers", category="Tubers", price=150, location="Ogun"),
    Product(product_id="p-yam", name="White Yam", category="Tubers", price=600, location="Benue"),
    Product(product_id="p-tomato", name="Tomatoes", category="Vegetables", price=700, location="Plateau"),
    Product(product_id="p-pepper", name="Scotch Bonnet", category="Vegetables", price=1200, location="Oyo"),
    Product(product_id="p-orange", name="Sweet Orange", category="Fruits", price=300, location="Benue"),
)


class MemoryProductCatalog:
    """Catálogo em memória com produtos de exemplo — apenas para dev/test."""

    def __init__(self, products: Iterable[Product] | None = None) -> None:
        self._products: list[Product] = list(_SEED_PRODUCTS if products is None else products)

    async def list_products(self, category: str, limit: int = 5) -> list[Product]:
        matches = [p for p in self._products if p.category.lower() == category.lower()]
        return matches[:limit]
