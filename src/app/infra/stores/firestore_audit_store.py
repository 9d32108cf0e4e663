"""Firestore Audit Store — log append-only de eventos de sessão USSD.

Referência: substitui a segunda tabela mutável de sessões por eventos
imutáveis (started/terminated/expired/failed).
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from app.protocols.audit_store import SessionAuditStoreProtocol
from utils.errors import FirestoreUnavailableError

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient

    from app.sessions.audit import SessionEvent

logger = logging.getLogger(__name__)

AUDIT_COLLECTION = "ussd_session_events"


class FirestoreAuditStore(SessionAuditStoreProtocol):
    """Store de eventos de sessão usando Firestore.

    Características:
        - Append-only (sem updates)
        - Document ID ordenável por dia/sessão
        - TTL via Firestore TTL policies (campo created_at)
        - Sem PII: telefone apenas como hash

    Args:
        firestore_client: Cliente Firestore
        collection_name: Nome da collection (default: ussd_session_events)
    """

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection_name: str = AUDIT_COLLECTION,
    ) -> None:
        self._db = firestore_client
        self._collection = collection_name

    async def append(self, event: SessionEvent) -> None:
        """Append assíncrono do evento.

        Usa asyncio.to_thread pois o Firestore SDK não tem async nativo.
        """
        await asyncio.to_thread(self._append_sync, event)

    def _append_sync(self, event: SessionEvent) -> None:
        record = {
            **event.to_dict(),
            "created_at": datetime.now(UTC),  # Para TTL do Firestore
        }
        doc_id = (
            f"{event.at.strftime('%Y%m%d')}_{event.session_id}_"
            f"{event.event_type.value}_{event.at.timestamp()}"
        )
        try:
            self._db.collection(self._collection).document(doc_id).set(record)
        except Exception as e:
            logger.error(
                "audit_append_error",
                extra={"error": str(e), "doc_id": doc_id},
            )
            raise FirestoreUnavailableError(f"Erro ao gravar evento: {e}") from e
        logger.debug(
            "audit_event_appended",
            extra={"doc_id": doc_id, "event_type": event.event_type.value},
        )
