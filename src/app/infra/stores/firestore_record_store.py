"""Firestore Harvest Record Store — registros de colheita.

Estrutura no Firestore:
    harvests/{batch_id}

O batch_id é determinístico por sessão, então regravar o mesmo registro
é idempotente.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from google.cloud.firestore import FieldFilter, Query

from app.domain.harvest import HarvestRecord
from app.protocols.record_store import HarvestRecordStoreProtocol
from utils.errors import RecordPersistenceError

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient

logger = logging.getLogger(__name__)

HARVESTS_COLLECTION = "harvests"


class FirestoreHarvestRecordStore(HarvestRecordStoreProtocol):
    """Store de registros de colheita usando Firestore.

    Args:
        firestore_client: Cliente Firestore
        collection_name: Nome da collection (default: harvests)
    """

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection_name: str = HARVESTS_COLLECTION,
    ) -> None:
        self._db = firestore_client
        self._collection = collection_name

    async def save_harvest(self, record: HarvestRecord) -> None:
        """Persiste o registro (asyncio.to_thread sobre o SDK síncrono)."""
        await asyncio.to_thread(self._save_sync, record)

    def _save_sync(self, record: HarvestRecord) -> None:
        doc_data = record.model_dump(mode="json")
        try:
            self._db.collection(self._collection).document(record.batch_id).set(doc_data)
        except Exception as e:
            logger.error(
                "harvest_save_error",
                extra={"error": str(e), "batch_id": record.batch_id},
            )
            raise RecordPersistenceError(f"Erro ao persistir colheita: {e}") from e
        logger.info("harvest_saved", extra={"batch_id": record.batch_id})

    async def recent_harvests(self, phone_number: str, limit: int = 5) -> list[HarvestRecord]:
        """Últimos registros do produtor, mais recentes primeiro."""
        return await asyncio.to_thread(self._recent_sync, phone_number, limit)

    def _recent_sync(self, phone_number: str, limit: int) -> list[HarvestRecord]:
        try:
            docs = (
                self._db.collection(self._collection)
                .where(filter=FieldFilter("phone_number", "==", phone_number))
                .order_by("logged_at", direction=Query.DESCENDING)
                .limit(limit)
                .stream()
            )
            return [HarvestRecord.model_validate(doc.to_dict()) for doc in docs]
        except Exception as e:
            logger.error("harvest_query_error", extra={"error": str(e)})
            raise RecordPersistenceError(f"Erro ao consultar colheitas: {e}") from e
