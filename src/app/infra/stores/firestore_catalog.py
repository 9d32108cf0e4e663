"""Firestore Product Catalog — leitura de produtos ativos por categoria."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from google.cloud.firestore import FieldFilter

from app.domain.product import Product
from utils.errors import CatalogUnavailableError

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient

logger = logging.getLogger(__name__)

PRODUCTS_COLLECTION = "products"


class FirestoreProductCatalog:
    """Catálogo de produtos usando Firestore.

    Documentos com `status != "active"` não são listados.

    Args:
        firestore_client: Cliente Firestore
        collection_name: Nome da collection (default: products)
    """

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection_name: str = PRODUCTS_COLLECTION,
    ) -> None:
        self._db = firestore_client
        self._collection = collection_name

    async def list_products(self, category: str, limit: int = 5) -> list[Product]:
        """Lista até `limit` produtos ativos da categoria."""
        return await asyncio.to_thread(self._list_sync, category, limit)

    def _list_sync(self, category: str, limit: int) -> list[Product]:
        try:
            docs = (
                self._db.collection(self._collection)
                .where(filter=FieldFilter("category", "==", category))
                .where(filter=FieldFilter("status", "==", "active"))
                .limit(limit)
                .stream()
            )
            products = [
                Product.model_validate({"product_id": doc.id, **(doc.to_dict() or {})})
                for doc in docs
            ]
        except Exception as e:
            logger.error(
                "catalog_query_error",
                extra={"error": str(e), "category": category},
            )
            raise CatalogUnavailableError(f"Erro ao consultar catálogo: {e}") from e
        logger.debug(
            "catalog_products_retrieved",
            extra={"category": category, "count": len(products)},
        )
        return products
