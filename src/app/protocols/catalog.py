"""Protocolo do catálogo de produtos (somente leitura)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.domain.product import Product


class ProductCatalogProtocol(Protocol):
    """Contrato mínimo para listar produtos ativos por categoria."""

    async def list_products(self, category: str, limit: int = 5) -> list[Product]: ...
