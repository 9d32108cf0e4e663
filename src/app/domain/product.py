"""Modelos de dominio do catalogo de produtos (somente leitura)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Categorias exibidas no fluxo de navegacao, na ordem do menu
PRODUCT_CATEGORIES: tuple[str, ...] = (
    "Grains",
    "Tubers",
    "Vegetables",
    "Fruits",
    "Livestock",
)


class Product(BaseModel):
    """Produto ativo listado no marketplace."""

    model_config = ConfigDict(extra="ignore")

    product_id: str = Field(..., description="Identificador do produto.")
    name: str = Field(..., description="Nome exibido.")
    category: str = Field(..., description="Categoria (ver PRODUCT_CATEGORIES).")
    price: float = Field(..., ge=0, description="Preco em NGN por unidade.")
    unit: str = Field(default="kg", description="Unidade de venda.")
    location: str = Field(default="", description="Localizacao do vendedor.")
