"""Dados acumulados por fluxo (união discriminada por `flow`).

Cada fluxo multi-etapas tem um formato fechado de rascunho. Campos são
opcionais até serem coletados.
"""

from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class HarvestDraft(BaseModel):
    """Rascunho do registro de colheita."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    flow: Literal["log_harvest"] = "log_harvest"
    crop_type: str | None = Field(default=None, description="Cultura, texto livre")
    quantity_kg: float | None = Field(default=None, gt=0, description="Quantidade em kg")
    quantity_text: str | None = Field(default=None, description="Quantidade como digitada")
    harvest_date: date | None = Field(default=None, description="Data da colheita")


class ProductBrowseDraft(BaseModel):
    """Seleções da navegação no catálogo."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    flow: Literal["browse_products"] = "browse_products"
    category: str | None = None
    product_id: str | None = None


class CreditCheckDraft(BaseModel):
    """Consulta de crédito; o BVN completo nunca é armazenado."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    flow: Literal["check_credit"] = "check_credit"
    bvn_last4: str | None = Field(default=None, min_length=4, max_length=4)
    verification_status: str | None = None


FlowData = Annotated[
    HarvestDraft | ProductBrowseDraft | CreditCheckDraft,
    Field(discriminator="flow"),
]

FLOW_DATA_ADAPTER: TypeAdapter[FlowData] = TypeAdapter(FlowData)


def dump_flow_data(data: FlowData | None) -> dict[str, Any] | None:
    """Serializa rascunho para persistência (JSON-safe)."""
    if data is None:
        return None
    return FLOW_DATA_ADAPTER.dump_python(data, mode="json")


def load_flow_data(raw: dict[str, Any] | None) -> FlowData | None:
    """Deserializa rascunho persistido (None se ausente)."""
    if not raw:
        return None
    return FLOW_DATA_ADAPTER.validate_python(raw)
