"""Modelos de dominio para registro de colheitas via USSD."""

from __future__ import annotations

import hashlib
from datetime import UTC, date, datetime  # noqa: TC003 - usado em runtime pelo schema do Pydantic
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


def batch_id_for_session(session_id: str) -> str:
    """Gera batch_id deterministico por sessao (H + 10 hex maiusculos)."""
    digest = hashlib.sha256(f"harvest:{session_id}".encode()).hexdigest()
    return f"H{digest[:10].upper()}"


class HarvestRecord(BaseModel):
    """Registro de colheita concluido pelo fluxo USSD."""

    model_config = ConfigDict(extra="ignore")

    batch_id: str = Field(..., description="Identificador do lote (H + 10 hex).")
    phone_number: str = Field(..., description="Telefone do produtor (formato nacional).")
    session_id: str = Field(..., description="Sessao USSD que originou o registro.")
    crop_type: str = Field(..., min_length=1, max_length=30, description="Cultura colhida.")
    quantity_kg: float = Field(..., gt=0, description="Quantidade em kg.")
    harvest_date: date = Field(..., description="Data da colheita.")
    logged_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Momento do registro.",
    )
    status: Literal["pending", "verified", "rejected"] = Field(
        default="pending",
        description="Status de verificacao do lote.",
    )
    source: Literal["ussd"] = Field(default="ussd", description="Canal de origem.")
