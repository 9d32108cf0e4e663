"""Protocolo de persistência dos registros de colheita."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.harvest import HarvestRecord


class HarvestRecordStoreProtocol(ABC):
    """Contrato do store de registros de colheita.

    `save_harvest` é idempotente por batch_id.
    """

    @abstractmethod
    async def save_harvest(self, record: HarvestRecord) -> None: ...

    @abstractmethod
    async def recent_harvests(self, phone_number: str, limit: int = 5) -> list[HarvestRecord]: ...
