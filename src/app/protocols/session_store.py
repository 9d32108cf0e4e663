"""Protocolo de domínio para persistência de sessões USSD (async)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contextlib import AbstractAsyncContextManager
    from datetime import datetime

    from app.sessions.session_entity import UssdSession


class UssdSessionStoreProtocol(ABC):
    """Contrato do store de sessões USSD.

    O store é a fonte da verdade; não há cache em processo. `lock()` serializa
    o ciclo read-modify-write por sessionId.
    """

    @abstractmethod
    async def get(self, session_id: str) -> UssdSession | None: ...

    @abstractmethod
    async def upsert(self, session: UssdSession) -> None: ...

    @abstractmethod
    async def sweep_expired(
        self,
        max_age_minutes: int,
        now: datetime | None = None,
    ) -> list[str]:
        """Marca como expiradas as sessões ativas sem atividade recente.

        Returns:
            IDs das sessões expiradas nesta execução.
        """

    @abstractmethod
    def lock(self, session_id: str) -> AbstractAsyncContextManager[None]: ...

    @abstractmethod
    async def delete(self, session_id: str) -> bool: ...
