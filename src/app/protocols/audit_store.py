"""Protocolo do log append-only de eventos de sessão."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.sessions.audit import SessionEvent


class SessionAuditStoreProtocol(ABC):
    """Contrato para append de eventos de sessão (nunca lido no request path)."""

    @abstractmethod
    async def append(self, event: SessionEvent) -> None: ...
