"""Eventos append-only do ciclo de vida das sessões (auditoria).

Nunca lidos pelo caminho da requisição. Sem PII: o telefone aparece
apenas como hash.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from config.logging import phone_log_fields

if TYPE_CHECKING:
    from app.sessions.session_entity import UssdSession


class SessionEventType(StrEnum):
    SESSION_STARTED = "session_started"
    SESSION_TERMINATED = "session_terminated"
    SESSION_EXPIRED = "session_expired"
    SESSION_FAILED = "session_failed"


@dataclass(frozen=True, slots=True)
class SessionEvent:
    """Registro imutável de um evento de sessão."""

    session_id: str
    event_type: SessionEventType
    phone_hash: str = ""
    menu: str = ""
    step: int = 0
    reason: str | None = None
    at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_session(
        cls,
        session: UssdSession,
        event_type: SessionEventType,
    ) -> SessionEvent:
        return cls(
            session_id=session.session_id,
            event_type=event_type,
            phone_hash=phone_log_fields(session.phone_number)["phone_hash"],
            menu=session.current_menu.value,
            step=session.step,
            reason=session.end_reason.value if session.end_reason else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "event_type": self.event_type.value,
            "phone_hash": self.phone_hash,
            "menu": self.menu,
            "step": self.step,
            "reason": self.reason,
            "at": self.at.isoformat(),
        }
