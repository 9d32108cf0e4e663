"""Gerenciador de sessões USSD.

Fachada sem cache sobre o store (fonte da verdade). Emite eventos de
auditoria em modo fire-and-forget: falhas são logadas, nunca propagadas.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from app.sessions.audit import SessionEvent, SessionEventType
from app.sessions.session_entity import EndReason, UssdSession
from config.logging import phone_log_fields

if TYPE_CHECKING:
    from contextlib import AbstractAsyncContextManager

    from app.protocols.audit_store import SessionAuditStoreProtocol
    from app.protocols.models import UssdRequest
    from app.protocols.session_store import UssdSessionStoreProtocol

logger = logging.getLogger(__name__)

DEFAULT_INACTIVITY_MINUTES = 30

_EVENT_BY_REASON: dict[EndReason, SessionEventType] = {
    EndReason.COMPLETED: SessionEventType.SESSION_TERMINATED,
    EndReason.EXITED: SessionEventType.SESSION_TERMINATED,
    EndReason.EXPIRED: SessionEventType.SESSION_EXPIRED,
    EndReason.FAILED: SessionEventType.SESSION_FAILED,
}


class SessionManager:
    """Gerenciador do ciclo de vida das sessões USSD.

    Política única de expiração: sessão ativa com last_activity mais antiga
    que `inactivity_minutes` é expirada, tanto pelo sweep quanto de forma
    lazy no caminho da requisição.
    """

    __slots__ = ("_audit_store", "_inactivity_minutes", "_store")

    def __init__(
        self,
        store: UssdSessionStoreProtocol,
        audit_store: SessionAuditStoreProtocol | None = None,
        inactivity_minutes: int = DEFAULT_INACTIVITY_MINUTES,
    ) -> None:
        """Inicializa gerenciador.

        Args:
            store: Store de sessões (memória ou Redis)
            audit_store: Log de eventos (opcional)
            inactivity_minutes: Limite de inatividade antes de expirar
        """
        self._store = store
        self._audit_store = audit_store
        self._inactivity_minutes = inactivity_minutes

    @property
    def inactivity_minutes(self) -> int:
        return self._inactivity_minutes

    def locked(self, session_id: str) -> AbstractAsyncContextManager[None]:
        """Lock por sessionId para o ciclo read-modify-write."""
        return self._store.lock(session_id)

    async def load_or_create(
        self,
        request: UssdRequest,
        now: datetime | None = None,
    ) -> tuple[UssdSession, bool]:
        """Carrega a sessão do request ou cria uma nova (step 0, menu main).

        A sessão nova não é persistida aqui; o orquestrador faz o único
        upsert ao final do processamento.

        Returns:
            (sessão, criada_agora)
        """
        existing = await self._store.get(request.session_id)
        if existing is not None:
            if existing.phone_number != request.phone_number:
                logger.warning(
                    "session_phone_mismatch",
                    extra={
                        "session_id": request.session_id,
                        **phone_log_fields(request.phone_number),
                    },
                )
            return existing, False

        moment = now or datetime.now(UTC)
        session = UssdSession(
            session_id=request.session_id,
            phone_number=request.phone_number,
            service_code=request.service_code,
            network_code=request.network_code,
            created_at=moment,
            last_activity=moment,
        )
        logger.info(
            "session_started",
            extra={
                "session_id": session.session_id,
                "service_code": session.service_code,
                **phone_log_fields(session.phone_number),
            },
        )
        await self._emit(SessionEvent.from_session(session, SessionEventType.SESSION_STARTED))
        return session, True

    def is_stale(self, session: UssdSession, now: datetime | None = None) -> bool:
        """Sessão inativa, ou ativa mas além do limite de inatividade."""
        if not session.is_active:
            return True
        return session.is_idle_for(self._inactivity_minutes, now)

    async def expire(self, session: UssdSession, now: datetime | None = None) -> bool:
        """Marca sessão ativa como expirada e persiste.

        Returns:
            True se a sessão foi expirada agora.
        """
        if not session.terminate(EndReason.EXPIRED, now):
            return False
        await self._store.upsert(session)
        logger.info(
            "session_expired_lazily",
            extra={"session_id": session.session_id, "step": session.step},
        )
        await self._emit(SessionEvent.from_session(session, SessionEventType.SESSION_EXPIRED))
        return True

    async def save(self, session: UssdSession, *, terminated: bool = False) -> None:
        """Persiste a sessão (único upsert por requisição).

        Args:
            session: Sessão atualizada
            terminated: True se a sessão foi encerrada nesta requisição
        """
        await self._store.upsert(session)
        if terminated and session.end_reason is not None:
            await self._emit(
                SessionEvent.from_session(session, _EVENT_BY_REASON[session.end_reason])
            )

    async def sweep_expired(self, now: datetime | None = None) -> list[str]:
        """Expira sessões ativas sem atividade além do limite."""
        expired_ids = await self._store.sweep_expired(self._inactivity_minutes, now)
        for session_id in expired_ids:
            await self._emit(
                SessionEvent(
                    session_id=session_id,
                    event_type=SessionEventType.SESSION_EXPIRED,
                    reason=EndReason.EXPIRED.value,
                )
            )
        if expired_ids:
            logger.info("sessions_swept", extra={"expired_count": len(expired_ids)})
        return expired_ids

    async def _emit(self, event: SessionEvent) -> None:
        if self._audit_store is None:
            return
        try:
            await self._audit_store.append(event)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "session_audit_append_failed",
                extra={
                    "session_id": event.session_id,
                    "event_type": event.event_type.value,
                    "error_type": type(exc).__name__,
                },
            )
