"""Contexto de requisição para rastreamento (correlation_id e sessionId USSD).

Ambos são propagados via ContextVar e injetados nos logs pelo
RequestContextFilter.

Uso:
    from app.observability import set_correlation_id, set_ussd_session_id

    token = set_correlation_id(request.headers.get("x-correlation-id"))
    try:
        # processar request
    finally:
        reset_correlation_id(token)
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")
_ussd_session_id: ContextVar[str] = ContextVar("ussd_session_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual ("" se não definido)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto atual.

    Args:
        correlation_id: ID a definir. Se None, gera um novo UUID.

    Returns:
        Token para reset posterior via reset_correlation_id().
    """
    value = correlation_id or str(uuid.uuid4())
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    """Restaura o correlation_id ao valor anterior."""
    _correlation_id.reset(token)


def get_ussd_session_id() -> str:
    """Retorna o sessionId USSD em processamento ("" se nenhum)."""
    return _ussd_session_id.get()


def set_ussd_session_id(session_id: str) -> Token[str]:
    """Define o sessionId USSD no contexto atual."""
    return _ussd_session_id.set(session_id)


def reset_ussd_session_id(token: Token[str]) -> None:
    """Restaura o sessionId USSD ao valor anterior."""
    _ussd_session_id.reset(token)
