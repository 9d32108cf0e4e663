"""Testes do contexto de requisição (correlation_id e sessionId USSD)."""

from __future__ import annotations

from app.observability import (
    get_correlation_id,
    get_ussd_session_id,
    reset_correlation_id,
    reset_ussd_session_id,
    set_correlation_id,
    set_ussd_session_id,
)


def test_correlation_id_set_and_reset() -> None:
    token = set_correlation_id("corr-123")
    assert get_correlation_id() == "corr-123"

    reset_correlation_id(token)
    assert get_correlation_id() == ""


def test_correlation_id_generated_when_missing() -> None:
    token = set_correlation_id(None)
    try:
        assert len(get_correlation_id()) == 36
    finally:
        reset_correlation_id(token)


def test_ussd_session_id_context() -> None:
    token = set_ussd_session_id("ATUid_1")
    assert get_ussd_session_id() == "ATUid_1"

    reset_ussd_session_id(token)
    assert get_ussd_session_id() == ""
