"""Testes do wiring do composition root com backends padrão (memória)."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest

from app import bootstrap
from app.bootstrap import dependencies
from app.infra.stores import MemoryAuditStore, MemorySessionStore, RedisSessionStore
from app.use_cases.ussd import ProcessUssdRequestUseCase
from config.settings import (
    get_base_settings,
    get_integration_settings,
    get_session_settings,
    get_ussd_settings,
)
from fsm.states import FLOW_NODES


def _clear() -> None:
    for getter in (
        get_base_settings,
        get_session_settings,
        get_ussd_settings,
        get_integration_settings,
    ):
        getter.cache_clear()
    bootstrap.reset_singletons()


@pytest.fixture(autouse=True)
def defaults(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        "ENVIRONMENT",
        "SESSION_STORE_BACKEND",
        "AUDIT_STORE_BACKEND",
        "RECORDS_BACKEND",
        "CATALOG_BACKEND",
        "VERIFICATION_BACKEND",
        "CREDIT_SCORE_BACKEND",
    ):
        monkeypatch.delenv(name, raising=False)
    _clear()
    yield
    _clear()


def test_memory_session_store_by_default() -> None:
    assert isinstance(dependencies.create_session_store(), MemorySessionStore)


def test_redis_session_store(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SESSION_STORE_BACKEND", "redis")
    monkeypatch.setattr(dependencies, "create_async_redis_client", MagicMock())

    assert isinstance(dependencies.create_session_store(), RedisSessionStore)


def test_audit_store_backends(monkeypatch: pytest.MonkeyPatch) -> None:
    assert isinstance(dependencies.create_audit_store(), MemoryAuditStore)

    monkeypatch.setenv("AUDIT_STORE_BACKEND", "disabled")
    get_session_settings.cache_clear()
    assert dependencies.create_audit_store() is None


def test_flow_registry_covers_every_flow_node() -> None:
    registry = dependencies.create_flow_registry()

    assert registry.missing() == []
    assert all(registry.get(node) is not None for node in FLOW_NODES)


def test_singletons_share_session_manager() -> None:
    use_case = bootstrap.get_process_ussd_use_case()

    assert isinstance(use_case, ProcessUssdRequestUseCase)
    assert bootstrap.get_process_ussd_use_case() is use_case
    assert bootstrap.get_session_manager() is bootstrap.get_session_manager()
