"""Agregador de settings base."""

from __future__ import annotations

from config.settings.base.core import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.base.session import (
    AuditBackend,
    SessionSettings,
    SessionStoreBackend,
    get_session_settings,
)

__all__ = [
    "AuditBackend",
    "BaseSettings",
    "Environment",
    "SessionSettings",
    "SessionStoreBackend",
    "get_base_settings",
    "get_session_settings",
]
