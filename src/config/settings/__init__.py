"""Agregador de settings do gateway USSD.

Re-exporta todas as settings e funções de cada módulo.
"""

from __future__ import annotations

from config.settings.base import (
    AuditBackend,
    BaseSettings,
    Environment,
    SessionSettings,
    SessionStoreBackend,
    get_base_settings,
    get_session_settings,
)
from config.settings.infra import (
    FirestoreSettings,
    get_firestore_settings,
)
from config.settings.integrations import (
    IntegrationSettings,
    ServiceBackend,
    StorageBackend,
    get_integration_settings,
)
from config.settings.ussd import (
    DEFAULT_SERVICE_CODE,
    UssdSettings,
    get_ussd_settings,
)

__all__ = [
    "DEFAULT_SERVICE_CODE",
    "AuditBackend",
    "BaseSettings",
    "Environment",
    "FirestoreSettings",
    "IntegrationSettings",
    "ServiceBackend",
    "SessionSettings",
    "SessionStoreBackend",
    "StorageBackend",
    "UssdSettings",
    "get_base_settings",
    "get_firestore_settings",
    "get_integration_settings",
    "get_session_settings",
    "get_ussd_settings",
]
