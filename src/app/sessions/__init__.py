"""Sessões USSD: entidade, dados de fluxo, auditoria e gerenciador."""

from app.sessions.audit import SessionEvent, SessionEventType
from app.sessions.flow_data import (
    CreditCheckDraft,
    FlowData,
    HarvestDraft,
    ProductBrowseDraft,
)
from app.sessions.manager import SessionManager
from app.sessions.session_entity import EndReason, UssdSession

__all__ = [
    "CreditCheckDraft",
    "EndReason",
    "FlowData",
    "HarvestDraft",
    "ProductBrowseDraft",
    "SessionEvent",
    "SessionEventType",
    "SessionManager",
    "UssdSession",
]
