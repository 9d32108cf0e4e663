"""Protocolos e contratos do core da aplicação."""

from .audit_store import SessionAuditStoreProtocol
from .catalog import ProductCatalogProtocol
from .fintech import CreditScoreProviderProtocol, IdentityVerifierProtocol
from .models import UssdRequest, UssdResponse
from .outbound_sender import AggregatorSenderProtocol
from .record_store import HarvestRecordStoreProtocol
from .session_store import UssdSessionStoreProtocol

__all__ = [
    "AggregatorSenderProtocol",
    "CreditScoreProviderProtocol",
    "HarvestRecordStoreProtocol",
    "IdentityVerifierProtocol",
    "ProductCatalogProtocol",
    "SessionAuditStoreProtocol",
    "UssdRequest",
    "UssdResponse",
    "UssdSessionStoreProtocol",
]
