"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    AggregatorDeliveryError,
    CatalogUnavailableError,
    CreditScoreUnavailableError,
    DownstreamServiceError,
    FirestoreUnavailableError,
    IdentityVerificationError,
    InfrastructureError,
    RecordPersistenceError,
    RedisConnectionError,
    SessionLockTimeoutError,
)

__all__ = [
    "AggregatorDeliveryError",
    "CatalogUnavailableError",
    "CreditScoreUnavailableError",
    "DownstreamServiceError",
    "FirestoreUnavailableError",
    "IdentityVerificationError",
    "InfrastructureError",
    "RecordPersistenceError",
    "RedisConnectionError",
    "SessionLockTimeoutError",
]
