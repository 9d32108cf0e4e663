"""Clientes dos serviços financeiros (verificação de BVN e score de crédito)."""

from app.infra.fintech.http_clients import HttpCreditScoreProvider, HttpIdentityVerifier
from app.infra.fintech.memory import MemoryCreditScoreProvider, MemoryIdentityVerifier

__all__ = [
    "HttpCreditScoreProvider",
    "HttpIdentityVerifier",
    "MemoryCreditScoreProvider",
    "MemoryIdentityVerifier",
]
