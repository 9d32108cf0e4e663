"""Protocolos dos serviços financeiros consumidos pelo fluxo de crédito."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.domain.credit import CreditScore, VerificationOutcome


class IdentityVerifierProtocol(Protocol):
    """Verificação de BVN: verifica agora ou adia (pending/manual_review)."""

    async def verify(self, bvn: str, phone_number: str) -> VerificationOutcome: ...


class CreditScoreProviderProtocol(Protocol):
    """Consulta de score de crédito do produtor."""

    async def get_score(self, phone_number: str) -> CreditScore: ...
