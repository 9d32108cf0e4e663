"""Serviços financeiros em memória — apenas para desenvolvimento e testes."""

from __future__ import annotations

from app.domain.credit import CreditScore, VerificationOutcome


class MemoryIdentityVerifier:
    """Resultado fixo por BVN; demais BVNs usam `default`."""

    def __init__(
        self,
        outcomes: dict[str, VerificationOutcome] | None = None,
        default: VerificationOutcome = VerificationOutcome.VERIFIED,
    ) -> None:
        self._outcomes = dict(outcomes or {})
        self._default = default
        self.calls: list[str] = []

    async def verify(self, bvn: str, phone_number: str) -> VerificationOutcome:
        self.calls.append(phone_number)
        return self._outcomes.get(bvn, self._default)


class MemoryCreditScoreProvider:
    """Score fixo por telefone; demais telefones usam `default_score`."""

    def __init__(self, scores: dict[str, int] | None = None, default_score: int = 650) -> None:
        self._scores = dict(scores or {})
        self._default_score = default_score

    async def get_score(self, phone_number: str) -> CreditScore:
        return CreditScore(score=self._scores.get(phone_number, self._default_score))
