"""Testes do fluxo de consulta de crédito."""

from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock

import pytest

from app.domain.credit import VerificationOutcome
from app.infra.fintech import MemoryCreditScoreProvider, MemoryIdentityVerifier
from app.sessions.flow_data import CreditCheckDraft
from app.ussd.flows import CheckCreditFlow, FlowContext, FlowStatus
from utils.errors import CreditScoreUnavailableError, IdentityVerificationError

PHONE = "08031234567"
BVN = "22345678901"


def _context() -> FlowContext:
    return FlowContext(
        session_id="sess-c",
        phone_number=PHONE,
        service_code="*123*456#",
        today=date(2024, 8, 20),
    )


class TestCheckCreditFlow:
    @pytest.mark.asyncio
    async def test_bvn_prompt(self) -> None:
        flow = CheckCreditFlow(MemoryIdentityVerifier(), MemoryCreditScoreProvider())

        outcome = await flow.handle(_context(), [])

        assert outcome.status is FlowStatus.PROMPT
        assert outcome.text == "Check Credit Score\nEnter your 11-digit BVN:"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["123", "2234567890a", "223456789012"])
    async def test_invalid_bvn_reprompts(self, token: str) -> None:
        verifier = MemoryIdentityVerifier()
        flow = CheckCreditFlow(verifier, MemoryCreditScoreProvider())

        outcome = await flow.handle(_context(), [token])

        assert outcome.status is FlowStatus.PROMPT
        assert outcome.text.startswith("Invalid BVN. It must be exactly 11 digits.\n")
        assert verifier.calls == []

    @pytest.mark.asyncio
    async def test_verified_shows_score(self) -> None:
        flow = CheckCreditFlow(
            MemoryIdentityVerifier(), MemoryCreditScoreProvider(scores={PHONE: 720})
        )

        outcome = await flow.handle(_context(), [BVN])

        assert outcome.status is FlowStatus.COMPLETED
        assert outcome.text == (
            "Your Credit Score\n"
            "Score: 720\n"
            "Rating: Excellent\n"
            "This score helps determine your loan eligibility."
        )

    @pytest.mark.asyncio
    async def test_pending_and_manual_review_have_distinct_texts(self) -> None:
        verifier = MemoryIdentityVerifier(
            outcomes={
                BVN: VerificationOutcome.PENDING,
                "11111111111": VerificationOutcome.MANUAL_REVIEW,
            }
        )
        scores = AsyncMock()
        flow = CheckCreditFlow(verifier, scores)

        pending = await flow.handle(_context(), [BVN])
        manual = await flow.handle(_context(), ["11111111111"])

        assert pending.text.startswith("Your BVN verification is pending.")
        assert manual.text.startswith("Your BVN needs manual review.")
        assert pending.status is manual.status is FlowStatus.COMPLETED
        scores.get_score.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_draft_keeps_only_last_four_digits(self) -> None:
        flow = CheckCreditFlow(MemoryIdentityVerifier(), MemoryCreditScoreProvider())

        outcome = await flow.handle(_context(), [BVN])

        assert isinstance(outcome.data, CreditCheckDraft)
        assert outcome.data.bvn_last4 == "8901"
        assert outcome.data.verification_status == "verified"
        assert BVN not in outcome.data.model_dump_json()

    @pytest.mark.asyncio
    async def test_verifier_failure_is_unavailable(self) -> None:
        verifier = AsyncMock()
        verifier.verify.side_effect = IdentityVerificationError("timeout")
        flow = CheckCreditFlow(verifier, MemoryCreditScoreProvider())

        outcome = await flow.handle(_context(), [BVN])

        assert outcome.status is FlowStatus.UNAVAILABLE
        assert outcome.service == "identity_verification"

    @pytest.mark.asyncio
    async def test_score_failure_is_unavailable(self) -> None:
        scores = AsyncMock()
        scores.get_score.side_effect = CreditScoreUnavailableError("502")
        flow = CheckCreditFlow(MemoryIdentityVerifier(), scores)

        outcome = await flow.handle(_context(), [BVN])

        assert outcome.status is FlowStatus.UNAVAILABLE
        assert outcome.service == "credit_score"
