"""Fluxo de consulta de crédito: BVN → verificação → score."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, ClassVar

from app.domain.credit import VerificationOutcome
from app.sessions.flow_data import CreditCheckDraft
from app.ussd.flows.base import (
    FieldFlow,
    FieldValidationError,
    FlowContext,
    FlowOutcome,
    with_hint,
)
from fsm.states import MenuNode

if TYPE_CHECKING:
    from app.protocols.fintech import CreditScoreProviderProtocol, IdentityVerifierProtocol
    from app.sessions.flow_data import FlowData

logger = logging.getLogger(__name__)

_BVN_PATTERN = re.compile(r"^\d{11}$")


class CheckCreditFlow(FieldFlow):
    """Verifica o BVN e, se verificado, mostra o score.

    Textos terminais distintos para verified/pending/manual_review.
    O BVN completo nunca entra no rascunho persistido.
    """

    node: ClassVar[MenuNode] = MenuNode.CHECK_CREDIT
    fields: ClassVar[tuple[str, ...]] = ("bvn",)

    def __init__(
        self,
        verifier: IdentityVerifierProtocol,
        scores: CreditScoreProviderProtocol,
    ) -> None:
        self._verifier = verifier
        self._scores = scores

    def new_draft(self) -> FlowData | None:
        return CreditCheckDraft()

    async def accept(
        self,
        context: FlowContext,
        draft: FlowData | None,
        field_name: str,
        token: str,
    ) -> FlowData | None:
        if not _BVN_PATTERN.match(token):
            raise FieldValidationError("Invalid BVN. It must be exactly 11 digits.")
        return CreditCheckDraft(bvn_last4=token[-4:])

    async def prompt(
        self,
        context: FlowContext,
        draft: FlowData | None,
        field_name: str,
        hint: str | None,
    ) -> FlowOutcome:
        text = "Check Credit Score\nEnter your 11-digit BVN:"
        return FlowOutcome.prompt(with_hint(text, hint), CreditCheckDraft())

    async def finalize(
        self,
        context: FlowContext,
        draft: FlowData | None,
        accepted: dict[str, str],
    ) -> FlowOutcome:
        current = draft if isinstance(draft, CreditCheckDraft) else CreditCheckDraft()
        outcome = await self._verifier.verify(accepted["bvn"], context.phone_number)
        current = current.model_copy(update={"verification_status": outcome.value})
        logger.info(
            "credit_check_verification",
            extra={"session_id": context.session_id, "outcome": outcome.value},
        )

        if outcome is VerificationOutcome.PENDING:
            return FlowOutcome.completed(
                "Your BVN verification is pending.\n"
                "We will send you an SMS once it is complete.",
                current,
            )
        if outcome is VerificationOutcome.MANUAL_REVIEW:
            return FlowOutcome.completed(
                "Your BVN needs manual review.\n"
                "Our team will contact you within 48 hours.",
                current,
            )

        score = await self._scores.get_score(context.phone_number)
        return FlowOutcome.completed(
            "Your Credit Score\n"
            f"Score: {score.score}\n"
            f"Rating: {score.rating}\n"
            "This score helps determine your loan eligibility.",
            current,
        )
