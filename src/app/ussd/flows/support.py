"""Fluxos informativos de suporte (terminais no primeiro passo)."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from app.ussd.flows.base import FieldFlow, FlowContext, FlowOutcome
from fsm.states import MenuNode

if TYPE_CHECKING:
    from app.sessions.flow_data import FlowData

FAQ_TEXT = (
    "FAQ\n"
    "Q: How do I log a harvest?\n"
    "A: Main menu > 1 > 1.\n"
    "Q: How is my credit score used?\n"
    "A: It helps determine loan eligibility.\n"
    "Q: How do I sell?\n"
    "A: Visit grochain.ng or call support."
)


class ContactSupportFlow(FieldFlow):
    """Mostra os contatos do suporte."""

    node: ClassVar[MenuNode] = MenuNode.CONTACT_SUPPORT

    def __init__(self, phone: str, email: str, whatsapp: str) -> None:
        self._phone = phone
        self._email = email
        self._whatsapp = whatsapp

    async def finalize(
        self,
        context: FlowContext,
        draft: FlowData | None,
        accepted: dict[str, str],
    ) -> FlowOutcome:
        return FlowOutcome.completed(
            "Contact Support\n"
            f"Phone: {self._phone}\n"
            f"Email: {self._email}\n"
            f"WhatsApp: {self._whatsapp}\n"
            "Our support team is available 24/7."
        )


class FaqFlow(FieldFlow):
    node: ClassVar[MenuNode] = MenuNode.FAQ

    async def finalize(
        self,
        context: FlowContext,
        draft: FlowData | None,
        accepted: dict[str, str],
    ) -> FlowOutcome:
        return FlowOutcome.completed(FAQ_TEXT)
