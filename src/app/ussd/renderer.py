"""Renderização das respostas USSD (CON/END).

O renderer é a única autoridade sobre encerramento: o orquestrador aplica
`should_close` à sessão, garantindo que o prefixo emitido e o `is_active`
persistido nunca divirjam.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from app.ussd.flows.base import FlowOutcome, FlowStatus
from fsm.states import MenuNode
from fsm.transitions import DEFAULT_BRAND_NAME, render_menu

CONTINUE_PREFIX = "CON "
END_PREFIX = "END "

INVALID_OPTION_NOTICE = "Invalid option. Please try again."
TRY_AGAIN_LATER_TEXT = "Service temporarily unavailable. Please try again later."
SERVICE_UNAVAILABLE_TEXT = "Sorry, the service is unavailable right now. Please dial again later."
STALE_SESSION_TEXT = "Your session has expired. Please dial {service_code} again."
GOODBYE_TEXT = "Thank you for using {brand}. Goodbye!"


class SystemReply(StrEnum):
    """Respostas fixas fora de menus e fluxos."""

    STALE = "stale"
    UNAVAILABLE = "unavailable"
    GOODBYE = "goodbye"


@dataclass(frozen=True, slots=True)
class MenuOutcome:
    """Exibir um menu, opcionalmente avisando que a opção foi inválida."""

    node: MenuNode
    invalid_option: bool = False


@dataclass(frozen=True, slots=True)
class SystemOutcome:
    reply: SystemReply


Outcome = MenuOutcome | FlowOutcome | SystemOutcome


@dataclass(frozen=True, slots=True)
class RenderedReply:
    """Texto pronto para o agregador e a decisão de encerramento."""

    response: str
    should_close: bool


class ResponseRenderer:
    """Converte resultados em respostas CON/END.

    Args:
        service_code: Código exibido na mensagem de sessão expirada
        brand_name: Nome exibido nos menus e na despedida
    """

    __slots__ = ("_brand_name", "_service_code")

    def __init__(self, service_code: str, brand_name: str = DEFAULT_BRAND_NAME) -> None:
        self._service_code = service_code
        self._brand_name = brand_name

    def render(self, outcome: Outcome) -> RenderedReply:
        if isinstance(outcome, MenuOutcome):
            text = render_menu(outcome.node, self._brand_name)
            if outcome.invalid_option:
                text = f"{INVALID_OPTION_NOTICE}\n{text}"
            return self._continue(text)

        if isinstance(outcome, FlowOutcome):
            if outcome.status is FlowStatus.PROMPT:
                return self._continue(outcome.text)
            if outcome.status is FlowStatus.UNAVAILABLE:
                return self._end(TRY_AGAIN_LATER_TEXT)
            return self._end(outcome.text)

        return self._end(self._system_text(outcome.reply))

    def stale(self, service_code: str | None = None) -> RenderedReply:
        """Resposta fixa para sessão inativa ou expirada."""
        code = service_code or self._service_code
        return self._end(STALE_SESSION_TEXT.format(service_code=code))

    def unavailable(self) -> RenderedReply:
        return self.render(SystemOutcome(SystemReply.UNAVAILABLE))

    def _system_text(self, reply: SystemReply) -> str:
        if reply is SystemReply.STALE:
            return STALE_SESSION_TEXT.format(service_code=self._service_code)
        if reply is SystemReply.GOODBYE:
            return GOODBYE_TEXT.format(brand=self._brand_name)
        return SERVICE_UNAVAILABLE_TEXT

    @staticmethod
    def _continue(text: str) -> RenderedReply:
        return RenderedReply(response=f"{CONTINUE_PREFIX}{text}", should_close=False)

    @staticmethod
    def _end(text: str) -> RenderedReply:
        return RenderedReply(response=f"{END_PREFIX}{text}", should_close=True)
