"""Contrato dos fluxos multi-etapas e motor de coleta campo a campo.

Um fluxo recebe os tokens digitados desde a sua entrada e reconstrói o
rascunho a cada chamada. Retransmissões produzem o mesmo resultado.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar

from config.logging import log_downstream_failure
from utils.errors import DownstreamServiceError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.sessions.flow_data import FlowData
    from fsm.states import MenuNode

logger = logging.getLogger(__name__)


class FlowStatus(StrEnum):
    """Situação do fluxo após processar os tokens."""

    PROMPT = "prompt"
    COMPLETED = "completed"
    UNAVAILABLE = "unavailable"


class FieldValidationError(ValueError):
    """Token inválido para o campo atual; o fluxo repete o campo com a dica."""

    def __init__(self, hint: str) -> None:
        super().__init__(hint)
        self.hint = hint


@dataclass(frozen=True, slots=True)
class FlowContext:
    """Dados da requisição visíveis ao fluxo.

    `memo` vive apenas durante uma requisição (ex: evita consultar o
    catálogo duas vezes no mesmo replay).
    """

    session_id: str
    phone_number: str
    service_code: str
    today: date
    memo: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class FlowOutcome:
    """Resultado de um fluxo; a decisão CON/END é do renderer."""

    status: FlowStatus
    text: str = ""
    data: FlowData | None = None
    service: str | None = None

    @classmethod
    def prompt(cls, text: str, data: FlowData | None = None) -> FlowOutcome:
        return cls(status=FlowStatus.PROMPT, text=text, data=data)

    @classmethod
    def completed(cls, text: str, data: FlowData | None = None) -> FlowOutcome:
        return cls(status=FlowStatus.COMPLETED, text=text, data=data)

    @classmethod
    def unavailable(cls, service: str, data: FlowData | None = None) -> FlowOutcome:
        return cls(status=FlowStatus.UNAVAILABLE, data=data, service=service)


class FlowHandler(ABC):
    """Fluxo associado a um nó FLOW da árvore de menus."""

    node: ClassVar[MenuNode]

    async def handle(self, context: FlowContext, tokens: Sequence[str]) -> FlowOutcome:
        """Processa os tokens desde a entrada no fluxo.

        Falhas de colaboradores externos viram resultado UNAVAILABLE;
        demais exceções propagam para o orquestrador.
        """
        try:
            return await self.run(context, tokens)
        except DownstreamServiceError as exc:
            log_downstream_failure(
                logger,
                exc.service,
                session_id=context.session_id,
                phone_number=context.phone_number,
                error=exc,
            )
            return FlowOutcome.unavailable(exc.service)

    @abstractmethod
    async def run(self, context: FlowContext, tokens: Sequence[str]) -> FlowOutcome: ...


class FieldFlow(FlowHandler):
    """Fluxo que coleta `fields` em ordem e finaliza após o último.

    Token inválido é consumido sem avançar o campo; o próximo prompt
    inclui a dica de correção.
    """

    fields: ClassVar[tuple[str, ...]] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if not cls.fields:
            return
        missing = [
            name for name in ("accept", "prompt") if getattr(cls, name) is getattr(FieldFlow, name)
        ]
        if missing:
            raise TypeError(f"{cls.__name__} declara fields mas não implementa {missing}")

    def new_draft(self) -> FlowData | None:
        return None

    async def accept(
        self,
        context: FlowContext,
        draft: FlowData | None,
        field_name: str,
        token: str,
    ) -> FlowData | None:
        """Valida o token e retorna o rascunho atualizado.

        Raises:
            FieldValidationError: token inválido para o campo.
        """
        raise NotImplementedError(f"{type(self).__name__} não coleta {field_name}")

    async def prompt(
        self,
        context: FlowContext,
        draft: FlowData | None,
        field_name: str,
        hint: str | None,
    ) -> FlowOutcome:
        raise NotImplementedError(f"{type(self).__name__} não coleta {field_name}")

    @abstractmethod
    async def finalize(
        self,
        context: FlowContext,
        draft: FlowData | None,
        accepted: dict[str, str],
    ) -> FlowOutcome: ...

    async def run(self, context: FlowContext, tokens: Sequence[str]) -> FlowOutcome:
        draft = self.new_draft()
        accepted: dict[str, str] = {}
        hint: str | None = None

        for token in tokens:
            if len(accepted) >= len(self.fields):
                break
            field_name = self.fields[len(accepted)]
            try:
                draft = await self.accept(context, draft, field_name, token)
            except FieldValidationError as exc:
                hint = exc.hint
                continue
            accepted[field_name] = token
            hint = None

        if len(accepted) >= len(self.fields):
            return await self.finalize(context, draft, accepted)
        return await self.prompt(context, draft, self.fields[len(accepted)], hint)


def with_hint(text: str, hint: str | None) -> str:
    """Antepõe a dica de correção ao prompt."""
    return f"{hint}\n{text}" if hint else text


def format_quantity(quantity: float) -> str:
    """Quantidade sem zeros à direita (500.0 -> "500", 12.50 -> "12.5")."""
    return f"{quantity:.2f}".rstrip("0").rstrip(".")
