"""Protocolo de envio da resposta USSD ao agregador (push, sem retry)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import UssdResponse


class AggregatorSenderProtocol(Protocol):
    """Contrato mínimo para entregar a resposta renderizada ao agregador."""

    async def send(self, response: UssdResponse) -> None: ...
