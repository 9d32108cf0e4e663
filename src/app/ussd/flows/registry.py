"""Registro de handlers por nó FLOW."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fsm.states import FLOW_NODES

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.ussd.flows.base import FlowHandler
    from fsm.states import MenuNode


class FlowRegistry:
    """Mapeia cada nó FLOW para o seu handler."""

    __slots__ = ("_handlers",)

    def __init__(self, handlers: Iterable[FlowHandler] = ()) -> None:
        self._handlers: dict[MenuNode, FlowHandler] = {}
        for handler in handlers:
            self.register(handler)

    def register(self, handler: FlowHandler) -> None:
        if handler.node not in FLOW_NODES:
            raise ValueError(f"{handler.node} não é um nó de fluxo")
        self._handlers[handler.node] = handler

    def get(self, node: MenuNode) -> FlowHandler | None:
        return self._handlers.get(node)

    def missing(self) -> list[MenuNode]:
        """Nós de fluxo sem handler registrado."""
        return sorted(FLOW_NODES - self._handlers.keys())
