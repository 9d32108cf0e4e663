"""
Navegação de tokens pela árvore de menus.

O MenuNavigator percorre tokens a partir de um nó, parando no primeiro
nó de fluxo ou terminal, e registra as transições para logs.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from fsm.states.menu import MenuNode, is_menu
from fsm.transitions.rules import resolve_transition
from fsm.types.transition import StateTransition

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NavigationResult:
    """
    Resultado de uma caminhada pela árvore.

    Attributes:
        node: Nó final (menu, fluxo ou terminal)
        consumed: Quantidade de tokens consumidos pela árvore
        transitions: Transições efetivas, em ordem
        last_unmatched: True se o último token consumido não casou com opção
    """

    node: MenuNode
    consumed: int
    transitions: tuple[StateTransition, ...] = ()
    last_unmatched: bool = False


class MenuNavigator:
    """Percorre a árvore de menus token a token."""

    __slots__ = ("_session_id",)

    def __init__(self, session_id: str = "") -> None:
        self._session_id = session_id

    @property
    def session_id(self) -> str:
        return self._session_id

    def walk(
        self,
        start: MenuNode,
        tokens: Sequence[str],
        step_offset: int = 0,
    ) -> NavigationResult:
        """
        Consome tokens a partir de `start` até sair da camada de menus.

        Args:
            start: Nó de partida (se não for menu, nada é consumido)
            tokens: Tokens ainda não processados
            step_offset: Quantidade de tokens já consumidos antes destes

        Returns:
            NavigationResult com o nó final e os tokens consumidos
        """
        current = start
        consumed = 0
        transitions: list[StateTransition] = []
        last_unmatched = False

        for token in tokens:
            if not is_menu(current):
                break
            consumed += 1
            resolution = resolve_transition(current, token)
            last_unmatched = not resolution.matched
            if resolution.matched:
                transitions.append(
                    StateTransition(
                        from_node=resolution.source,
                        to_node=resolution.target,
                        trigger=resolution.token,
                        step=step_offset + consumed,
                    )
                )
            current = resolution.target

        result = NavigationResult(
            node=current,
            consumed=consumed,
            transitions=tuple(transitions),
            last_unmatched=last_unmatched,
        )
        if transitions:
            logger.debug(
                "menu_navigation",
                extra={
                    "session_id": self._session_id,
                    "final_node": current.value,
                    "consumed": consumed,
                    "transitions": [t.to_log_dict() for t in transitions],
                },
            )
        return result

    def summary(self, result: NavigationResult) -> dict[str, Any]:
        """Resumo seguro para logs de um resultado de navegação."""
        return {
            "session_id": self._session_id,
            "node": result.node.value,
            "consumed": result.consumed,
            "transition_count": len(result.transitions),
            "last_unmatched": result.last_unmatched,
        }
