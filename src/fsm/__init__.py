"""
Módulo FSM — Árvore de menus USSD.

Estrutura:
    - states/: Nós da árvore (MenuNode, NodeKind)
    - transitions/: Tabela estática (MENU_TREE) e resolução
    - manager/: Navegação token a token (MenuNavigator)
    - types/: Tipos de dados (MenuResolution, StateTransition)
"""

from fsm.manager import (
    MenuNavigator,
    NavigationResult,
)
from fsm.states import (
    DEFAULT_NODE,
    FLOW_NODES,
    TERMINAL_NODES,
    MenuNode,
    NodeKind,
    is_flow,
    is_menu,
    is_terminal,
    node_kind,
    parse_node,
)
from fsm.transitions import (
    BACK_KEY,
    EXIT_KEY,
    MENU_TREE,
    MenuDefinition,
    MenuOption,
    TransitionTable,
    render_menu,
    resolve_transition,
    transition_table,
    validate_menu_tree,
)
from fsm.types import (
    MenuResolution,
    StateTransition,
)

__all__ = [
    "BACK_KEY",
    "DEFAULT_NODE",
    "EXIT_KEY",
    "FLOW_NODES",
    "MENU_TREE",
    "TERMINAL_NODES",
    "MenuDefinition",
    "MenuNavigator",
    "MenuNode",
    "MenuOption",
    "MenuResolution",
    "NavigationResult",
    "NodeKind",
    "StateTransition",
    "TransitionTable",
    "is_flow",
    "is_menu",
    "is_terminal",
    "node_kind",
    "parse_node",
    "render_menu",
    "resolve_transition",
    "transition_table",
    "validate_menu_tree",
]
