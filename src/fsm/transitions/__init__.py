"""
Exports públicos do módulo fsm/transitions.

Tabela estática da árvore de menus e resolução de transições.
"""

from fsm.transitions.rules import (
    BACK_KEY,
    DEFAULT_BRAND_NAME,
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

__all__ = [
    "BACK_KEY",
    "DEFAULT_BRAND_NAME",
    "EXIT_KEY",
    "MENU_TREE",
    "MenuDefinition",
    "MenuOption",
    "TransitionTable",
    "render_menu",
    "resolve_transition",
    "transition_table",
    "validate_menu_tree",
]
