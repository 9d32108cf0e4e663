"""
Exports públicos do módulo fsm/types.

Tipos e estruturas de dados para transições na árvore de menus.
"""

from fsm.types.transition import MenuResolution, StateTransition

__all__ = [
    "MenuResolution",
    "StateTransition",
]
