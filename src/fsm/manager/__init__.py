"""
Exports públicos do módulo fsm/manager.

Navegação de tokens pela árvore de menus.
"""

from fsm.manager.navigator import MenuNavigator, NavigationResult

__all__ = [
    "MenuNavigator",
    "NavigationResult",
]
