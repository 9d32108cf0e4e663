"""
Exports públicos do módulo fsm/states.

Nós da árvore de menus USSD e seus tipos.
"""

from fsm.states.menu import (
    DEFAULT_NODE,
    FLOW_NODES,
    NODE_KINDS,
    TERMINAL_NODES,
    MenuNode,
    NodeKind,
    is_flow,
    is_menu,
    is_terminal,
    node_kind,
    parse_node,
)

__all__ = [
    "DEFAULT_NODE",
    "FLOW_NODES",
    "NODE_KINDS",
    "TERMINAL_NODES",
    "MenuNode",
    "NodeKind",
    "is_flow",
    "is_menu",
    "is_terminal",
    "node_kind",
    "parse_node",
]
