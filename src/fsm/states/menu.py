"""
Nós canônicos da árvore de menus USSD.

Cada nó é de um de três tipos:
    - MENU: lista numerada de opções, sem efeitos colaterais
    - FLOW: entrada de um fluxo multi-etapas (coleta de campos)
    - TERMINAL: encerra a sessão sem fluxo (ex: "0. Exit")
"""

from enum import StrEnum


class MenuNode(StrEnum):
    """Identificadores dos nós da árvore de menus.

    Menus:
        - MAIN: Menu principal
        - HARVEST: Gestão de colheitas
        - MARKETPLACE: Marketplace
        - FINANCIAL: Serviços financeiros
        - SUPPORT: Suporte e treinamento

    Fluxos:
        - LOG_HARVEST, VIEW_HARVESTS, BROWSE_PRODUCTS,
          CHECK_CREDIT, CONTACT_SUPPORT, FAQ

    Terminal:
        - EXIT: Encerramento solicitado pelo usuário
    """

    MAIN = "main"
    HARVEST = "harvest"
    MARKETPLACE = "marketplace"
    FINANCIAL = "financial"
    SUPPORT = "support"

    LOG_HARVEST = "log_harvest"
    VIEW_HARVESTS = "view_harvests"
    BROWSE_PRODUCTS = "browse_products"
    CHECK_CREDIT = "check_credit"
    CONTACT_SUPPORT = "contact_support"
    FAQ = "faq"

    EXIT = "exit"

    def __str__(self) -> str:
        return self.value


class NodeKind(StrEnum):
    """Tipo de um nó da árvore."""

    MENU = "menu"
    FLOW = "flow"
    TERMINAL = "terminal"


NODE_KINDS: dict[MenuNode, NodeKind] = {
    MenuNode.MAIN: NodeKind.MENU,
    MenuNode.HARVEST: NodeKind.MENU,
    MenuNode.MARKETPLACE: NodeKind.MENU,
    MenuNode.FINANCIAL: NodeKind.MENU,
    MenuNode.SUPPORT: NodeKind.MENU,
    MenuNode.LOG_HARVEST: NodeKind.FLOW,
    MenuNode.VIEW_HARVESTS: NodeKind.FLOW,
    MenuNode.BROWSE_PRODUCTS: NodeKind.FLOW,
    MenuNode.CHECK_CREDIT: NodeKind.FLOW,
    MenuNode.CONTACT_SUPPORT: NodeKind.FLOW,
    MenuNode.FAQ: NodeKind.FLOW,
    MenuNode.EXIT: NodeKind.TERMINAL,
}

FLOW_NODES: frozenset[MenuNode] = frozenset(
    node for node, kind in NODE_KINDS.items() if kind is NodeKind.FLOW
)

TERMINAL_NODES: frozenset[MenuNode] = frozenset(
    node for node, kind in NODE_KINDS.items() if kind is NodeKind.TERMINAL
)

# Nó de fallback para qualquer resolução impossível
DEFAULT_NODE: MenuNode = MenuNode.MAIN


def node_kind(node: MenuNode) -> NodeKind:
    """Retorna o tipo do nó."""
    return NODE_KINDS[node]


def is_menu(node: MenuNode) -> bool:
    return NODE_KINDS.get(node) is NodeKind.MENU


def is_flow(node: MenuNode) -> bool:
    return node in FLOW_NODES


def is_terminal(node: MenuNode) -> bool:
    return node in TERMINAL_NODES


def parse_node(value: object) -> MenuNode:
    """Normaliza valor serializado para MenuNode com fallback seguro.

    Args:
        value: MenuNode, string persistida ou lixo

    Returns:
        MenuNode correspondente ou DEFAULT_NODE
    """
    if isinstance(value, MenuNode):
        return value
    if isinstance(value, str):
        try:
            return MenuNode(value)
        except ValueError:
            return DEFAULT_NODE
    return DEFAULT_NODE
