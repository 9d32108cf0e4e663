"""
Árvore de menus USSD como tabela estática.

Cada menu define um título (template de exibição) e opções numeradas
ordenadas. A tabela `(nó, opção) → destino` é derivada desta definição e
validada por `validate_menu_tree()`.

Convenções em todo menu:
    - "9" volta ao menu principal (exceto no próprio principal)
    - "0" encerra a sessão (nó terminal EXIT)
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from fsm.states.menu import (
    DEFAULT_NODE,
    NODE_KINDS,
    MenuNode,
    NodeKind,
    is_menu,
)
from fsm.types.transition import MenuResolution

BACK_KEY = "9"
EXIT_KEY = "0"
DEFAULT_BRAND_NAME = "GroChain"

# Tipagem explícita da tabela achatada
TransitionTable = dict[tuple[MenuNode, str], MenuNode]


@dataclass(frozen=True, slots=True)
class MenuOption:
    """Opção numerada de um menu."""

    key: str
    label: str
    target: MenuNode


@dataclass(frozen=True, slots=True)
class MenuDefinition:
    """Definição estática de um menu.

    Attributes:
        title: Template do título ({brand} é substituído na renderização)
        options: Opções na ordem de exibição
    """

    title: str
    options: tuple[MenuOption, ...]

    def target_for(self, key: str) -> MenuNode | None:
        """Retorna o destino da opção ou None se a chave não existir."""
        for option in self.options:
            if option.key == key:
                return option.target
        return None


_BACK = MenuOption(BACK_KEY, "Back to Main Menu", MenuNode.MAIN)
_EXIT = MenuOption(EXIT_KEY, "Exit", MenuNode.EXIT)

MENU_TREE: dict[MenuNode, MenuDefinition] = {
    MenuNode.MAIN: MenuDefinition(
        title="{brand} - Digital Agriculture",
        options=(
            MenuOption("1", "Harvest Management", MenuNode.HARVEST),
            MenuOption("2", "Marketplace", MenuNode.MARKETPLACE),
            MenuOption("3", "Financial Services", MenuNode.FINANCIAL),
            MenuOption("4", "Support & Training", MenuNode.SUPPORT),
            _EXIT,
        ),
    ),
    MenuNode.HARVEST: MenuDefinition(
        title="Harvest Management",
        options=(
            MenuOption("1", "Log New Harvest", MenuNode.LOG_HARVEST),
            MenuOption("2", "View My Harvests", MenuNode.VIEW_HARVESTS),
            _BACK,
            _EXIT,
        ),
    ),
    MenuNode.MARKETPLACE: MenuDefinition(
        title="Marketplace",
        options=(
            MenuOption("1", "Browse Products", MenuNode.BROWSE_PRODUCTS),
            _BACK,
            _EXIT,
        ),
    ),
    MenuNode.FINANCIAL: MenuDefinition(
        title="Financial Services",
        options=(
            MenuOption("1", "Check Credit Score", MenuNode.CHECK_CREDIT),
            _BACK,
            _EXIT,
        ),
    ),
    MenuNode.SUPPORT: MenuDefinition(
        title="Support & Training",
        options=(
            MenuOption("1", "Contact Support", MenuNode.CONTACT_SUPPORT),
            MenuOption("2", "FAQ", MenuNode.FAQ),
            _BACK,
            _EXIT,
        ),
    ),
}


def resolve_transition(node: MenuNode, token: str) -> MenuResolution:
    """
    Resolve o próximo nó a partir de um nó de menu e do token digitado.

    Nunca levanta exceção para input do usuário: token desconhecido mantém
    o nó atual. Nó que não é menu (fluxo/terminal) cai no DEFAULT_NODE.

    Args:
        node: Nó atual
        token: Último token digitado

    Returns:
        MenuResolution com destino e se houve correspondência
    """
    source = node if is_menu(node) else DEFAULT_NODE
    key = (token or "").strip()
    target = MENU_TREE[source].target_for(key)
    if target is None:
        return MenuResolution(source=source, target=source, token=key, matched=False)
    return MenuResolution(source=source, target=target, token=key, matched=True)


def transition_table() -> TransitionTable:
    """Retorna a tabela achatada `(nó, opção) → destino`."""
    return {
        (node, option.key): option.target
        for node, definition in MENU_TREE.items()
        for option in definition.options
    }


def render_menu(node: MenuNode, brand_name: str = DEFAULT_BRAND_NAME) -> str:
    """
    Retorna o texto de exibição do menu (sem prefixo CON/END).

    Args:
        node: Nó de menu (outros tipos renderizam o DEFAULT_NODE)
        brand_name: Nome exibido no título do menu principal
    """
    definition = MENU_TREE[node if is_menu(node) else DEFAULT_NODE]
    lines = [definition.title.format(brand=brand_name)]
    lines.extend(f"{option.key}. {option.label}" for option in definition.options)
    return "\n".join(lines)


def _reachable_from(root: MenuNode) -> set[MenuNode]:
    seen = {root}
    queue = deque([root])
    while queue:
        current = queue.popleft()
        definition = MENU_TREE.get(current)
        if definition is None:
            continue
        for option in definition.options:
            if option.target not in seen:
                seen.add(option.target)
                queue.append(option.target)
    return seen


def validate_menu_tree() -> list[str]:
    """
    Valida a integridade da árvore de menus.

    Verifica:
    - Todo nó MENU tem definição e todo nó definido é MENU
    - Chaves de opção são dígitos únicos, sem duplicatas
    - Todo menu tem a opção de saída
    - Todo destino é um MenuNode com tipo conhecido
    - Todo nó é alcançável a partir do DEFAULT_NODE

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for node, kind in NODE_KINDS.items():
        if kind is NodeKind.MENU and node not in MENU_TREE:
            errors.append(f"Menu {node.value} ausente em MENU_TREE")
    for node in MENU_TREE:
        if NODE_KINDS.get(node) is not NodeKind.MENU:
            errors.append(f"Nó {node.value} definido em MENU_TREE não é MENU")

    for node, definition in MENU_TREE.items():
        keys = [option.key for option in definition.options]
        if len(keys) != len(set(keys)):
            errors.append(f"Menu {node.value} tem opções duplicadas: {keys}")
        for option in definition.options:
            if len(option.key) != 1 or not option.key.isdigit():
                errors.append(f"Menu {node.value}: chave inválida {option.key!r}")
            if not isinstance(option.target, MenuNode) or option.target not in NODE_KINDS:
                errors.append(f"Menu {node.value} → {option.target}: destino inválido")
        if definition.target_for(EXIT_KEY) is not MenuNode.EXIT:
            errors.append(f"Menu {node.value} sem opção {EXIT_KEY} → exit")

    reachable = _reachable_from(DEFAULT_NODE)
    for node in MenuNode:
        if node not in reachable:
            errors.append(f"Nó {node.value} inalcançável a partir de {DEFAULT_NODE.value}")

    return errors
