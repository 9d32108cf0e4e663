"""
Tipos e estruturas de dados para transições na árvore de menus.

Referência: registros imutáveis, seguros para logs (sem PII).
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fsm.states.menu import MenuNode


@dataclass(frozen=True, slots=True)
class MenuResolution:
    """
    Resultado da resolução de um token a partir de um nó de menu.

    Attributes:
        source: Nó de menu efetivamente usado na resolução
        target: Nó resultante (igual a source quando matched=False)
        token: Token digitado pelo usuário
        matched: Se o token corresponde a uma opção do menu
    """

    source: MenuNode
    target: MenuNode
    token: str
    matched: bool

    def __post_init__(self) -> None:
        """Valida invariantes do objeto após inicialização."""
        if not self.matched and self.target is not self.source:
            raise ValueError("Token não reconhecido deve manter o nó atual")


@dataclass(frozen=True, slots=True)
class StateTransition:
    """
    Registro de uma transição entre nós da árvore.

    Attributes:
        from_node: Nó de origem
        to_node: Nó de destino
        trigger: Token que causou a transição
        step: Índice (1-based) do token no input acumulado
        timestamp: Momento da transição (UTC)
    """

    from_node: MenuNode
    to_node: MenuNode
    trigger: str
    step: int
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if not self.trigger or not self.trigger.strip():
            raise ValueError("trigger não pode ser vazio")
        if self.step < 1:
            raise ValueError(f"step deve ser >= 1, recebido: {self.step}")

    def to_log_dict(self) -> dict[str, Any]:
        """
        Retorna representação segura para logs.

        O trigger é sempre um dígito de menu, nunca dado digitado em fluxo.
        """
        return {
            "from_node": self.from_node.value,
            "to_node": self.to_node.value,
            "trigger": self.trigger,
            "step": self.step,
            "timestamp": self.timestamp.isoformat(),
        }
