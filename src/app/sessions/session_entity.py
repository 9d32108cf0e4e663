"""Entidade de sessão USSD."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any

from app.sessions.flow_data import FlowData, dump_flow_data, load_flow_data
from fsm.states import DEFAULT_NODE, MenuNode, parse_node


class EndReason(StrEnum):
    """Motivo do encerramento da sessão."""

    COMPLETED = "completed"
    EXITED = "exited"
    EXPIRED = "expired"
    FAILED = "failed"


def _parse_datetime(value: Any, default: datetime | None = None) -> datetime | None:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, str) and value:
        parsed = datetime.fromisoformat(value)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return default


@dataclass(slots=True)
class UssdSession:
    """Estado de uma chamada USSD em andamento.

    `step` é sempre o número de tokens não vazios já consumidos do input
    acumulado. `flow_entry_step` marca o índice do token a partir do qual
    o fluxo atual recebe seus tokens.
    """

    session_id: str
    phone_number: str
    service_code: str
    network_code: str | None = None
    current_menu: MenuNode = DEFAULT_NODE
    step: int = 0
    flow_entry_step: int | None = None
    user_data: FlowData | None = None
    last_input: str = ""
    last_response: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_activity: datetime = field(default_factory=lambda: datetime.now(UTC))
    ended_at: datetime | None = None
    is_active: bool = True
    end_reason: EndReason | None = None

    def touch(self, now: datetime | None = None) -> None:
        """Atualiza last_activity."""
        self.last_activity = now or datetime.now(UTC)

    def is_idle_for(self, minutes: int, now: datetime | None = None) -> bool:
        """Verifica se a sessão está sem atividade há mais de `minutes`."""
        reference = now or datetime.now(UTC)
        return reference - self.last_activity > timedelta(minutes=minutes)

    def enter_flow(self, node: MenuNode, entry_step: int) -> None:
        """Entra em um fluxo; tokens a partir de `entry_step` pertencem a ele."""
        self.current_menu = node
        self.flow_entry_step = entry_step
        self.user_data = None

    def terminate(self, reason: EndReason, now: datetime | None = None) -> bool:
        """Encerra a sessão uma única vez.

        Os dados acumulados (user_data, last_input) são descartados no
        encerramento.

        Returns:
            True se a sessão foi encerrada agora, False se já estava inativa.
        """
        if not self.is_active:
            return False
        self.is_active = False
        self.end_reason = reason
        self.ended_at = now or datetime.now(UTC)
        self.user_data = None
        self.last_input = ""
        return True

    def to_dict(self) -> dict[str, Any]:
        """Serializa sessão para persistência."""
        return {
            "session_id": self.session_id,
            "phone_number": self.phone_number,
            "service_code": self.service_code,
            "network_code": self.network_code,
            "current_menu": self.current_menu.value,
            "step": self.step,
            "flow_entry_step": self.flow_entry_step,
            "user_data": dump_flow_data(self.user_data),
            "last_input": self.last_input,
            "last_response": self.last_response,
            "created_at": self.created_at.isoformat(),
            "last_activity": self.last_activity.isoformat(),
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "is_active": self.is_active,
            "end_reason": self.end_reason.value if self.end_reason else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UssdSession:
        """Deserializa sessão de persistência."""
        now = datetime.now(UTC)
        end_reason = data.get("end_reason")
        return cls(
            session_id=data["session_id"],
            phone_number=data["phone_number"],
            service_code=data.get("service_code", ""),
            network_code=data.get("network_code"),
            current_menu=parse_node(data.get("current_menu")),
            step=int(data.get("step", 0)),
            flow_entry_step=data.get("flow_entry_step"),
            user_data=load_flow_data(data.get("user_data")),
            last_input=data.get("last_input", ""),
            last_response=data.get("last_response", ""),
            created_at=_parse_datetime(data.get("created_at"), now) or now,
            last_activity=_parse_datetime(data.get("last_activity"), now) or now,
            ended_at=_parse_datetime(data.get("ended_at")),
            is_active=bool(data.get("is_active", True)),
            end_reason=EndReason(end_reason) if end_reason else None,
        )
