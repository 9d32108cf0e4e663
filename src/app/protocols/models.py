"""Modelos de entrada/saída do protocolo USSD (contrato com o agregador)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.ussd.phone import normalize_phone_number


class UssdRequest(BaseModel):
    """Requisição USSD normalizada.

    Aceita os nomes do agregador (camelCase) e os nomes internos.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    session_id: str = Field(..., alias="sessionId", min_length=1, max_length=128)
    phone_number: str = Field(..., alias="phoneNumber")
    service_code: str = Field(..., alias="serviceCode", min_length=1)
    text: str = Field(default="", description="Input acumulado, separado por '*'.")
    network_code: str | None = Field(default=None, alias="networkCode")

    @field_validator("phone_number")
    @classmethod
    def _normalize_phone(cls, value: str) -> str:
        return normalize_phone_number(value)

    @field_validator("text", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return "" if value is None else value


class UssdResponse(BaseModel):
    """Resposta USSD (`response` começa com CON ou END)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    session_id: str = Field(..., alias="sessionId")
    response: str
    should_close: bool = Field(..., alias="shouldClose")

    def to_wire(self) -> dict[str, object]:
        """Formato do agregador: {sessionId, response, shouldClose}."""
        return self.model_dump(by_alias=True)
