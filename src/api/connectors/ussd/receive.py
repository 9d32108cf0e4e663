"""Parse e validação inicial do payload USSD (sem PII nos erros)."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from app.protocols.models import UssdRequest

if TYPE_CHECKING:
    from collections.abc import Mapping

REQUIRED_FIELDS = ("sessionId", "phoneNumber", "serviceCode")
TEST_SESSION_PREFIX = "test_"


class InvalidUssdPayloadError(ValueError):
    """Payload USSD inválido (responde 400 ao agregador)."""

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.message = message


@dataclass(frozen=True, slots=True)
class ParsedUssdRequest:
    """Requisição validada + formato de resposta esperado pelo chamador.

    `plain_text` é True para payload form-encoded (agregador clássico),
    que espera `CON …`/`END …` como text/plain.
    """

    request: UssdRequest
    plain_text: bool


def decode_json_body(raw_body: bytes) -> dict[str, Any]:
    """Decodifica corpo JSON; exige objeto no topo."""
    try:
        payload = json.loads(raw_body or b"{}")
    except json.JSONDecodeError as exc:
        raise InvalidUssdPayloadError("invalid_json", "Request body is not valid JSON") from exc

    if not isinstance(payload, dict):
        raise InvalidUssdPayloadError("payload_not_object", "Request body must be an object")

    return payload


def _clean(fields: Mapping[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for key, value in fields.items():
        if isinstance(value, str):
            value = value.strip()
        cleaned[key] = value
    return cleaned


def _validate(data: dict[str, Any]) -> UssdRequest:
    try:
        return UssdRequest.model_validate(data)
    except ValidationError as exc:
        locations = {str(err["loc"][0]) for err in exc.errors() if err.get("loc")}
        if locations & {"phoneNumber", "phone_number"}:
            raise InvalidUssdPayloadError(
                "invalid_phone_number", "Invalid phone number format"
            ) from exc
        raise InvalidUssdPayloadError("invalid_payload", "Invalid USSD request") from exc


def parse_ussd_request(fields: Mapping[str, Any], *, plain_text: bool) -> ParsedUssdRequest:
    """Valida campos do agregador e normaliza o telefone.

    Raises:
        InvalidUssdPayloadError: Campo obrigatório ausente ou telefone inválido
    """
    data = _clean(fields)
    missing = [name for name in REQUIRED_FIELDS if not data.get(name)]
    if missing:
        raise InvalidUssdPayloadError(
            "missing_fields",
            f"Missing required fields: {', '.join(missing)}",
        )

    return ParsedUssdRequest(request=_validate(data), plain_text=plain_text)


def parse_ussd_test_request(
    fields: Mapping[str, Any],
    *,
    service_code: str,
) -> UssdRequest:
    """Monta uma requisição de teste (sessionId `test_…`).

    Um `sessionId` existente com prefixo `test_` é reaproveitado para
    continuar a mesma sessão; qualquer outro valor é substituído.
    """
    data = _clean(fields)
    if not data.get("phoneNumber"):
        raise InvalidUssdPayloadError("missing_fields", "Missing required fields: phoneNumber")

    session_id = str(data.get("sessionId") or "")
    if not session_id.startswith(TEST_SESSION_PREFIX):
        session_id = f"{TEST_SESSION_PREFIX}{uuid.uuid4().hex[:16]}"

    return _validate(
        {
            "sessionId": session_id,
            "phoneNumber": data["phoneNumber"],
            "serviceCode": service_code,
            "text": data.get("text") or "",
        }
    )
