"""Endpoints USSD.

Endpoints:
- POST /ussd: webhook do agregador (form → text/plain, JSON → JSON)
- POST /ussd/callback: processa e faz push da resposta ao agregador
- POST /ussd/test: helper de desenvolvimento (sessionId `test_…`)
- GET /ussd/info: informações públicas do serviço

Toda requisição recebe um correlation_id (header x-correlation-id ou
gerado) propagado para os logs.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse

from api.connectors.ussd import (
    InvalidUssdPayloadError,
    ParsedUssdRequest,
    decode_json_body,
    parse_ussd_request,
    parse_ussd_test_request,
)
from app.bootstrap import get_aggregator_sender, get_process_ussd_use_case
from app.observability import get_correlation_id, reset_correlation_id, set_correlation_id
from app.protocols import AggregatorSenderProtocol
from app.use_cases.ussd import ProcessUssdRequestUseCase
from app.ussd.input_parser import parse_input
from config.settings import get_ussd_settings
from utils.errors import AggregatorDeliveryError

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_DESCRIPTION = "GroChain USSD Service for Rural Farmers"
SERVICE_FEATURES = (
    "Harvest Management",
    "Marketplace Access",
    "Financial Services",
    "Support & Training",
)
SUPPORTED_NETWORKS = ("MTN", "Airtel", "Glo", "9mobile")


def _is_json(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";")[0].strip().lower() == "application/json"


async def _read_fields(request: Request) -> tuple[dict[str, Any], bool]:
    """Lê o corpo como JSON ou form. Retorna (campos, plain_text)."""
    if _is_json(request):
        return decode_json_body(await request.body()), False
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}, True


async def _parse(request: Request) -> ParsedUssdRequest:
    fields, plain_text = await _read_fields(request)
    return parse_ussd_request(fields, plain_text=plain_text)


def _bad_request(exc: InvalidUssdPayloadError) -> JSONResponse:
    logger.warning(
        "ussd_payload_invalid",
        extra={"channel": "ussd", "reason": exc.reason, "correlation_id": get_correlation_id()},
    )
    return JSONResponse(
        content={"status": "error", "reason": exc.reason, "message": exc.message},
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@router.post("", response_model=None)
async def receive_ussd(
    request: Request,
    use_case: ProcessUssdRequestUseCase = Depends(get_process_ussd_use_case),
) -> Response:
    """Webhook do agregador.

    Form-encoded responde `CON …`/`END …` em text/plain; JSON responde
    `{sessionId, response, shouldClose}`.
    """
    token = set_correlation_id(request.headers.get("x-correlation-id"))
    try:
        try:
            parsed = await _parse(request)
        except InvalidUssdPayloadError as exc:
            return _bad_request(exc)

        logger.info(
            "ussd_request_received",
            extra={
                "channel": "ussd",
                "session_id": parsed.request.session_id,
                "step": parse_input(parsed.request.text).step,
                "plain_text": parsed.plain_text,
            },
        )
        reply = await use_case.execute(parsed.request)

        if parsed.plain_text:
            return PlainTextResponse(content=reply.response)
        return JSONResponse(content=reply.to_wire())
    finally:
        reset_correlation_id(token)


@router.post("/callback", response_model=None)
async def receive_ussd_with_callback(
    request: Request,
    use_case: ProcessUssdRequestUseCase = Depends(get_process_ussd_use_case),
    sender: AggregatorSenderProtocol = Depends(get_aggregator_sender),
) -> Response:
    """Processa a requisição e entrega a resposta via push ao agregador.

    Uma única tentativa; falha de entrega responde 502.
    """
    token = set_correlation_id(request.headers.get("x-correlation-id"))
    try:
        try:
            parsed = await _parse(request)
        except InvalidUssdPayloadError as exc:
            return _bad_request(exc)

        reply = await use_case.execute(parsed.request)

        try:
            await sender.send(reply)
        except AggregatorDeliveryError as exc:
            logger.warning(
                "ussd_callback_delivery_failed",
                extra={
                    "channel": "ussd",
                    "session_id": reply.session_id,
                    "error_type": type(exc).__name__,
                },
            )
            return JSONResponse(
                content={
                    "status": "error",
                    "message": "Failed to deliver USSD response",
                    "data": reply.to_wire(),
                },
                status_code=status.HTTP_502_BAD_GATEWAY,
            )

        return JSONResponse(content={"status": "delivered", "data": reply.to_wire()})
    finally:
        reset_correlation_id(token)


@router.post("/test", response_model=None)
async def test_ussd(
    request: Request,
    use_case: ProcessUssdRequestUseCase = Depends(get_process_ussd_use_case),
) -> Response:
    """Simula uma requisição USSD (desabilitado em produção)."""
    settings = get_ussd_settings()
    if not settings.test_endpoint_enabled:
        return JSONResponse(content={"detail": "Not Found"}, status_code=status.HTTP_404_NOT_FOUND)

    token = set_correlation_id(request.headers.get("x-correlation-id"))
    try:
        try:
            fields, _plain_text = await _read_fields(request)
            ussd_request = parse_ussd_test_request(fields, service_code=settings.service_code)
        except InvalidUssdPayloadError as exc:
            return _bad_request(exc)

        reply = await use_case.execute(ussd_request)
        return JSONResponse(
            content={
                "status": "success",
                "request": {
                    "sessionId": ussd_request.session_id,
                    "serviceCode": ussd_request.service_code,
                    "text": ussd_request.text,
                },
                "response": reply.to_wire(),
            }
        )
    finally:
        reset_correlation_id(token)


@router.get("/info")
async def ussd_info() -> dict[str, Any]:
    """Informações públicas do serviço USSD."""
    service_code = get_ussd_settings().service_code
    return {
        "serviceCode": service_code,
        "description": SERVICE_DESCRIPTION,
        "features": list(SERVICE_FEATURES),
        "instructions": f"Dial {service_code} from any phone to access GroChain services",
        "supportedNetworks": list(SUPPORTED_NETWORKS),
    }
