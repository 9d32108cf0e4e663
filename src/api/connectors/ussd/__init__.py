"""Connector USSD: parse e validação do payload do agregador."""

from api.connectors.ussd.receive import (
    InvalidUssdPayloadError,
    ParsedUssdRequest,
    decode_json_body,
    parse_ussd_request,
    parse_ussd_test_request,
)

__all__ = [
    "InvalidUssdPayloadError",
    "ParsedUssdRequest",
    "decode_json_body",
    "parse_ussd_request",
    "parse_ussd_test_request",
]
