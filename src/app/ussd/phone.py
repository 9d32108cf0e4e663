"""Normalização de telefones nigerianos para o formato nacional.

Aceita `+234XXXXXXXXXX`, `234XXXXXXXXXX` e `0XXXXXXXXXX`; espaços e hífens
são ignorados. Formato canônico: `0[789][01]XXXXXXXX`.
"""

from __future__ import annotations

import re

_SEPARATORS = re.compile(r"[\s\-()]")
_NATIONAL = re.compile(r"^0[789][01]\d{8}$")


class InvalidPhoneNumberError(ValueError):
    """Telefone fora dos formatos aceitos."""


def normalize_phone_number(raw: str) -> str:
    """Converte telefone para o formato nacional canônico.

    Raises:
        InvalidPhoneNumberError: se o número não for um celular nigeriano válido.
    """
    compact = _SEPARATORS.sub("", raw or "")
    if compact.startswith("+234"):
        candidate = "0" + compact[4:]
    elif compact.startswith("234") and len(compact) == 13:
        candidate = "0" + compact[3:]
    else:
        candidate = compact

    if not _NATIONAL.match(candidate):
        raise InvalidPhoneNumberError("phoneNumber inválido")
    return candidate
