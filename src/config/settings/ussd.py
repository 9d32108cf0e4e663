"""Settings do canal USSD.

Textos institucionais e integração com o agregador de telecom
(Africa's Talking ou compatível).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_SERVICE_CODE = "*123*456#"


@dataclass(frozen=True)
class UssdSettings:
    """Configurações do serviço USSD.

    Attributes:
        service_code: Código discado pelo usuário (ex: *123*456#)
        brand_name: Nome exibido nos menus
        support_phone: Telefone do suporte
        support_email: Email do suporte
        support_whatsapp: WhatsApp do suporte
        callback_url: Endpoint do agregador para push da resposta
        callback_api_key: Chave de API do agregador
        callback_timeout_seconds: Timeout do push (sem retry)
        test_endpoint_enabled: Habilita POST /ussd/test
    """

    service_code: str = DEFAULT_SERVICE_CODE
    brand_name: str = "GroChain"
    support_phone: str = "+234 800 GROCHAIN"
    support_email: str = "support@grochain.ng"
    support_whatsapp: str = "+234 800 GROCHAIN"
    callback_url: str = ""
    callback_api_key: str = ""
    callback_timeout_seconds: float = 5.0
    test_endpoint_enabled: bool = True

    def validate(self, is_production: bool = False) -> list[str]:
        """Valida configurações do USSD."""
        errors: list[str] = []

        if not self.service_code.startswith("*") or not self.service_code.endswith("#"):
            errors.append(f"USSD_SERVICE_CODE inválido: {self.service_code}")

        if not self.brand_name:
            errors.append("USSD_BRAND_NAME não pode ser vazio")

        if self.callback_url and not self.callback_url.startswith(("http://", "https://")):
            errors.append("USSD_CALLBACK_URL deve ser http(s)")

        if self.callback_timeout_seconds <= 0:
            errors.append("USSD_CALLBACK_TIMEOUT_SECONDS deve ser > 0")

        if is_production and self.test_endpoint_enabled:
            errors.append("USSD_TEST_ENDPOINT_ENABLED deve ser false em produção")

        return errors


def _load_ussd_from_env() -> UssdSettings:
    """Carrega UssdSettings de variáveis de ambiente."""
    environment = os.getenv("ENVIRONMENT", "development").lower()
    default_test_enabled = "false" if environment in ("production", "prod") else "true"
    return UssdSettings(
        service_code=os.getenv("USSD_SERVICE_CODE", DEFAULT_SERVICE_CODE),
        brand_name=os.getenv("USSD_BRAND_NAME", "GroChain"),
        support_phone=os.getenv("USSD_SUPPORT_PHONE", "+234 800 GROCHAIN"),
        support_email=os.getenv("USSD_SUPPORT_EMAIL", "support@grochain.ng"),
        support_whatsapp=os.getenv("USSD_SUPPORT_WHATSAPP", "+234 800 GROCHAIN"),
        callback_url=os.getenv("USSD_CALLBACK_URL", ""),
        callback_api_key=os.getenv("USSD_CALLBACK_API_KEY", ""),
        callback_timeout_seconds=float(os.getenv("USSD_CALLBACK_TIMEOUT_SECONDS", "5")),
        test_endpoint_enabled=os.getenv(
            "USSD_TEST_ENDPOINT_ENABLED", default_test_enabled
        ).lower() in ("true", "1", "yes"),
    )


@lru_cache(maxsize=1)
def get_ussd_settings() -> UssdSettings:
    """Retorna instância cacheada de UssdSettings."""
    return _load_ussd_from_env()
