"""Clientes HTTP para verificação de identidade e score de crédito.

Implementação concreta de IO: uma tentativa por chamada, sem retry.
Qualquer falha vira DownstreamServiceError para o fluxo encerrar a sessão.
"""

from __future__ import annotations

import logging

import httpx

from app.domain.credit import CreditScore, VerificationOutcome
from utils.errors import CreditScoreUnavailableError, IdentityVerificationError

logger = logging.getLogger(__name__)

# Sinônimos aceitos do serviço de verificação
_OUTCOME_ALIASES: dict[str, VerificationOutcome] = {
    "verified": VerificationOutcome.VERIFIED,
    "pending": VerificationOutcome.PENDING,
    "manual": VerificationOutcome.MANUAL_REVIEW,
    "manual_review": VerificationOutcome.MANUAL_REVIEW,
    "needs_manual_review": VerificationOutcome.MANUAL_REVIEW,
}


def _headers(api_key: str) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers


class HttpIdentityVerifier:
    """Verificação de BVN via serviço HTTP interno.

    Args:
        http_client: Cliente HTTP async compartilhado
        url: Endpoint de verificação (POST)
        api_key: Token Bearer (opcional)
        timeout_seconds: Timeout da chamada
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        url: str,
        api_key: str = "",
        timeout_seconds: float = 4.0,
    ) -> None:
        self._http = http_client
        self._url = url
        self._api_key = api_key
        self._timeout = timeout_seconds

    async def verify(self, bvn: str, phone_number: str) -> VerificationOutcome:
        """Verifica o BVN ou adia a decisão (pending/manual_review).

        Raises:
            IdentityVerificationError: falha de rede, HTTP != 2xx ou payload inválido.
        """
        try:
            response = await self._http.post(
                self._url,
                headers=_headers(self._api_key),
                json={"bvn": bvn, "phoneNumber": phone_number},
                timeout=self._timeout,
            )
            response.raise_for_status()
            status = str(response.json().get("status", "")).lower()
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            raise IdentityVerificationError(f"Falha na verificação de BVN: {e}") from e

        outcome = _OUTCOME_ALIASES.get(status)
        if outcome is None:
            raise IdentityVerificationError(f"Status de verificação desconhecido: {status!r}")
        logger.info("bvn_verification_result", extra={"outcome": outcome.value})
        return outcome


class HttpCreditScoreProvider:
    """Consulta de score de crédito via serviço HTTP interno.

    Args:
        http_client: Cliente HTTP async compartilhado
        url: Endpoint de score (GET ?phoneNumber=)
        api_key: Token Bearer (opcional)
        timeout_seconds: Timeout da chamada
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        url: str,
        api_key: str = "",
        timeout_seconds: float = 4.0,
    ) -> None:
        self._http = http_client
        self._url = url
        self._api_key = api_key
        self._timeout = timeout_seconds

    async def get_score(self, phone_number: str) -> CreditScore:
        """Retorna o score do produtor.

        Raises:
            CreditScoreUnavailableError: falha de rede, HTTP != 2xx ou payload inválido.
        """
        try:
            response = await self._http.get(
                self._url,
                headers=_headers(self._api_key),
                params={"phoneNumber": phone_number},
                timeout=self._timeout,
            )
            response.raise_for_status()
            return CreditScore.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as e:
            raise CreditScoreUnavailableError(f"Falha na consulta de score: {e}") from e
