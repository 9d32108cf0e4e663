"""Push da resposta USSD para o endpoint de callback do agregador.

Uma única tentativa: retry e timeout de sessão são do agregador.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from utils.errors import AggregatorDeliveryError

if TYPE_CHECKING:
    from app.protocols.models import UssdResponse

logger = logging.getLogger(__name__)


class HttpAggregatorSender:
    """Envia {sessionId, response, shouldClose} para o callback configurado.

    Args:
        http_client: Cliente HTTP async compartilhado
        callback_url: Endpoint do agregador
        api_key: Chave enviada no header `apiKey`
        timeout_seconds: Timeout do push
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        callback_url: str,
        api_key: str = "",
        timeout_seconds: float = 5.0,
    ) -> None:
        self._http = http_client
        self._callback_url = callback_url
        self._api_key = api_key
        self._timeout = timeout_seconds

    async def send(self, response: UssdResponse) -> None:
        """Entrega a resposta.

        Raises:
            AggregatorDeliveryError: callback ausente, falha de rede ou HTTP != 2xx.
        """
        if not self._callback_url:
            raise AggregatorDeliveryError("USSD_CALLBACK_URL não configurado")

        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["apiKey"] = self._api_key

        try:
            result = await self._http.post(
                self._callback_url,
                headers=headers,
                json=response.to_wire(),
                timeout=self._timeout,
            )
            result.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(
                "aggregator_delivery_failed",
                extra={"session_id": response.session_id, "error": str(e)},
            )
            raise AggregatorDeliveryError(f"Falha ao entregar resposta: {e}") from e

        logger.info(
            "aggregator_delivery_ok",
            extra={"session_id": response.session_id, "status_code": result.status_code},
        )
