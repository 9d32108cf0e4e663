"""Testes dos clientes HTTP de verificação de BVN e score de crédito."""

from __future__ import annotations

import json

import httpx
import pytest

from app.domain.credit import VerificationOutcome
from app.infra.fintech import (
    HttpCreditScoreProvider,
    HttpIdentityVerifier,
    MemoryCreditScoreProvider,
    MemoryIdentityVerifier,
)
from utils.errors import (
    CreditScoreUnavailableError,
    DownstreamServiceError,
    IdentityVerificationError,
)


def _client(handler: httpx.MockTransport) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=handler)


class TestHttpIdentityVerifier:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            ("verified", VerificationOutcome.VERIFIED),
            ("PENDING", VerificationOutcome.PENDING),
            ("needs_manual_review", VerificationOutcome.MANUAL_REVIEW),
        ],
    )
    async def test_maps_status(self, status: str, expected: VerificationOutcome) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"status": status})

        async with _client(httpx.MockTransport(handler)) as http:
            verifier = HttpIdentityVerifier(http, "https://kyc.test/verify", api_key="k")
            outcome = await verifier.verify("12345678901", "08031234567")

        assert outcome is expected
        assert seen[0].headers["Authorization"] == "Bearer k"
        assert json.loads(seen[0].content) == {
            "bvn": "12345678901",
            "phoneNumber": "08031234567",
        }

    @pytest.mark.asyncio
    async def test_http_error_is_downstream_error(self) -> None:
        transport = httpx.MockTransport(lambda _request: httpx.Response(503))

        async with _client(transport) as http:
            verifier = HttpIdentityVerifier(http, "https://kyc.test/verify")
            with pytest.raises(IdentityVerificationError) as exc_info:
                await verifier.verify("12345678901", "08031234567")

        assert isinstance(exc_info.value, DownstreamServiceError)
        assert exc_info.value.service == "identity_verification"

    @pytest.mark.asyncio
    async def test_unknown_status_raises(self) -> None:
        transport = httpx.MockTransport(lambda _r: httpx.Response(200, json={"status": "??"}))

        async with _client(transport) as http:
            with pytest.raises(IdentityVerificationError):
                await HttpIdentityVerifier(http, "https://kyc.test").verify("1", "0803")

    @pytest.mark.asyncio
    async def test_network_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with _client(httpx.MockTransport(handler)) as http:
            with pytest.raises(IdentityVerificationError):
                await HttpIdentityVerifier(http, "https://kyc.test").verify("1", "0803")


class TestHttpCreditScoreProvider:
    @pytest.mark.asyncio
    async def test_returns_score_with_rating(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"score": 720})

        async with _client(httpx.MockTransport(handler)) as http:
            score = await HttpCreditScoreProvider(http, "https://score.test").get_score(
                "08031234567"
            )

        assert score.score == 720
        assert score.rating == "Excellent"
        assert seen[0].url.params["phoneNumber"] == "08031234567"
        assert "Authorization" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_invalid_payload_raises(self) -> None:
        transport = httpx.MockTransport(lambda _r: httpx.Response(200, json={"value": 1}))

        async with _client(transport) as http:
            with pytest.raises(CreditScoreUnavailableError):
                await HttpCreditScoreProvider(http, "https://score.test").get_score("0803")


class TestMemoryFintech:
    @pytest.mark.asyncio
    async def test_memory_verifier_outcomes(self) -> None:
        verifier = MemoryIdentityVerifier(
            {"00000000000": VerificationOutcome.MANUAL_REVIEW}
        )

        assert await verifier.verify("00000000000", "0803") is VerificationOutcome.MANUAL_REVIEW
        assert await verifier.verify("11111111111", "0803") is VerificationOutcome.VERIFIED
        assert verifier.calls == ["0803", "0803"]

    @pytest.mark.asyncio
    async def test_memory_score_provider(self) -> None:
        provider = MemoryCreditScoreProvider({"08031234567": 480})

        assert (await provider.get_score("08031234567")).rating == "Poor"
        assert (await provider.get_score("08099999999")).score == 650
