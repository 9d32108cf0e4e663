"""Testes dos endpoints USSD via TestClient."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.routes import create_api_router
from app.bootstrap import get_aggregator_sender, get_process_ussd_use_case
from app.protocols.models import UssdRequest, UssdResponse
from config.settings import UssdSettings
from utils.errors import AggregatorDeliveryError

FORM = {
    "sessionId": "ATUid_1",
    "phoneNumber": "+2348031234567",
    "serviceCode": "*123*456#",
    "text": "1",
}


class FakeUseCase:
    def __init__(
        self, response: str = "CON Harvest Management", should_close: bool = False
    ) -> None:
        self.requests: list[UssdRequest] = []
        self._response = response
        self._should_close = should_close

    async def execute(self, request: UssdRequest) -> UssdResponse:
        self.requests.append(request)
        return UssdResponse(
            session_id=request.session_id,
            response=self._response,
            should_close=self._should_close,
        )


@pytest.fixture
def use_case() -> FakeUseCase:
    return FakeUseCase()


@pytest.fixture
def sender() -> AsyncMock:
    mock = AsyncMock()
    mock.send = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def client(use_case: FakeUseCase, sender: AsyncMock) -> TestClient:
    app = FastAPI()
    app.include_router(create_api_router())
    app.dependency_overrides[get_process_ussd_use_case] = lambda: use_case
    app.dependency_overrides[get_aggregator_sender] = lambda: sender
    return TestClient(app)


class TestReceiveUssd:
    def test_form_request_gets_plain_text(self, client: TestClient, use_case: FakeUseCase) -> None:
        response = client.post("/ussd", data=FORM)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "CON Harvest Management"
        assert use_case.requests[0].phone_number == "08031234567"

    def test_json_request_gets_json(self, client: TestClient) -> None:
        response = client.post("/ussd", json=FORM)

        assert response.status_code == 200
        assert response.json() == {
            "sessionId": "ATUid_1",
            "response": "CON Harvest Management",
            "shouldClose": False,
        }

    def test_missing_fields_is_400(self, client: TestClient, use_case: FakeUseCase) -> None:
        response = client.post("/ussd", json={"text": "1"})

        assert response.status_code == 400
        assert response.json()["reason"] == "missing_fields"
        assert use_case.requests == []

    def test_invalid_phone_is_400(self, client: TestClient) -> None:
        response = client.post("/ussd", data={**FORM, "phoneNumber": "555"})

        assert response.status_code == 400
        assert response.json() == {
            "status": "error",
            "reason": "invalid_phone_number",
            "message": "Invalid phone number format",
        }

    def test_malformed_json_is_400(self, client: TestClient) -> None:
        response = client.post(
            "/ussd", content=b"{", headers={"content-type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["reason"] == "invalid_json"


class TestCallback:
    def test_delivered(self, client: TestClient, sender: AsyncMock) -> None:
        response = client.post("/ussd/callback", json=FORM)

        assert response.status_code == 200
        assert response.json()["status"] == "delivered"
        delivered = sender.send.await_args.args[0]
        assert delivered.session_id == "ATUid_1"

    def test_delivery_failure_is_502(self, client: TestClient, sender: AsyncMock) -> None:
        sender.send.side_effect = AggregatorDeliveryError("HTTP 500")

        response = client.post("/ussd/callback", json=FORM)

        assert response.status_code == 502
        body = response.json()
        assert body["message"] == "Failed to deliver USSD response"
        assert body["data"]["response"] == "CON Harvest Management"


class TestTestEndpoint:
    def test_simulates_request(
        self, client: TestClient, use_case: FakeUseCase, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            "api.routes.ussd.router.get_ussd_settings",
            lambda: UssdSettings(test_endpoint_enabled=True),
        )

        response = client.post("/ussd/test", json={"phoneNumber": "08031234567", "text": "1"})

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "success"
        assert body["request"]["sessionId"].startswith("test_")
        assert body["request"]["serviceCode"] == "*123*456#"
        assert body["response"]["response"] == "CON Harvest Management"
        assert use_case.requests[0].session_id == body["request"]["sessionId"]

    def test_disabled_is_404(
        self, client: TestClient, use_case: FakeUseCase, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            "api.routes.ussd.router.get_ussd_settings",
            lambda: UssdSettings(test_endpoint_enabled=False),
        )

        response = client.post("/ussd/test", json={"phoneNumber": "08031234567"})

        assert response.status_code == 404
        assert use_case.requests == []


class TestInfo:
    def test_info(self, client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            "api.routes.ussd.router.get_ussd_settings",
            lambda: UssdSettings(service_code="*384*1#"),
        )

        body = client.get("/ussd/info").json()

        assert body["serviceCode"] == "*384*1#"
        assert body["instructions"] == "Dial *384*1# from any phone to access GroChain services"
        assert body["supportedNetworks"] == ["MTN", "Airtel", "Glo", "9mobile"]
        assert len(body["features"]) == 4
