"""
Pytest fixtures for backend testing.
Provides the OpenAPI contract fixture, validators, test clients and sample notifications.
"""

import copy
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from cx_traceability.core.config import get_settings
from cx_traceability.main import create_application
from cx_traceability.modules.validation.contract import load_contract
from cx_traceability.modules.validation.validator import OpenAPIRequestValidator

FIXTURES_DIR = Path(__file__).parent / "fixtures"
CONTRACT_PATH = FIXTURES_DIR / "quality-notifications.yaml"

_RECEIVE_PAYLOAD: dict[str, Any] = {
    "header": {
        "notificationId": "urn:uuid:3b6e3a1c-4a53-4bd5-9c52-8d4bb1b0f0d1",
        "senderBpn": "BPNL00000003AYRE",
        "senderAddress": "https://edc.sender.example/api/v1/dsp",
        "recipientBpn": "BPNL00000003B0Q0",
        "recipientAddress": "https://edc.recipient.example/api/v1/dsp",
        "classification": "QM-Investigation",
        "severity": "CRITICAL",
        "status": "SENT",
        "targetDate": "2026-12-01T12:00:00Z",
        "sentDateTime": "2026-10-01T08:30:00Z",
    },
    "content": {
        "information": "Brake pads of batch 42 show unexpected wear.",
        "listOfAffectedItems": [
            {
                "catenaXId": "urn:uuid:9f3c2a8e-2c1a-4a5c-8b7e-4e0a3d1f6b22",
                "orderedPartId": "BP-0042",
                "quantity": 12,
            }
        ],
    },
}

_UPDATE_PAYLOAD: dict[str, Any] = {
    "header": {
        **_RECEIVE_PAYLOAD["header"],
        "notificationId": "urn:uuid:7d1e0b52-61c4-4f0f-a8e1-5c0f7e2b9a44",
        "relatedNotificationId": "urn:uuid:3b6e3a1c-4a53-4bd5-9c52-8d4bb1b0f0d1",
        "status": "ACKNOWLEDGED",
    },
    "content": {"information": "Investigation acknowledged, analysis started."},
}


@pytest.fixture(autouse=True)
def ensure_test_contract_url(monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the settings at the bundled OpenAPI contract."""
    monkeypatch.setenv("OPENAPI_SPEC_URL", str(CONTRACT_PATH))
    monkeypatch.setenv("EDC_SETUP_ON_STARTUP", "false")
    get_settings.cache_clear()


@pytest.fixture
def contract() -> dict[str, Any]:
    return load_contract(str(CONTRACT_PATH))


@pytest.fixture
def validator(contract: dict[str, Any]) -> OpenAPIRequestValidator:
    return OpenAPIRequestValidator(contract)


@pytest.fixture
def receive_payload() -> dict[str, Any]:
    """A quality investigation notification that satisfies the receive schema."""
    return copy.deepcopy(_RECEIVE_PAYLOAD)


@pytest.fixture
def update_payload() -> dict[str, Any]:
    """A notification update that satisfies the update schema."""
    return copy.deepcopy(_UPDATE_PAYLOAD)


@pytest.fixture
def test_app(validator: OpenAPIRequestValidator) -> FastAPI:
    """Application with the contract validator installed (lifespan is not run)."""
    app = create_application()
    app.state.validator = validator
    return app


@pytest_asyncio.fixture
async def test_client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as client:
        yield client
