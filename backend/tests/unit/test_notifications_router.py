"""Unit tests for the quality notification endpoints."""

from __future__ import annotations

import json
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from cx_traceability.core.config import get_settings
from cx_traceability.main import create_application, lifespan
from cx_traceability.modules.validation.contract import ContractLoadError
from cx_traceability.modules.validation.validator import OpenAPIRequestValidator

RECEIVE_URL = "/api/traceability/qualitynotifications/receive"
UPDATE_URL = "/api/traceability/qualitynotifications/update"


class TestReceiveEndpoint:
    @pytest.mark.asyncio
    async def test_conformant_payload_returns_201(
        self, test_client: AsyncClient, receive_payload: dict[str, Any]
    ) -> None:
        response = await test_client.post(RECEIVE_URL, json=receive_payload)

        assert response.status_code == 201
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_empty_object_returns_400(self, test_client: AsyncClient) -> None:
        response = await test_client.post(RECEIVE_URL, json={})

        assert response.status_code == 400
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_missing_notification_id_returns_400(
        self, test_client: AsyncClient, receive_payload: dict[str, Any]
    ) -> None:
        del receive_payload["header"]["notificationId"]

        response = await test_client.post(RECEIVE_URL, json=receive_payload)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_malformed_json_returns_400(self, test_client: AsyncClient) -> None:
        response = await test_client.post(
            RECEIVE_URL,
            content=b'{"header": ',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_missing_content_type_still_validates_body(
        self, test_client: AsyncClient, receive_payload: dict[str, Any]
    ) -> None:
        valid = await test_client.post(RECEIVE_URL, content=json.dumps(receive_payload).encode())
        invalid = await test_client.post(RECEIVE_URL, content=b"{}")

        assert "content-type" not in valid.request.headers
        assert valid.status_code == 201
        assert invalid.status_code == 400

    @pytest.mark.asyncio
    async def test_update_payload_is_rejected_by_receive(
        self, test_client: AsyncClient, update_payload: dict[str, Any]
    ) -> None:
        # Update content carries no affected items, which receive requires
        response = await test_client.post(RECEIVE_URL, json=update_payload)

        assert response.status_code == 400


class TestUpdateEndpoint:
    @pytest.mark.asyncio
    async def test_conformant_payload_returns_200(
        self, test_client: AsyncClient, update_payload: dict[str, Any]
    ) -> None:
        response = await test_client.post(UPDATE_URL, json=update_payload)

        assert response.status_code == 200
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_invalid_payload_returns_400(
        self, test_client: AsyncClient, update_payload: dict[str, Any]
    ) -> None:
        update_payload["content"]["information"] = 42

        response = await test_client.post(UPDATE_URL, json=update_payload)

        assert response.status_code == 400


class TestMisconfiguredContract:
    @pytest.mark.asyncio
    async def test_missing_operation_maps_to_400(
        self, test_app: FastAPI, test_client: AsyncClient, receive_payload: dict[str, Any]
    ) -> None:
        test_app.state.validator = OpenAPIRequestValidator(
            {"openapi": "3.0.3", "info": {"title": "empty", "version": "1"}, "paths": {}}
        )

        response = await test_client.post(RECEIVE_URL, json=receive_payload)

        assert response.status_code == 400


class TestApplication:
    @pytest.mark.asyncio
    async def test_health(self, test_client: AsyncClient) -> None:
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_lifespan_loads_contract(self) -> None:
        app = create_application()

        async with lifespan(app):
            assert isinstance(app.state.validator, OpenAPIRequestValidator)

    @pytest.mark.asyncio
    async def test_lifespan_fails_fast_on_bad_contract(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OPENAPI_SPEC_URL", "/nonexistent/quality-notifications.yaml")
        get_settings.cache_clear()
        app = create_application()

        with pytest.raises(ContractLoadError):
            async with lifespan(app):
                pass
