"""
EDC Management API v3 client.

Persistent httpx.AsyncClient, dataclass config object, structured logging,
and explicit ``close()`` lifecycle. Responses are returned as-is: callers
decide how to treat non-2xx statuses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from cx_traceability.core.logging import get_logger
from cx_traceability.modules.connectors.edc.models import (
    ContractDefinition,
    EDCAsset,
    PolicyDefinition,
)

logger = get_logger(__name__)

ASSETS_PATH = "/v3/assets"
POLICY_DEFINITIONS_PATH = "/v3/policydefinitions"
CONTRACT_DEFINITIONS_PATH = "/v3/contractdefinitions"


@dataclass
class EDCConfig:
    """Configuration for connecting to a Tractus-X EDC controlplane."""

    management_url: str  # e.g. https://edc.example.net/management
    api_key: str = ""


class EDCManagementClient:
    """
    Client for the Tractus-X EDC Management API v3.

    Uses ``X-API-KEY`` header authentication; paths are appended to the
    configured management URL (``{management_url}/v3/...``).
    """

    def __init__(
        self,
        config: EDCConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    def _validate_config(self) -> None:
        base = (self._config.management_url or "").strip()
        if not base:
            raise ValueError("EDC management URL is required")
        self._config.management_url = base.rstrip("/")

    async def _get_client(self) -> httpx.AsyncClient:
        """Return (or lazily create) the authenticated HTTP client."""
        if self._http_client is None:
            self._validate_config()
            headers: dict[str, str] = {
                "Content-Type": "application/json",
                "X-API-KEY": self._config.api_key,
            }

            self._http_client = httpx.AsyncClient(
                base_url=self._config.management_url,
                headers=headers,
                transport=self._transport,
            )
        return self._http_client

    async def _post(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        client = await self._get_client()
        logger.info("edc_request_sent", url=f"{self._config.management_url}{path}")
        return await client.post(path, json=payload)

    # ------------------------------------------------------------------
    # Assets
    # ------------------------------------------------------------------

    async def create_asset(self, asset: EDCAsset) -> httpx.Response:
        """Register an asset in the EDC catalog."""
        logger.info("edc_creating_asset", asset_id=asset.asset_id)
        return await self._post(ASSETS_PATH, asset.to_edc_payload())

    # ------------------------------------------------------------------
    # Policies
    # ------------------------------------------------------------------

    async def create_policy(self, policy: PolicyDefinition) -> httpx.Response:
        """Register a policy definition."""
        logger.info("edc_creating_policy", policy_id=policy.policy_id)
        return await self._post(POLICY_DEFINITIONS_PATH, policy.to_edc_payload())

    # ------------------------------------------------------------------
    # Contract Definitions
    # ------------------------------------------------------------------

    async def create_contract_definition(self, contract: ContractDefinition) -> httpx.Response:
        """Register a contract definition linking assets to policies."""
        logger.info("edc_creating_contract_definition", contract_id=contract.contract_id)
        return await self._post(CONTRACT_DEFINITIONS_PATH, contract.to_edc_payload())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
