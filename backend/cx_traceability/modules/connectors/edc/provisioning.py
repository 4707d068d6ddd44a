"""
Registration of the traceability notification offer with an EDC.

Runs the full sequence against the management API:
  1. Create one asset per notification kind
  2. Create the shared traceability policy
  3. Create one contract definition per asset

Calls are made one after another and never retried. Every response is
logged; a transport failure stops the remaining steps. Whether a re-run
is idempotent is up to the connector.
"""

from __future__ import annotations

import httpx

from cx_traceability.core.config import Settings
from cx_traceability.core.logging import get_logger
from cx_traceability.modules.connectors.edc.asset_mapper import (
    TRACEABILITY_OFFERS,
    NotificationOffer,
    map_offer_to_contract_definition,
    map_offer_to_edc_asset,
)
from cx_traceability.modules.connectors.edc.client import EDCConfig, EDCManagementClient
from cx_traceability.modules.connectors.edc.models import (
    ProvisioningReport,
    ProvisioningStep,
    StepKind,
)
from cx_traceability.modules.connectors.edc.policy_builder import (
    TRACEABILITY_POLICY_ID,
    build_traceability_policy,
)

logger = get_logger(__name__)


class EDCProvisioningService:
    """Registers this service's notification endpoints as a dataspace offer."""

    def __init__(
        self,
        client: EDCManagementClient,
        *,
        base_url: str,
        api_key: str,
        api_prefix: str = "/api/traceability",
        offers: tuple[NotificationOffer, ...] = TRACEABILITY_OFFERS,
    ) -> None:
        self._client = client
        self._base_url = base_url
        self._api_key = api_key
        self._api_prefix = api_prefix
        self._offers = offers

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> EDCProvisioningService:
        client = EDCManagementClient(
            EDCConfig(
                management_url=settings.edc_management_url,
                api_key=settings.edc_management_api_key,
            ),
            transport=transport,
        )
        return cls(
            client,
            base_url=settings.base_url,
            api_key=settings.api_key,
            api_prefix=settings.api_prefix,
        )

    async def setup_traceability_offer(self) -> ProvisioningReport:
        """
        Register assets, policy and contract definitions.

        Returns:
            A ``ProvisioningReport`` with the calls that were made and, if the
            sequence was aborted, the reason.
        """
        logger.info("edc_offer_setup_started", offer_count=len(self._offers))
        steps: list[ProvisioningStep] = []

        try:
            for offer in self._offers:
                asset = map_offer_to_edc_asset(
                    offer,
                    base_url=self._base_url,
                    api_prefix=self._api_prefix,
                    api_key=self._api_key,
                )
                response = await self._client.create_asset(asset)
                steps.append(self._record("asset", asset.asset_id, response))

            policy = build_traceability_policy(TRACEABILITY_POLICY_ID)
            response = await self._client.create_policy(policy)
            steps.append(self._record("policy", policy.policy_id, response))

            for offer in self._offers:
                contract = map_offer_to_contract_definition(offer)
                response = await self._client.create_contract_definition(contract)
                steps.append(self._record("contract_definition", contract.contract_id, response))

        except httpx.TransportError as exc:
            logger.error(
                "edc_offer_setup_io_error",
                error=str(exc),
                completed_steps=len(steps),
                exc_info=True,
            )
            return ProvisioningReport(status="error", steps=steps, error_message=str(exc))
        except Exception as exc:
            logger.error(
                "edc_offer_setup_unexpected_error",
                error=str(exc),
                completed_steps=len(steps),
                exc_info=True,
            )
            return ProvisioningReport(status="error", steps=steps, error_message=str(exc))
        finally:
            await self._client.close()

        logger.info("edc_offer_setup_finished", completed_steps=len(steps))
        return ProvisioningReport(status="success", steps=steps)

    @staticmethod
    def _record(kind: StepKind, resource_id: str, response: httpx.Response) -> ProvisioningStep:
        log = logger.info if response.is_success else logger.warning
        log(
            f"edc_{kind}_response",
            resource_id=resource_id,
            status_code=response.status_code,
            body=response.text,
        )
        return ProvisioningStep(kind=kind, resource_id=resource_id, status_code=response.status_code)
