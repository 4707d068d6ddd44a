"""
Map the notification endpoints of this service to EDC assets and contracts.

Each quality notification kind (investigation/alert x receive/update) is
offered as its own asset whose DataAddress points at the matching endpoint;
the connector forwards consumer calls there with the service API key.
"""

from __future__ import annotations

from dataclasses import dataclass

from cx_traceability.modules.connectors.edc.models import (
    AssetCriterion,
    ContractDefinition,
    DataAddress,
    EDCAsset,
)
from cx_traceability.modules.connectors.edc.policy_builder import TRACEABILITY_POLICY_ID

NOTIFICATIONS_ROUTE = "/qualitynotifications"
ASSET_DESCRIPTION = "CAC test asset"
CX_COMMON_VERSION = "1.2"


@dataclass(frozen=True)
class NotificationOffer:
    """One notification asset together with the contract definition offering it."""

    asset_id: str
    endpoint: str  # "receive" | "update"
    dct_type: str
    contract_id: str


TRACEABILITY_OFFERS: tuple[NotificationOffer, ...] = (
    NotificationOffer(
        asset_id="qualityinvestigationnotification-receive",
        endpoint="receive",
        dct_type="cx-taxo:ReceiveQualityInvestigationNotification",
        contract_id="investigation-receive-contract-definition",
    ),
    NotificationOffer(
        asset_id="qualityalertnotification-receipt",
        endpoint="receive",
        dct_type="cx-taxo:ReceiveQualityAlertNotification",
        contract_id="alert-receive-contract-definition",
    ),
    NotificationOffer(
        asset_id="qualityinvestigationnotification-update",
        endpoint="update",
        dct_type="cx-taxo:UpdateQualityInvestigationNotification",
        contract_id="investigation-update-contract-definition",
    ),
    NotificationOffer(
        asset_id="qualityalertnotification-update",
        endpoint="update",
        dct_type="cx-taxo:UpdateQualityAlertNotification",
        contract_id="alert-update-contract-definition",
    ),
)


def notification_endpoint_url(base_url: str, api_prefix: str, endpoint: str) -> str:
    """Absolute URL of a notification endpoint, e.g. ``…/qualitynotifications/receive``."""
    base = base_url.rstrip("/")
    prefix = "/" + api_prefix.strip("/") if api_prefix.strip("/") else ""
    return f"{base}{prefix}{NOTIFICATIONS_ROUTE}/{endpoint}"


def map_offer_to_edc_asset(
    offer: NotificationOffer,
    *,
    base_url: str,
    api_prefix: str,
    api_key: str,
    policy_id: str = TRACEABILITY_POLICY_ID,
) -> EDCAsset:
    """
    Build the EDC asset for one notification offer.

    Args:
        offer: The notification kind to register.
        base_url: Public base URL of this service.
        api_prefix: Route prefix the notification router is mounted under.
        api_key: Key the connector must send when proxying to this service.
        policy_id: Policy announced in the asset properties.

    Returns:
        An ``EDCAsset`` ready to be created via the management API.
    """
    data_address = DataAddress(
        type="HttpData",
        base_url=notification_endpoint_url(base_url, api_prefix, offer.endpoint),
        method="POST",
        proxy_method=True,
        proxy_body=True,
    )

    return EDCAsset(
        asset_id=offer.asset_id,
        properties={
            "policy-id": policy_id,
            "dct:type": {"@id": offer.dct_type},
            "description": ASSET_DESCRIPTION,
            "contenttype": "application/json",
            "cx-common:version": CX_COMMON_VERSION,
        },
        private_properties={"header:X-API-KEY": api_key},
        data_address=data_address,
    )


def map_offer_to_contract_definition(
    offer: NotificationOffer,
    *,
    policy_id: str = TRACEABILITY_POLICY_ID,
) -> ContractDefinition:
    """Contract definition selecting the offer's asset by id under ``policy_id``."""
    return ContractDefinition(
        contract_id=offer.contract_id,
        access_policy_id=policy_id,
        contract_policy_id=policy_id,
        assets_selector=AssetCriterion(operand_right=offer.asset_id),
    )
