"""
Pydantic models for the Tractus-X EDC Management API v3 payloads.

These models map to the JSON-LD structures used by the EDC management
endpoints. Field names use snake_case locally and are serialized
to the EDC-expected format via ``to_edc_payload()``.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

EDC_NAMESPACE = "https://w3id.org/edc/v0.0.1/ns/"
ODRL_NAMESPACE = "http://www.w3.org/ns/odrl/2/"
CX_POLICY_NAMESPACE = "https://w3id.org/catenax/policy/"
CX_COMMON_NAMESPACE = "https://w3id.org/catenax/ontology/common#"
CX_TAXONOMY_NAMESPACE = "https://w3id.org/catenax/taxonomy#"
DCT_NAMESPACE = "http://purl.org/dc/terms/"


def _flag(value: bool) -> str:
    return str(value).lower()


# ---------------------------------------------------------------------------
# Data Address
# ---------------------------------------------------------------------------


class DataAddress(BaseModel):
    """EDC DataAddress pointing at one of this service's notification endpoints."""

    type: str = "HttpData"
    base_url: str
    method: str = "POST"
    proxy_method: bool = True
    proxy_body: bool = True

    def to_edc_payload(self) -> dict[str, Any]:
        return {
            "@type": "DataAddress",
            "method": self.method,
            "type": self.type,
            "baseUrl": self.base_url,
            "proxyMethod": _flag(self.proxy_method),
            "proxyBody": _flag(self.proxy_body),
        }


# ---------------------------------------------------------------------------
# Asset
# ---------------------------------------------------------------------------


class EDCAsset(BaseModel):
    """EDC Asset with DataAddress and private (provider-only) properties."""

    asset_id: str
    properties: dict[str, Any] = Field(default_factory=dict)
    private_properties: dict[str, Any] = Field(default_factory=dict)
    data_address: DataAddress

    def to_edc_payload(self) -> dict[str, Any]:
        """Serialize to EDC Management API v3 create-asset request body."""
        return {
            "@context": {
                "@vocab": EDC_NAMESPACE,
                "cx-common": CX_COMMON_NAMESPACE,
                "cx-taxo": CX_TAXONOMY_NAMESPACE,
                "dct": DCT_NAMESPACE,
            },
            "@type": "Asset",
            "@id": self.asset_id,
            "dataAddress": self.data_address.to_edc_payload(),
            "properties": self.properties,
            "privateProperties": self.private_properties,
        }


# ---------------------------------------------------------------------------
# ODRL Policy
# ---------------------------------------------------------------------------


class ODRLConstraint(BaseModel):
    """Single ODRL constraint (left operand / operator / right operand)."""

    left_operand: str
    operator: str = "eq"
    right_operand: str

    def to_edc_payload(self) -> dict[str, Any]:
        return {
            "odrl:leftOperand": self.left_operand,
            "odrl:operator": {"@id": f"odrl:{self.operator}"},
            "odrl:rightOperand": self.right_operand,
        }


class ODRLPermission(BaseModel):
    """ODRL permission whose constraints are combined with ``odrl:and``."""

    action: str = "use"
    constraints: list[ODRLConstraint] = Field(default_factory=list)

    def to_edc_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "odrl:action": {"odrl:type": {"@id": f"{ODRL_NAMESPACE}{self.action}"}},
        }
        if self.constraints:
            payload["odrl:constraint"] = {
                "odrl:and": [c.to_edc_payload() for c in self.constraints],
            }
        return payload


class ODRLPolicy(BaseModel):
    """ODRL policy expression."""

    permissions: list[ODRLPermission] = Field(default_factory=list)
    prohibitions: list[dict[str, Any]] = Field(default_factory=list)
    obligations: list[dict[str, Any]] = Field(default_factory=list)

    def to_edc_payload(self) -> dict[str, Any]:
        permissions = [p.to_edc_payload() for p in self.permissions]
        return {
            "@type": "odrl:Set",
            "odrl:permission": permissions[0] if len(permissions) == 1 else permissions,
            "prohibition": self.prohibitions,
            "obligation": self.obligations,
        }


# ---------------------------------------------------------------------------
# Policy Definition
# ---------------------------------------------------------------------------


class PolicyDefinition(BaseModel):
    """ODRL policy wrapper registered with EDC."""

    policy_id: str
    policy: ODRLPolicy

    def to_edc_payload(self) -> dict[str, Any]:
        return {
            "@context": {
                "@vocab": EDC_NAMESPACE,
                "odrl": ODRL_NAMESPACE,
                "cx-policy": CX_POLICY_NAMESPACE,
            },
            "@id": self.policy_id,
            "policy": self.policy.to_edc_payload(),
        }


# ---------------------------------------------------------------------------
# Contract Definition
# ---------------------------------------------------------------------------


class AssetCriterion(BaseModel):
    """Asset selector criterion (``CriterionDto``)."""

    operand_left: str = f"{EDC_NAMESPACE}id"
    operator: str = "="
    operand_right: str

    def to_edc_payload(self) -> dict[str, Any]:
        return {
            "@type": "CriterionDto",
            "operandLeft": self.operand_left,
            "operator": self.operator,
            "operandRight": self.operand_right,
        }


class ContractDefinition(BaseModel):
    """Links assets to access and contract policies."""

    contract_id: str
    access_policy_id: str
    contract_policy_id: str
    assets_selector: AssetCriterion

    def to_edc_payload(self) -> dict[str, Any]:
        return {
            "@context": {"@vocab": EDC_NAMESPACE},
            "@id": self.contract_id,
            "accessPolicyId": self.access_policy_id,
            "contractPolicyId": self.contract_policy_id,
            "assetsSelector": self.assets_selector.to_edc_payload(),
        }


# ---------------------------------------------------------------------------
# Provisioning report (returned by the provisioning service)
# ---------------------------------------------------------------------------


StepKind = Literal["asset", "policy", "contract_definition"]


class ProvisioningStep(BaseModel):
    """One management API call made while registering the offer."""

    kind: StepKind
    resource_id: str
    status_code: int


class ProvisioningReport(BaseModel):
    """Result of registering the traceability offer with the connector."""

    status: str  # "success" | "error"
    steps: list[ProvisioningStep] = Field(default_factory=list)
    error_message: str | None = None
