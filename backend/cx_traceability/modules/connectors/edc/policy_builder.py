"""
ODRL policy generation for the traceability notification offer.

Consumers must have signed the Catena-X traceability framework agreement and
declare the industry-core usage purpose.
"""

from __future__ import annotations

from cx_traceability.modules.connectors.edc.models import (
    ODRLConstraint,
    ODRLPermission,
    ODRLPolicy,
    PolicyDefinition,
)

TRACEABILITY_POLICY_ID = "traceability-policy"

FRAMEWORK_AGREEMENT = "traceability:1.0"
USAGE_PURPOSE = "cx.core.industrycore:1"


def build_traceability_policy(policy_id: str = TRACEABILITY_POLICY_ID) -> PolicyDefinition:
    """
    Build the access/usage policy shared by all notification assets.

    Args:
        policy_id: Identifier of the policy definition.

    Returns:
        A ``PolicyDefinition`` ready for EDC registration.
    """
    permission = ODRLPermission(
        action="use",
        constraints=[
            ODRLConstraint(
                left_operand="cx-policy:FrameworkAgreement",
                operator="eq",
                right_operand=FRAMEWORK_AGREEMENT,
            ),
            ODRLConstraint(
                left_operand="cx-policy:UsagePurpose",
                operator="eq",
                right_operand=USAGE_PURPOSE,
            ),
        ],
    )

    return PolicyDefinition(policy_id=policy_id, policy=ODRLPolicy(permissions=[permission]))
