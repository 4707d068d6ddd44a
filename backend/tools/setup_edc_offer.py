"""Register the traceability notification offer with the configured EDC."""

from __future__ import annotations

import argparse
import asyncio
import json

from cx_traceability.core.config import get_settings
from cx_traceability.core.logging import configure_logging
from cx_traceability.modules.connectors.edc.provisioning import EDCProvisioningService


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create notification assets, policy and contract definitions in the EDC."
    )
    parser.add_argument(
        "--management-url",
        help="Override EDC_MANAGEMENT_URL for this run.",
    )
    parser.add_argument(
        "--base-url",
        help="Override BASE_URL (public URL of this service) for this run.",
    )
    return parser.parse_args()


async def _main() -> int:
    args = _parse_args()

    overrides: dict[str, str] = {}
    if args.management_url:
        overrides["edc_management_url"] = args.management_url
    if args.base_url:
        overrides["base_url"] = args.base_url
    settings = get_settings().model_copy(update=overrides)
    configure_logging(settings)

    report = await EDCProvisioningService.from_settings(settings).setup_traceability_offer()
    print(json.dumps(report.model_dump(), indent=2))
    return 0 if report.status == "success" else 1


if __name__ == "__main__":
    raise SystemExit(asyncio.run(_main()))
