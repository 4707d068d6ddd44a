"""
Loading of the OpenAPI contract that request bodies are validated against.

The document is fetched once at startup, parsed (JSON or YAML) and checked for
structural validity. Failures raise ``ContractLoadError``; the application
treats them as fatal.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

import httpx
import yaml
from openapi_spec_validator import validate as validate_openapi_document

from cx_traceability.core.logging import get_logger

logger = get_logger(__name__)


class ContractLoadError(RuntimeError):
    """The OpenAPI document could not be fetched, parsed or validated."""


def load_contract(url: str, *, client: httpx.Client | None = None) -> dict[str, Any]:
    """
    Fetch, parse and structurally validate an OpenAPI document.

    Args:
        url: ``http(s)://`` URL, ``file://`` URL or plain filesystem path.
        client: Optional synchronous httpx client used for remote documents.

    Returns:
        The parsed document.

    Raises:
        ContractLoadError: if any of the steps fails.
    """
    if not url or not url.strip():
        raise ContractLoadError("OpenAPI contract URL is not configured")

    raw = _read_document(url.strip(), client)
    document = parse_contract(raw, source=url)

    logger.info(
        "openapi_contract_loaded",
        source=url,
        openapi_version=document.get("openapi"),
        path_count=len(document.get("paths") or {}),
    )
    return document


def parse_contract(raw: str | bytes, *, source: str = "<memory>") -> dict[str, Any]:
    """Parse a JSON or YAML OpenAPI document and check its structure."""
    try:
        document = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ContractLoadError(f"OpenAPI document at {source} is not valid JSON/YAML: {exc}") from exc

    if not isinstance(document, Mapping):
        raise ContractLoadError(f"Expected OpenAPI mapping at {source}")

    document = dict(document)
    try:
        validate_openapi_document(document)
    except Exception as exc:
        raise ContractLoadError(f"OpenAPI document at {source} failed validation: {exc}") from exc

    return document


def _read_document(url: str, client: httpx.Client | None) -> bytes:
    parsed = urlparse(url)

    if parsed.scheme in ("http", "https"):
        return _fetch_remote(url, client)

    if parsed.scheme == "file":
        path = Path(unquote(parsed.path))
    elif parsed.scheme == "":
        path = Path(url)
    else:
        raise ContractLoadError(f"Unsupported OpenAPI contract URL scheme: {parsed.scheme}")

    try:
        return path.read_bytes()
    except OSError as exc:
        raise ContractLoadError(f"Cannot read OpenAPI document {path}: {exc}") from exc


def _fetch_remote(url: str, client: httpx.Client | None) -> bytes:
    owns_client = client is None
    http_client = client if client is not None else httpx.Client(follow_redirects=True)
    try:
        response = http_client.get(url)
        response.raise_for_status()
        return response.content
    except httpx.HTTPError as exc:
        raise ContractLoadError(f"Cannot fetch OpenAPI document from {url}: {exc}") from exc
    finally:
        if owns_client:
            http_client.close()
