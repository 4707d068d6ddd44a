"""
Request-body validation against an OpenAPI contract.

``OpenAPIRequestValidator`` resolves an operation (path + HTTP method) in the
loaded contract, compiles a validator for its ``application/json`` request
body in the schema dialect of the contract's OpenAPI version (3.0 or 3.1)
and reports schema violations as a ``ValidationResult``.
Compiled validators are cached per ``(method, path)``; the contract is never
mutated after construction, so cache entries are never invalidated.
"""

from __future__ import annotations

import json
import threading
from collections.abc import Mapping
from enum import Enum
from typing import Any

import httpx
from jsonschema.exceptions import ValidationError as SchemaViolation
from jsonschema.protocols import Validator
from openapi_schema_validator import OAS30Validator, OAS31Validator
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT202012

from cx_traceability.core.logging import get_logger
from cx_traceability.modules.validation.contract import load_contract
from cx_traceability.modules.validation.result import (
    UNKNOWN_LOCATION,
    ValidationError,
    ValidationResult,
)

logger = get_logger(__name__)

RECEIVE_PATH = "/qualitynotifications/receive"
UPDATE_PATH = "/qualitynotifications/update"

JSON_CONTENT_TYPE = "application/json"

# Base URI the contract is registered under so that "#/components/..." refs
# inside operation schemas resolve against the whole document.
CONTRACT_URI = "urn:cx-traceability:openapi-contract"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class OperationNotFoundError(LookupError):
    """The contract declares no usable operation for a (method, path) pair."""


class OpenAPIRequestValidator:
    """
    Validates JSON request bodies against the operations of an OpenAPI contract.

    Safe to share between concurrent requests: the contract is read-only and
    the validator cache is filled under a lock, so each ``(method, path)``
    key is compiled exactly once.
    """

    def __init__(self, contract: Mapping[str, Any]) -> None:
        self._contract = contract
        self._registry: Registry[Any] = Registry().with_resource(
            CONTRACT_URI,
            Resource.from_contents(contract, default_specification=DRAFT202012),
        )
        self._validator_class = _schema_validator_class(contract)
        self._validators: dict[tuple[str, str], Validator] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_url(cls, url: str, *, client: httpx.Client | None = None) -> OpenAPIRequestValidator:
        """Load the contract from ``url`` and build a validator for it."""
        validator = cls(load_contract(url, client=client))
        logger.info("openapi_validator_initialized", source=url)
        return validator

    @property
    def contract(self) -> Mapping[str, Any]:
        return self._contract

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(
        self,
        path_pattern: str,
        method: HttpMethod | str,
        body: Any,
    ) -> ValidationResult:
        """
        Validate a request body against the operation at ``method path_pattern``.

        Args:
            path_pattern: Path exactly as declared in the contract,
                e.g. ``/qualitynotifications/receive``.
            method: HTTP method of the operation.
            body: Raw JSON text (``bytes``/``str``) or an already decoded
                JSON value.

        Returns:
            ``Valid`` when the body conforms, ``Invalid`` with one diagnostic
            per schema violation, or ``Error`` when validation could not be
            performed (unknown operation, unparseable body, engine fault).
        """
        method_name = method.value if isinstance(method, HttpMethod) else method
        try:
            validator = self.get_operation_validator(path_pattern, method_name)
            payload = _decode_payload(_serialize_body(body))

            errors = [_to_validation_error(v) for v in validator.iter_errors(payload)]
            if errors:
                result = ValidationResult.failure(errors)
                logger.warning(
                    "notification_validation_failed",
                    method=method_name,
                    path=path_pattern,
                    errors=[str(error) for error in errors],
                )
                return result

            logger.debug("notification_validation_succeeded", method=method_name, path=path_pattern)
            return ValidationResult.success()

        except OperationNotFoundError as exc:
            logger.error(
                "openapi_operation_not_found",
                method=method_name,
                path=path_pattern,
                error=str(exc),
            )
            return ValidationResult.error(f"Validation error: {exc}")
        except Exception as exc:
            logger.exception(
                "notification_validation_error",
                method=method_name,
                path=path_pattern,
                error=str(exc),
            )
            return ValidationResult.error(f"Validation error: {exc}")

    def validate_receive(self, body: Any) -> ValidationResult:
        """Validate a body sent to ``POST /qualitynotifications/receive``."""
        return self.validate(RECEIVE_PATH, HttpMethod.POST, body)

    def validate_update(self, body: Any) -> ValidationResult:
        """Validate a body sent to ``POST /qualitynotifications/update``."""
        return self.validate(UPDATE_PATH, HttpMethod.POST, body)

    # ------------------------------------------------------------------
    # Validator cache
    # ------------------------------------------------------------------

    def get_operation_validator(self, path_pattern: str, method: str) -> Validator:
        """Return the cached validator for ``(method, path_pattern)``, compiling it once."""
        key = (method, path_pattern)
        validator = self._validators.get(key)
        if validator is not None:
            return validator

        with self._lock:
            validator = self._validators.get(key)
            if validator is None:
                validator = self._build_operation_validator(path_pattern, method)
                self._validators[key] = validator
                logger.debug("openapi_operation_validator_compiled", method=method, path=path_pattern)
        return validator

    def _build_operation_validator(self, path_pattern: str, method: str) -> Validator:
        pointer = self._request_schema_pointer(path_pattern, method)
        schema = {"$ref": f"{CONTRACT_URI}#{pointer}"}
        return self._validator_class(
            schema,
            registry=self._registry,
            format_checker=self._validator_class.FORMAT_CHECKER,
        )

    def _request_schema_pointer(self, path_pattern: str, method: str) -> str:
        """Locate the JSON request-body schema of an operation as a JSON pointer."""
        paths = self._contract.get("paths") or {}
        path_item = paths.get(path_pattern)
        if path_item is None:
            raise OperationNotFoundError(f"Path not found in OpenAPI spec: {path_pattern}")

        if method not in HttpMethod.__members__:
            raise OperationNotFoundError(f"Unsupported HTTP method: {method}")

        operation = path_item.get(method.lower())
        if operation is None:
            raise OperationNotFoundError(f"Operation not found for {method} {path_pattern}")

        pointer = f"/paths/{_escape(path_pattern)}/{method.lower()}/requestBody"
        request_body = operation.get("requestBody")
        if isinstance(request_body, Mapping) and "$ref" in request_body:
            ref = str(request_body["$ref"])
            if not ref.startswith("#/"):
                raise OperationNotFoundError(f"Unsupported requestBody reference: {ref}")
            pointer = ref[1:]
            request_body = self._registry.resolver(base_uri=CONTRACT_URI).lookup(ref).contents

        content = (request_body or {}).get("content") or {}
        media_type = _json_media_type(content)
        if media_type is None or "schema" not in content[media_type]:
            raise OperationNotFoundError(
                f"No {JSON_CONTENT_TYPE} request body declared for {method} {path_pattern}"
            )

        return f"{pointer}/content/{_escape(media_type)}/schema"


def _schema_validator_class(contract: Mapping[str, Any]) -> type[Validator]:
    """Pick the schema dialect declared by the contract's ``openapi`` version."""
    version = str(contract.get("openapi", ""))
    if version.startswith("3.0"):
        return OAS30Validator
    return OAS31Validator


def _json_media_type(content: Mapping[str, Any]) -> str | None:
    if JSON_CONTENT_TYPE in content:
        return JSON_CONTENT_TYPE
    for media_type in content:
        essence = media_type.split(";", 1)[0].strip().lower()
        if essence == JSON_CONTENT_TYPE or essence.endswith("+json"):
            return media_type
    return None


def _serialize_body(body: Any) -> str | bytes:
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    if isinstance(body, str):
        return body
    return json.dumps(body)


def _decode_payload(payload: str | bytes) -> Any:
    return json.loads(payload)


def _escape(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def _to_pointer(parts: Any) -> str:
    return "/" + "/".join(_escape(str(part)) for part in parts)


def _to_validation_error(violation: SchemaViolation) -> ValidationError:
    instance_path = violation.absolute_path
    schema_path = violation.absolute_schema_path
    return ValidationError(
        path=_to_pointer(instance_path) if instance_path is not None else UNKNOWN_LOCATION,
        message=violation.message,
        schema_location=_to_pointer(schema_path) if schema_path else UNKNOWN_LOCATION,
    )
