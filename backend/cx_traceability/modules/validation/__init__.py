"""OpenAPI contract loading and request-body validation."""

from cx_traceability.modules.validation.contract import ContractLoadError, load_contract
from cx_traceability.modules.validation.result import (
    ValidationError,
    ValidationResult,
    ValidationStatus,
)
from cx_traceability.modules.validation.validator import (
    HttpMethod,
    OpenAPIRequestValidator,
    OperationNotFoundError,
)

__all__ = [
    "ContractLoadError",
    "HttpMethod",
    "OpenAPIRequestValidator",
    "OperationNotFoundError",
    "ValidationError",
    "ValidationResult",
    "ValidationStatus",
    "load_contract",
]
