"""
Outcome of validating a request body against an OpenAPI operation.

A result is one of three variants: valid, invalid (with one diagnostic per
schema violation) or error (the validation itself could not be carried out,
e.g. an unknown endpoint or an unparseable body).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Self

UNKNOWN_LOCATION = "unknown"


class ValidationStatus(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    ERROR = "error"


@dataclass(frozen=True)
class ValidationError:
    """A single schema violation found in a request body."""

    path: str
    message: str
    schema_location: str

    def __str__(self) -> str:
        return (
            f"ValidationError[path='{self.path}', message='{self.message}', "
            f"schema_location='{self.schema_location}']"
        )


@dataclass(frozen=True)
class ValidationResult:
    """Immutable result of a single validation call."""

    status: ValidationStatus
    errors: tuple[ValidationError, ...] = field(default_factory=tuple)
    error_message: str | None = None

    @classmethod
    def success(cls) -> Self:
        return cls(status=ValidationStatus.VALID)

    @classmethod
    def failure(cls, errors: Iterable[ValidationError]) -> Self:
        """Build an invalid result from the violations reported by the schema engine."""
        return cls(
            status=ValidationStatus.INVALID,
            errors=tuple(errors),
            error_message="Validation failed",
        )

    @classmethod
    def error(cls, message: str) -> Self:
        """Build a result for a validation that could not be performed."""
        return cls(status=ValidationStatus.ERROR, error_message=message)

    @property
    def is_valid(self) -> bool:
        return self.status is ValidationStatus.VALID

    @property
    def has_errors(self) -> bool:
        return not self.is_valid

    def if_valid(self, action: Callable[[], object]) -> Self:
        """Run ``action`` when the body is valid; returns ``self`` for chaining."""
        if self.is_valid:
            action()
        return self

    def if_invalid(self, action: Callable[[Sequence[ValidationError]], object]) -> Self:
        """Run ``action`` with the diagnostics when the body is not valid."""
        if not self.is_valid:
            action(self.errors)
        return self

    def or_raise(self, exception_factory: Callable[[ValidationResult], BaseException]) -> Self:
        """Raise the exception built by ``exception_factory`` unless the body is valid."""
        if not self.is_valid:
            raise exception_factory(self)
        return self

    @property
    def first_error_message(self) -> str | None:
        if self.errors:
            return self.errors[0].message
        return self.error_message

    @property
    def error_summary(self) -> str:
        """Human-readable multi-line summary for logs."""
        if self.is_valid:
            return "No errors"

        if self.error_message is not None and not self.errors:
            return self.error_message

        lines = [f"Validation failed with {len(self.errors)} error(s):\n"]
        lines.extend(f"  - {error.path}: {error.message}\n" for error in self.errors)
        return "".join(lines)
