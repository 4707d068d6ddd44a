"""FastAPI dependencies for the quality notification endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from cx_traceability.modules.validation.validator import OpenAPIRequestValidator


def get_validator(request: Request) -> OpenAPIRequestValidator:
    """Return the validator created during application startup."""
    validator: OpenAPIRequestValidator = request.app.state.validator
    return validator


NotificationValidator = Annotated[OpenAPIRequestValidator, Depends(get_validator)]
