"""
Quality notification endpoints.

Catena-X partners deliver quality investigation and alert notifications
through their connector. Each body is checked against the OpenAPI contract;
the response carries only a status code.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response, status

from cx_traceability.core.logging import get_logger

from .dependencies import NotificationValidator

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/receive",
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_400_BAD_REQUEST: {"description": "Body violates the contract"}},
)
async def receive_quality_notification(
    request: Request,
    validator: NotificationValidator,
) -> Response:
    """Receive a new quality investigation or alert notification."""
    body = await request.body()
    result = validator.validate_receive(body)
    logger.info("quality_notification_received", valid=result.is_valid)
    return Response(
        status_code=status.HTTP_201_CREATED if result.is_valid else status.HTTP_400_BAD_REQUEST
    )


@router.post(
    "/update",
    status_code=status.HTTP_200_OK,
    responses={status.HTTP_400_BAD_REQUEST: {"description": "Body violates the contract"}},
)
async def update_quality_notification(
    request: Request,
    validator: NotificationValidator,
) -> Response:
    """Receive a status update for a previously sent quality notification."""
    body = await request.body()
    result = validator.validate_update(body)
    logger.info("quality_notification_updated", valid=result.is_valid)
    return Response(
        status_code=status.HTTP_200_OK if result.is_valid else status.HTTP_400_BAD_REQUEST
    )
