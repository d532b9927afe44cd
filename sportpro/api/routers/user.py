"""
User routes - Premium activation.
"""

from fastapi import APIRouter, Depends

from sportpro.api.dependencies import get_activation_service, get_current_identity
from sportpro.api.models import (
    ActivateRequest,
    ActivationStatusResponse,
    ErrorResponse,
    MessageResponse,
)
from sportpro.domain.activation import ActivationService
from sportpro.domain.models import Identity

router = APIRouter(prefix="/user", tags=["user"])


@router.post(
    "/activate",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid activation code"},
        401: {"model": ErrorResponse, "description": "Authentication required"},
    },
    summary="Redeem an activation code",
)
async def activate(
    request_data: ActivateRequest,
    identity: Identity = Depends(get_current_identity),
    service: ActivationService = Depends(get_activation_service),
) -> MessageResponse:
    """
    Redeem a single-use activation code for the session's user.

    Unknown, used and malformed codes all return the same 400 response.
    """
    service.redeem(identity.user_id, request_data.code)
    return MessageResponse(message="Account activated successfully")


@router.get(
    "/activation-status",
    response_model=ActivationStatusResponse,
    responses={401: {"model": ErrorResponse, "description": "Authentication required"}},
    summary="Activation status of the session's user",
)
async def activation_status(
    identity: Identity = Depends(get_current_identity),
    service: ActivationService = Depends(get_activation_service),
) -> ActivationStatusResponse:
    return ActivationStatusResponse(
        is_activated=service.get_activation_status(identity.user_id)
    )
