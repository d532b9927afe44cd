"""
Admin routes - Activation code issuance.
"""

from fastapi import APIRouter, Body, Depends, status

from sportpro.api.dependencies import get_activation_service, require_admin
from sportpro.api.models import (
    ErrorResponse,
    IssueCodeRequest,
    IssueCodeResponse,
    ValidationErrorResponse,
)
from sportpro.domain.activation import ActivationService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.post(
    "/activation-codes",
    response_model=IssueCodeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ValidationErrorResponse, "description": "Code already exists"},
        403: {"model": ErrorResponse, "description": "Admin token required"},
    },
    summary="Issue an activation code",
)
async def issue_activation_code(
    request_data: IssueCodeRequest | None = Body(None),
    service: ActivationService = Depends(get_activation_service),
) -> IssueCodeResponse:
    """Create a single-use code; a random 10-character code is generated when none is given."""
    code = request_data.code if request_data is not None else None
    issued = service.issue_code(code)
    return IssueCodeResponse(code=issued.code)
