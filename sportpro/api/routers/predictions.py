"""
Prediction routes - Premium content for activated users.
"""

from fastapi import APIRouter, Depends

from sportpro.api.dependencies import get_current_identity, get_prediction_service
from sportpro.api.models import ErrorResponse, PredictionResponse
from sportpro.domain.models import Identity, Prediction
from sportpro.domain.predictions import PredictionService

router = APIRouter(prefix="/predictions", tags=["predictions"])

_gated_responses = {
    401: {"model": ErrorResponse, "description": "Authentication required"},
    403: {"model": ErrorResponse, "description": "Account not activated"},
}


def _to_response(prediction: Prediction) -> PredictionResponse:
    return PredictionResponse(
        id=prediction.id,
        match=prediction.match,
        league=prediction.league,
        prediction=prediction.prediction,
        multiplier=prediction.multiplier,
        time=prediction.time,
        status=prediction.status,
        created_at=prediction.created_at,
    )


@router.get(
    "",
    response_model=list[PredictionResponse],
    responses=_gated_responses,
    summary="List predictions",
)
async def list_predictions(
    identity: Identity = Depends(get_current_identity),
    service: PredictionService = Depends(get_prediction_service),
) -> list[PredictionResponse]:
    return [_to_response(p) for p in service.list_for(identity.user_id)]


@router.get(
    "/{prediction_id}",
    response_model=PredictionResponse,
    responses={**_gated_responses, 404: {"model": ErrorResponse, "description": "Not found"}},
    summary="Get a prediction",
)
async def get_prediction(
    prediction_id: int,
    identity: Identity = Depends(get_current_identity),
    service: PredictionService = Depends(get_prediction_service),
) -> PredictionResponse:
    return _to_response(service.get_for(identity.user_id, prediction_id))
