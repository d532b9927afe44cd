"""
Prediction domain service - premium-gated prediction reads.
"""

from dataclasses import dataclass

from .exceptions import Forbidden, NotFound
from .models import Prediction
from .ports import PredictionRepository, UserRepository


@dataclass
class PredictionService:
    """Serves predictions to activated users only."""

    users: UserRepository
    predictions: PredictionRepository

    def list_for(self, user_id: int) -> list[Prediction]:
        """
        List all predictions, newest first.

        Raises:
            Forbidden: user unknown or not activated
        """
        self._require_activated(user_id)
        return self.predictions.list_all()

    def get_for(self, user_id: int, prediction_id: int) -> Prediction:
        """
        Raises:
            Forbidden: user unknown or not activated
            NotFound: no prediction with this id
        """
        self._require_activated(user_id)
        prediction = self.predictions.find_by_id(prediction_id)
        if prediction is None:
            raise NotFound(f"prediction {prediction_id}")
        return prediction

    def _require_activated(self, user_id: int) -> None:
        user = self.users.find_by_id(user_id)
        if user is None or not user.is_activated:
            raise Forbidden("Account not activated")
