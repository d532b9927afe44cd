"""
Activation domain service - single-use premium code redemption.

Redemption Rules
================

- A code is consumed at most once: unused -> used, never reverted.
- Consuming a code and activating its claimant is one atomic unit,
  performed by the repository inside a single transaction.
- Unknown and already-used codes are reported identically (InvalidCode)
  so callers cannot discover which codes exist.
- A user is activated by at most one code; an activated user cannot
  burn another code.
"""

import logging
import secrets
from dataclasses import dataclass

from .exceptions import (
    AlreadyActivated,
    DuplicateActivationCode,
    InvalidCode,
    NotFound,
    ValidationError,
)
from .models import ActivationCode
from .ports import ActivationCodeRepository, RedeemResult, UserRepository

logger = logging.getLogger(__name__)

# No 0/O or 1/I to keep hand-typed codes unambiguous
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 10
MAX_GENERATION_ATTEMPTS = 5
# Longer input is never a code we issued
MAX_CODE_LENGTH = 128


@dataclass
class ActivationService:
    """
    Domain service for premium activation.

    Orchestrates code redemption, activation status reads and
    administrative code issuance.
    """

    users: UserRepository
    codes: ActivationCodeRepository

    def redeem(self, user_id: int, code: str) -> None:
        """
        Redeem an activation code on behalf of an authenticated user.

        Args:
            user_id: Id of the session's user
            code: Activation code as typed by the user (exact match)

        Raises:
            InvalidCode: code empty, over-long, unknown or already used
            AlreadyActivated: user already activated, code left unused
            NotFound: user_id does not reference a user
        """
        if not code or not code.strip() or len(code) > MAX_CODE_LENGTH:
            raise InvalidCode()

        result = self.codes.redeem(code, user_id)

        if result == RedeemResult.SUCCESS:
            logger.info("Activation code redeemed by user %s", user_id)
            return
        if result == RedeemResult.USER_NOT_FOUND:
            logger.warning("Redemption for unknown user %s", user_id)
            raise NotFound(f"user {user_id}")
        if result == RedeemResult.ALREADY_ACTIVATED:
            raise AlreadyActivated()

        logger.info("Rejected activation code for user %s", user_id)
        raise InvalidCode()

    def get_activation_status(self, user_id: int) -> bool:
        """
        Read the user's activation flag.

        Raises:
            NotFound: user_id does not reference a user
        """
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFound(f"user {user_id}")
        return user.is_activated

    def issue_code(self, code: str | None = None) -> ActivationCode:
        """
        Create a new unused activation code.

        Args:
            code: Explicit code string, or None to generate one

        Raises:
            DuplicateActivationCode: explicit code already exists
        """
        if code is not None:
            if not code.strip():
                raise ValidationError("code", "Activation code is required")
            issued = self.codes.insert(code.strip())
            logger.info("Issued activation code id=%s", issued.id)
            return issued

        for _ in range(MAX_GENERATION_ATTEMPTS):
            try:
                issued = self.codes.insert(self._generate_code())
            except DuplicateActivationCode:
                continue
            logger.info("Issued activation code id=%s", issued.id)
            return issued
        raise DuplicateActivationCode()

    def _generate_code(self) -> str:
        """Generate a random code using the secrets module."""
        return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
