"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from sportpro.domain.auth import MAX_PASSWORD_BYTES


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    email: EmailStr
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=6, description="User password (min 6 characters)")
    confirm_password: str = Field(..., description="Must equal password")
    phone_number: str = Field(..., min_length=1, max_length=32)

    @field_validator("username", "phone_number", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode()) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    message: str
    user_id: int


class LoginRequest(BaseModel):
    """Request model for login with email or username."""

    identifier: str = Field(..., min_length=1, description="Email or username")
    password: str = Field(..., min_length=1)


class UserSummary(BaseModel):
    id: int
    username: str
    email: str
    is_activated: bool


class LoginResponse(BaseModel):
    """Response model for successful login."""

    message: str
    session_token: str
    expires_at: datetime
    user: UserSummary


class SessionUser(BaseModel):
    user_id: int
    username: str


class AuthCheckResponse(BaseModel):
    """Response model for anonymous-safe session check."""

    is_authenticated: bool
    user: SessionUser | None = None


class UserProfile(BaseModel):
    """Full profile of the session's user."""

    id: int
    username: str
    email: str
    phone_number: str
    is_activated: bool
    created_at: datetime


class ActivateRequest(BaseModel):
    """Request model for activation code redemption."""

    code: str = Field(..., description="Activation code")


class ActivationStatusResponse(BaseModel):
    is_activated: bool


class PredictionResponse(BaseModel):
    id: int
    match: str
    league: str
    prediction: str
    multiplier: str
    time: str
    status: str
    created_at: datetime


class IssueCodeRequest(BaseModel):
    """Request model for issuing an activation code; omit code to generate one."""

    code: str | None = Field(None, min_length=1, max_length=128)


class IssueCodeResponse(BaseModel):
    code: str


class MessageResponse(BaseModel):
    message: str


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str


class ValidationErrorResponse(BaseModel):
    """Error response carrying per-field detail."""

    detail: str
    errors: list[FieldError]
