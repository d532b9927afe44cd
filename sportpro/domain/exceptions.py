"""
Domain exceptions - Semantic error types for accounts and activation.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
The HTTP layer maps each family onto a status code.
"""


class SportProError(Exception):
    """Base class for domain errors."""

    pass


class ValidationError(SportProError):
    """Malformed or rejected input, tied to a request field."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class EmailAlreadyInUse(ValidationError):
    """Another user already registered this email (case-insensitive)."""

    def __init__(self) -> None:
        super().__init__("email", "Email already in use")


class UsernameAlreadyInUse(ValidationError):
    """Another user already registered this username (case-insensitive)."""

    def __init__(self) -> None:
        super().__init__("username", "Username already in use")


class DuplicateActivationCode(ValidationError):
    """An activation code with the same string already exists."""

    def __init__(self) -> None:
        super().__init__("code", "Activation code already exists")


class AlreadyActivated(ValidationError):
    """The user already consumed an activation code."""

    def __init__(self) -> None:
        super().__init__("code", "Account already activated")


class InvalidCredentials(SportProError):
    """Unknown identifier or wrong password (indistinguishable)."""

    pass


class InvalidCode(SportProError):
    """Activation code unknown, already used, or malformed (indistinguishable)."""

    pass


class Unauthenticated(SportProError):
    """No live session for the request."""

    pass


class Forbidden(SportProError):
    """Session is valid but the account may not access the resource."""

    pass


class NotFound(SportProError):
    """Referenced entity does not exist."""

    pass


class StoreFailure(SportProError):
    """Underlying persistence failed or timed out."""

    pass
