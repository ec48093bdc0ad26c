"""Domain errors raised by the auth and note services.

The HTTP layer maps each class to a status code in ``main.py``; services never
build HTTP responses themselves.
"""


class DomainError(Exception):
    """Base class for business errors."""

    detail = "Request failed"

    def __init__(self, detail=None):
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class DuplicateAccount(DomainError):
    """Signup with an email that is already registered."""

    detail = "User already exists"


class AuthenticationError(DomainError):
    """Caller could not be authenticated."""

    detail = "Could not validate credentials"


class InvalidCredentials(AuthenticationError):
    """Unknown email or wrong password. The two cases are never told apart."""

    detail = "Invalid credentials"


class MissingToken(AuthenticationError):
    detail = "Not authenticated"


class InvalidToken(AuthenticationError):
    """Malformed, wrongly signed, or expired token."""


class UnknownUser(AuthenticationError):
    """Token is valid but its subject no longer resolves to a user."""


class ValidationFailure(DomainError):
    """Input outside the accepted values."""

    detail = "Invalid request"


class NoteNotFound(DomainError):
    """Note is absent or owned by someone else."""

    detail = "Note not found"
