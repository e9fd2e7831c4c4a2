"""Errors raised by the token and session layer."""


class ProgressError(Exception):
    """Base error carrying the HTTP status and a public message."""

    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)
        self.public_message = message or self.public_message


class MalformedRequestError(ProgressError):
    status_code = 400
    public_message = "Missing required fields"


class UnauthorizedError(ProgressError):
    status_code = 401
    public_message = "Invalid token"


class SessionNotFoundError(ProgressError):
    status_code = 404
    public_message = "Session not found"


class InvalidTransitionError(ProgressError):
    status_code = 400
    public_message = "Invalid step progression"


class PrematureCompletionError(ProgressError):
    status_code = 400
    public_message = "Experience not fully completed"


class EncodingError(ProgressError):
    """Raised when token claims cannot be serialized."""

    public_message = "Token signing failed"
