"""
CardGuard exceptions.
"""


class CardGuardError(Exception):
    """Base exception for all CardGuard errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(CardGuardError):
    """Raised when the Gemini credential is missing."""
    pass


class TransportError(CardGuardError):
    """Raised when the remote call fails or returns a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict | None = None
    ):
        super().__init__(message, details)
        self.status_code = status_code


class InvalidResponseError(CardGuardError):
    """Raised when the reply lacks the generated text."""
    pass


class VerdictDecodeError(CardGuardError):
    """Raised when the generated text holds no usable JSON verdict."""
    pass
