"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class SourceError(AppError):
    """Raised by a feed source when a fetch fails in transport or parsing."""

    def __init__(self, resource: str, reason: str):
        self.resource = resource
        super().__init__(f"Failed to load {resource}: {reason}", code="SOURCE_ERROR")


class EventDecodeError(AppError):
    """Raised when a push-event payload cannot be decoded."""

    def __init__(self, reason: str):
        super().__init__(f"Malformed event payload: {reason}", code="EVENT_DECODE_ERROR")
