"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Every user-visible failure is one of these; none of them is fatal.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ConfigurationError(ApplicationError):
    """Raised when required configuration (e.g. the AI credential) is missing."""

    def __init__(self, message: str = "Configuration error") -> None:
        super().__init__(message, code="CFG_MISSING_CREDENTIAL")


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class ExternalServiceError(ApplicationError):
    """Raised when an external service call fails."""

    def __init__(
        self,
        message: str = "External service error",
        code: str = "SYS_EXTERNAL_SERVICE_ERROR",
    ) -> None:
        super().__init__(message, code=code)


class MalformedAIOutputError(ExternalServiceError):
    """Raised when the AI service answers with content that cannot be parsed."""

    def __init__(self, message: str = "Malformed AI output") -> None:
        super().__init__(message, code="AI_MALFORMED_OUTPUT")


class StorageError(ApplicationError):
    """Raised when the local store cannot be written."""

    def __init__(self, message: str = "Storage error") -> None:
        super().__init__(message, code="SYS_STORAGE_ERROR")
