"""Application exception hierarchy.

All custom exceptions inherit from AskGPTError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "ASK-1000"
    CONFIGURATION_ERROR = "ASK-1001"
    VALIDATION_ERROR = "ASK-1002"

    # Transport errors (2xxx)
    CONNECTION_ERROR = "ASK-2000"
    TIMEOUT = "ASK-2001"

    # Protocol errors (3xxx)
    API_ERROR = "ASK-3000"
    AUTHENTICATION_FAILED = "ASK-3001"
    RATE_LIMITED = "ASK-3002"

    # Decoding errors (4xxx)
    INVALID_RESPONSE = "ASK-4000"


class AskGPTError(Exception):
    """Base exception for all askgpt errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a plain dictionary."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(AskGPTError):
    """Missing credential or invalid settings. Fatal at startup."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class RequestValidationError(AskGPTError):
    """The caller asked for a request the API cannot accept."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)


class TransportError(AskGPTError):
    """Network failure: connection refused, TLS failure, timeout."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONNECTION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class ProtocolError(AskGPTError):
    """The API answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.API_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class DecodingError(AskGPTError):
    """The response body is not valid JSON or does not match the schema."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.INVALID_RESPONSE, details)
