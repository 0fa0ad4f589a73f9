"""Core exceptions for the shim.

Every error the shim reports to a client is a :class:`ProxyError`. Each
subclass carries the HTTP status and the machine-readable ``code`` that the
top-level exception handlers put in the uniform error body.
"""

from typing import Any, Optional


class ProxyError(Exception):
    """Base exception for shim errors."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code

    def to_payload(self) -> dict[str, Any]:
        """Render the OpenAI-style error body."""
        return {
            "error": {
                "message": self.message,
                "type": self.code,
                "code": self.code,
            }
        }


class InvalidParameterError(ProxyError):
    """Raised when the chat request is malformed (e.g. no messages)."""

    status_code = 400
    code = "invalid_parameter"


class ModelNotSupportedError(ProxyError):
    """Raised when a requested model is not in the model map."""

    status_code = 400
    code = "model_not_found"


class AuthenticationError(ProxyError):
    """Raised when the caller's API key is missing or unknown."""

    status_code = 401
    code = "invalid_api_key"


class NotFoundError(ProxyError):
    """Raised for unmatched routes."""

    status_code = 404
    code = "not_found"


class PayloadTooLargeError(ProxyError):
    """Raised when the request body exceeds the configured size cap."""

    status_code = 413
    code = "payload_too_large"


class BackendError(ProxyError):
    """Raised when the inference backend could not produce a response."""

    status_code = 500
    code = "backend_error"

    def __init__(self, message: str, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.detail = detail


class InternalError(ProxyError):
    """Raised for any failure the shim cannot classify."""

    status_code = 500
    code = "internal_error"


class ConfigurationError(ProxyError):
    """Raised when there's an issue with the configuration."""
    pass
