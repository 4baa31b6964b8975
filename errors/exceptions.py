"""
Exception classes for the cookie session service.

The session core raises these at its inner boundaries (codec, cookie
primitives) and the orchestrator converts each of them into a degraded
outcome. None of them is ever rendered to the client.
"""

from typing import Any, Optional

from errors.codes import ErrorCode


class SessionError(Exception):
    """
    Base exception class for all session errors.
    
    Carries structured error information:
    - error_code: A standardized error code from the ErrorCode enum
    - message: A human-readable error message
    - details: Optional additional context (e.g., the underlying reason)
    """
    
    error_code: ErrorCode = ErrorCode.TOKEN_INVALID
    
    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ):
        """
        Initialize a SessionError.
        
        Args:
            message: A human-readable error message
            details: Optional dictionary with additional error context
        """
        self.message = message
        self.details = details
        super().__init__(message)
    
    def to_dict(self) -> dict[str, Any]:
        """
        Convert the exception to a dictionary for structured logging.
        
        Returns:
            Dictionary containing error_code, message, and details
        """
        result = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details is not None:
            result["details"] = self.details
        return result
    
    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(error_code={self.error_code.value!r}, "
            f"message={self.message!r}, details={self.details!r})"
        )


class InvalidTokenError(SessionError):
    """The session token failed parsing, header checks or signature verification."""
    
    error_code = ErrorCode.TOKEN_INVALID


class CookieMutationError(SessionError):
    """The response headers could not be changed to remove the session cookie."""
    
    error_code = ErrorCode.COOKIE_MUTATION_FAILED

