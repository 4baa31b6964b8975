"""
Error handling module for the cookie session service.

This module provides:
- ErrorCode enum for standardized error and warning codes
- SessionError and its subclasses raised by the codec and cookie primitives
"""

from errors.codes import ErrorCode
from errors.exceptions import (
    SessionError,
    InvalidTokenError,
    CookieMutationError,
)

__all__ = [
    "ErrorCode",
    "SessionError",
    "InvalidTokenError",
    "CookieMutationError",
]
