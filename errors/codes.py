"""
Error code catalog for the cookie session service.

Every failure in the session core is absorbed and degraded to "no session",
so these codes never become HTTP status codes. They are attached to log
records as the ``event`` field so operators can filter and alert on them.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """
    Enumeration of all error and warning codes emitted by the session core.
    """
    
    # Configuration
    CONFIG_WARNING = "CONFIG_WARNING"
    """No APP_KEY configured; an insecure, publicly known secret is in use"""
    
    # Token handling
    TOKEN_INVALID = "TOKEN_INVALID"
    """Session cookie is malformed, unsigned, tampered or uses the wrong algorithm"""
    
    # Cookie handling
    COOKIE_MUTATION_FAILED = "COOKIE_MUTATION_FAILED"
    """Session cookie could not be removed because the response headers are immutable"""

