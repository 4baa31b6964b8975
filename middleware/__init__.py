"""
Middleware components for the cookie session service.
"""

from middleware.cookie_session import CookieSessionMiddleware, setup_cookie_session

__all__ = [
    "CookieSessionMiddleware",
    "setup_cookie_session",
]
