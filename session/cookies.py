"""
Cookie read/write primitives for the session cookie.

Thin wrappers over Starlette's request cookies and response cookie helpers,
parameterized by the cookie attributes from the settings.
"""

from dataclasses import dataclass
from typing import Optional

from starlette.requests import HTTPConnection
from starlette.responses import Response

from errors.exceptions import CookieMutationError


@dataclass(frozen=True)
class CookieOptions:
    """Attributes applied to the outgoing session cookie."""

    name: str = "sessionId"
    path: str = "/"
    httponly: bool = True
    secure: bool = False
    samesite: str = "lax"

    @classmethod
    def from_settings(cls, settings) -> "CookieOptions":
        return cls(
            name=settings.session_cookie_name,
            path=settings.session_cookie_path,
            httponly=settings.session_cookie_httponly,
            secure=settings.session_cookie_secure,
            samesite=settings.session_cookie_samesite,
        )


def get_cookie_value(request: HTTPConnection, name: str) -> Optional[str]:
    """Return the cookie value from the request, or None if absent or empty."""
    return request.cookies.get(name) or None


def set_cookie(response: Response, value: str, options: CookieOptions) -> None:
    """Set or overwrite the session cookie on the response."""
    response.set_cookie(
        key=options.name,
        value=value,
        path=options.path,
        httponly=options.httponly,
        secure=options.secure,
        samesite=options.samesite,
    )


def delete_cookie(response: Response, options: CookieOptions) -> None:
    """
    Remove the session cookie by sending an expired replacement.

    Raises:
        CookieMutationError: If the response headers cannot be modified.
    """
    try:
        response.delete_cookie(
            key=options.name,
            path=options.path,
            httponly=options.httponly,
            secure=options.secure,
            samesite=options.samesite,
        )
    except (AttributeError, TypeError, RuntimeError) as exc:
        raise CookieMutationError(
            "Could not remove the session cookie",
            details={"cookie": options.name, "reason": type(exc).__name__},
        ) from exc
