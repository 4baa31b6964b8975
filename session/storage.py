"""
Cookie-backed session storage.

There is no server-side table: "storing" a session means signing it into the
response's session cookie and "loading" it means verifying and decoding the
request's cookie.
"""

import logging
from typing import Optional

from starlette.requests import HTTPConnection
from starlette.responses import Response

from config.settings import Settings, get_settings
from errors.codes import ErrorCode
from errors.exceptions import CookieMutationError
from session.codec import SessionCodec
from session.cookies import CookieOptions, delete_cookie, get_cookie_value, set_cookie
from session.keys import SigningKey, derive_key, get_signing_key
from session.models import Session
from telemetry.service import session_event

logger = logging.getLogger(__name__)


class CookieSessionStorage:
    """
    Loads sessions from and persists them to the session cookie.
    """

    def __init__(self, codec: SessionCodec, cookie: Optional[CookieOptions] = None):
        self.codec = codec
        self.cookie = cookie or CookieOptions()

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        key: Optional[SigningKey] = None,
    ) -> "CookieSessionStorage":
        """
        Build a storage from explicit settings, or from the cached application settings.

        Args:
            settings: Settings to read APP_KEY and cookie attributes from
            key: Pre-derived signing key; derived from ``settings`` when omitted
        """
        if settings is None:
            settings = get_settings()
            key = key or get_signing_key()
        if key is None:
            key = derive_key(settings.app_key)
        return cls(SessionCodec(key), CookieOptions.from_settings(settings))

    def create(self) -> Session:
        return Session()

    def token_from(self, request: HTTPConnection) -> Optional[str]:
        return get_cookie_value(request, self.cookie.name)

    def exists(self, token: str) -> bool:
        """Check whether a cookie value carries a valid session token."""
        return self.codec.verify(token)

    def get(self, token: str) -> Session:
        """
        Decode a session token.

        Raises:
            InvalidTokenError: If the token does not verify.
        """
        return self.codec.decode(token)

    def persist(self, response: Response, session: Session) -> Response:
        """Sign the session into a fresh cookie on the response."""
        set_cookie(response, self.codec.encode(session), self.cookie)
        return response

    def drop(self, response: Response) -> Response:
        """
        Remove the session cookie from the response, best-effort.

        Responses with immutable headers (typically redirects to another
        origin) keep their headers untouched. The browser does not send this
        cookie to a foreign origin, so leaving it in place there is harmless.
        """
        try:
            delete_cookie(response, self.cookie)
        except CookieMutationError as exc:
            logger.debug(
                "Session cookie left in place; response headers are immutable",
                extra=session_event(ErrorCode.COOKIE_MUTATION_FAILED, **(exc.details or {})),
            )
        return response


def create_cookie_session_storage(settings: Optional[Settings] = None) -> CookieSessionStorage:
    return CookieSessionStorage.from_settings(settings)
