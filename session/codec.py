"""
Session Codec: signed-token encoding of session state.

A session travels as a compact HS512 JWT whose payload is the session's
``data`` spread at the top level plus the reserved ``_flash`` field holding
the outgoing flash mapping. The token provides integrity and authenticity
only; the payload is readable by anyone holding the cookie.

The payload is signed as opaque JSON bytes at the JWS layer. Field names
that happen to be registered JWT claims ("exp", "iss", "aud", ...) are plain
session data and are never interpreted or validated as claims.
"""

import json
import logging
from typing import Any

import jwt
from jwt import api_jws

from errors.exceptions import InvalidTokenError
from session.keys import SigningKey
from session.models import FLASH_KEY, Session

logger = logging.getLogger(__name__)

TOKEN_TYPE = "JWT"


class SessionCodec:
    """
    Turns sessions into signed tokens and back.

    The codec owns the signing key; callers never see it. All operations are
    pure functions of (payload, key) and safe to call concurrently.
    """

    def __init__(self, key: SigningKey):
        self._key = key

    def encode(self, session: Session) -> str:
        """
        Serialize and sign a session.

        Args:
            session: The session to encode

        Returns:
            The compact signed token
        """
        payload = {**session.data, FLASH_KEY: session.flashed_data}
        return api_jws.encode(
            json.dumps(payload, separators=(",", ":")).encode("utf-8"),
            self._key.secret,
            algorithm=self._key.algorithm,
            headers={"typ": TOKEN_TYPE},
        )

    def decode(self, token: str) -> Session:
        """
        Verify a token and rebuild the session it carries.

        Args:
            token: The compact signed token from the session cookie

        Returns:
            A new Session with ``_flash`` split out into its flash mapping

        Raises:
            InvalidTokenError: If the token is malformed, its header is not
                one this codec issues, or its signature does not verify.
        """
        payload = self._verified_payload(token)
        flashed = payload.pop(FLASH_KEY, None)
        if not isinstance(flashed, dict):
            flashed = {}
        return Session(payload, flashed)

    def verify(self, token: str) -> bool:
        """
        Check whether a token is currently valid without building a session.

        Args:
            token: The compact signed token from the session cookie

        Returns:
            True if decode() would succeed
        """
        try:
            self._verified_payload(token)
        except InvalidTokenError as exc:
            logger.debug(
                "Session token failed verification",
                extra={"extra_data": exc.to_dict()},
            )
            return False
        return True

    def _verified_payload(self, token: str) -> dict[str, Any]:
        if not isinstance(token, str) or not token:
            raise InvalidTokenError("Session token is empty")

        try:
            header = jwt.get_unverified_header(token)
            if header.get("typ") != TOKEN_TYPE:
                raise InvalidTokenError(
                    "Unexpected token type",
                    details={"typ": header.get("typ")},
                )
            raw = api_jws.decode(
                token,
                self._key.secret,
                algorithms=[self._key.algorithm],
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError(
                "Invalid session token",
                details={"reason": type(exc).__name__},
            ) from exc

        try:
            payload = json.loads(raw)
        except ValueError as exc:
            raise InvalidTokenError(
                "Session token payload is not valid JSON",
                details={"reason": type(exc).__name__},
            ) from exc

        if not isinstance(payload, dict):
            raise InvalidTokenError("Session token payload is not an object")
        return payload
