"""
Key Provider for session token signing.

Derives the HS512 signing key from the configured APP_KEY. When no secret is
configured a CONFIG_WARNING is logged and a fixed, publicly known placeholder
is used instead so that development setups keep working.
"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from config.settings import get_settings
from errors.codes import ErrorCode
from telemetry.service import session_event

logger = logging.getLogger(__name__)

SIGNING_ALGORITHM = "HS512"

# Publicly known; only ever used when APP_KEY is missing. Recent PyJWT
# releases also emit InsecureKeyLengthWarning on every sign and verify with
# it, since HS512 expects a key of at least 64 bytes. The same applies to any
# configured APP_KEY shorter than that.
INSECURE_DEFAULT_SECRET = "not-secret"


@dataclass(frozen=True)
class SigningKey:
    """HMAC key bound to a single signing algorithm."""

    secret: bytes = field(repr=False)
    algorithm: str = SIGNING_ALGORITHM
    insecure: bool = False


def derive_key(secret: Optional[str]) -> SigningKey:
    """
    Derive a signing key from a secret string.

    This never fails: a missing or blank secret falls back to
    INSECURE_DEFAULT_SECRET and logs a CONFIG_WARNING.

    Args:
        secret: The configured APP_KEY, or None when unset

    Returns:
        A SigningKey usable for both signing and verification
    """
    if not secret:
        logger.warning(
            "No APP_KEY configured; using an insecure default secret. "
            "Fix this before running in production.",
            extra=session_event(ErrorCode.CONFIG_WARNING, algorithm=SIGNING_ALGORITHM),
        )
        return SigningKey(
            secret=INSECURE_DEFAULT_SECRET.encode("utf-8"),
            insecure=True,
        )

    return SigningKey(secret=_secret_bytes(secret))


def _secret_bytes(secret: str) -> bytes:
    """
    Encode a secret as UTF-8 without ever failing.

    Environment values that are not valid UTF-8 reach Python as lone
    surrogates. surrogateescape turns those back into the original bytes;
    any other lone surrogate is kept as its three-byte encoding.
    """
    try:
        return secret.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        return secret.encode("utf-8", "surrogatepass")


@lru_cache(maxsize=1)
def get_signing_key() -> SigningKey:
    """
    Get the process-wide signing key derived from the application settings.

    The secret does not change at runtime, so the key is derived once.
    """
    return derive_key(get_settings().app_key)


def clear_signing_key_cache() -> None:
    """Forget the cached key; used by tests that change APP_KEY."""
    get_signing_key.cache_clear()
