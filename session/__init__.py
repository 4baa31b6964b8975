"""
Stateless cookie session management.

Session state is not kept server-side: it is encoded into an HS512-signed
token and carried round-trip in a single cookie.
"""

from session.models import Session, FLASH_KEY
from session.keys import SigningKey, derive_key, get_signing_key, INSECURE_DEFAULT_SECRET
from session.codec import SessionCodec
from session.cookies import CookieOptions
from session.storage import CookieSessionStorage, create_cookie_session_storage
from session.context import get_session, start_session, drop_session
from session.orchestrator import SessionOrchestrator, SessionOutcome

__all__ = [
    "Session",
    "FLASH_KEY",
    "SigningKey",
    "derive_key",
    "get_signing_key",
    "INSECURE_DEFAULT_SECRET",
    "SessionCodec",
    "CookieOptions",
    "CookieSessionStorage",
    "create_cookie_session_storage",
    "get_session",
    "start_session",
    "drop_session",
    "SessionOrchestrator",
    "SessionOutcome",
]
