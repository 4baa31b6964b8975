"""
Request-scoped session slot.

Handlers drive the persist/drop decision through ``request.state``:

- ``request.state.session``: the live Session, or None
- ``request.state.session_drop``: True once the handler asked to drop it
"""

from typing import Optional

from starlette.requests import HTTPConnection

from session.models import Session


def get_session(request: HTTPConnection) -> Optional[Session]:
    """Return the session attached to the request, if any."""
    session = getattr(request.state, "session", None)
    return session if isinstance(session, Session) else None


def start_session(request: HTTPConnection) -> Session:
    """
    Return the request's session, attaching a new empty one if there is none.

    A session started this way is persisted when the handler returns.
    """
    session = get_session(request)
    if session is None or session.destroyed:
        session = Session()
        request.state.session = session
    request.state.session_drop = False
    return session


def drop_session(request: HTTPConnection) -> None:
    """Clear the session; its cookie is removed from the response."""
    request.state.session = None
    request.state.session_drop = True


def is_live(request: HTTPConnection) -> bool:
    """True if the request still carries a session that should be persisted."""
    session = get_session(request)
    if session is None or session.destroyed:
        return False
    return not getattr(request.state, "session_drop", False)
