"""
Per-request session lifecycle.

States: NoSession -> Loaded -> HandlerRan -> Persisted | Dropped | PassThrough.

Every failure inside the lifecycle degrades to "no session": a missing,
malformed or tampered cookie never errors the request, and a cookie that
cannot be removed is left alone. Errors raised by the downstream handler
(including cancellation) propagate untouched and no cookie is written.
"""

import logging
from enum import Enum
from typing import Awaitable, Callable

from starlette.requests import Request
from starlette.responses import Response

from errors.codes import ErrorCode
from session.context import get_session, is_live
from session.storage import CookieSessionStorage
from telemetry.service import session_event

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]


class SessionOutcome(str, Enum):
    """Terminal state of one request's session lifecycle."""
    PASS_THROUGH = "pass_through"
    PERSISTED = "persisted"
    DROPPED = "dropped"


class SessionOrchestrator:
    """
    Attaches, refreshes or removes the session cookie around a handler call.
    """

    def __init__(self, storage: CookieSessionStorage):
        self.storage = storage

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        response, _ = await self.handle(request, call_next)
        return response

    async def handle(
        self, request: Request, call_next: CallNext
    ) -> tuple[Response, SessionOutcome]:
        """
        Run one request through the session lifecycle.

        Args:
            request: The incoming request
            call_next: Invokes the downstream handler and returns its response

        Returns:
            The (possibly cookie-bearing) response and the terminal state
        """
        request.state.session = None
        request.state.session_drop = False

        token = self.storage.token_from(request)
        if token is None:
            return await self._pass_through(request, call_next)

        if not self.storage.exists(token):
            logger.warning(
                "Invalid session token, creating new session...",
                extra=session_event(
                    ErrorCode.TOKEN_INVALID,
                    cookie=self.storage.cookie.name,
                    path=request.url.path,
                ),
            )
            return await self._pass_through(request, call_next)

        session = self.storage.get(token)
        session.rotate_flash()
        request.state.session = session

        response = await call_next(request)

        if is_live(request):
            return self.storage.persist(response, get_session(request)), SessionOutcome.PERSISTED

        request.state.session = None
        return self.storage.drop(response), SessionOutcome.DROPPED

    async def _pass_through(
        self, request: Request, call_next: CallNext
    ) -> tuple[Response, SessionOutcome]:
        response = await call_next(request)

        # A handler may start a session for a visitor that arrived without one
        if is_live(request):
            return self.storage.persist(response, get_session(request)), SessionOutcome.PERSISTED

        request.state.session = None
        return response, SessionOutcome.PASS_THROUGH
