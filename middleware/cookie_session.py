"""
Cookie session middleware.

Wraps every HTTP request in the session lifecycle: the session cookie is
verified and decoded into ``request.state.session`` before the route runs,
and afterwards the cookie is re-signed, removed, or left alone depending on
what the route did with the session.
"""

import logging
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from config.settings import Settings
from session.orchestrator import SessionOrchestrator
from session.storage import CookieSessionStorage

logger = logging.getLogger(__name__)


class CookieSessionMiddleware(BaseHTTPMiddleware):
    """
    Middleware that manages the signed session cookie for each request.
    
    For each request:
    1. No session cookie: the route runs without a session
    2. Invalid session cookie: a warning is logged and the route runs without a session
    3. Valid session cookie: the decoded session is stored in request.state.session
    4. After the route returns, a live session is re-signed into the cookie and a
       dropped session has its cookie removed
    """
    
    def __init__(
        self,
        app: ASGIApp,
        storage: Optional[CookieSessionStorage] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the middleware.
        
        Args:
            app: The ASGI application to wrap
            storage: Storage to use; built from ``settings`` when omitted
            settings: Settings for the signing key and cookie attributes
        """
        super().__init__(app)
        self.storage = storage or CookieSessionStorage.from_settings(settings)
        self.orchestrator = SessionOrchestrator(self.storage)
        
        logger.info(
            "Cookie session middleware initialized",
            extra={"extra_data": {
                "cookie_name": self.storage.cookie.name,
                "cookie_path": self.storage.cookie.path,
            }}
        )
    
    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        return await self.orchestrator(request, call_next)


def setup_cookie_session(
    app,
    storage: Optional[CookieSessionStorage] = None,
    settings: Optional[Settings] = None,
) -> None:
    """
    Configure cookie session middleware for a FastAPI application.
    
    Args:
        app: The FastAPI application instance
        storage: Storage to use; built from ``settings`` when omitted
        settings: Settings for the signing key and cookie attributes
    """
    app.add_middleware(
        CookieSessionMiddleware,
        storage=storage,
        settings=settings,
    )
