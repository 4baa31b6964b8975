from typing import Any, Optional
import logging
from urllib.parse import urlsplit

from fastapi import Depends, FastAPI, Request
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from config.settings import Settings, validate_startup
from middleware.cookie_session import setup_cookie_session
from session import Session, drop_session, get_session, start_session
from telemetry.service import setup_logging

logger = logging.getLogger(__name__)


class LoginRequest(BaseModel):
    user_id: str
    preferences: dict[str, Any] = {}


class FlashRequest(BaseModel):
    key: str
    value: Any


def safe_redirect_target(to: str, allowed_origins: list[str]) -> str:
    """
    Return ``to`` when it stays on this site or goes to an allowed origin.

    Anything else, including scheme-relative ``//host`` forms and
    backslash or control-character tricks, falls back to ``/``.
    """
    if "\\" in to or any(ord(ch) < 0x20 for ch in to):
        return "/"
    parts = urlsplit(to)
    if not parts.scheme and not parts.netloc:
        return to if to.startswith("/") and not to.startswith("//") else "/"
    origin = f"{parts.scheme}://{parts.netloc}".lower()
    if origin in {allowed.lower() for allowed in allowed_origins}:
        return to
    return "/"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application with cookie sessions enabled.

    Args:
        settings: Explicit settings; loaded from the environment when omitted
    """
    if settings is None:
        settings = validate_startup()
        setup_logging(settings)

    app = FastAPI(title="Cookie Session API", version="1.0.0")
    setup_cookie_session(app, settings=settings)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.post("/session/login")
    async def login(body: LoginRequest, request: Request):
        session = start_session(request)
        session.set("user_id", body.user_id)
        session.set("preferences", body.preferences)
        session.flash("notice", f"Welcome, {body.user_id}")
        logger.info("Session started", extra={"extra_data": {"user_id": body.user_id}})
        return {"user_id": body.user_id}

    @app.get("/session")
    async def read_session(session: Optional[Session] = Depends(get_session)):
        if session is None:
            return {"authenticated": False, "data": {}, "notice": None}
        return {
            "authenticated": True,
            "data": session.data,
            "notice": session.flash("notice"),
        }

    @app.post("/session/data")
    async def update_session(body: FlashRequest, session: Optional[Session] = Depends(get_session)):
        if session is None:
            return {"updated": False}
        session.set(body.key, body.value)
        return {"updated": True}

    @app.post("/session/flash")
    async def flash(body: FlashRequest, session: Optional[Session] = Depends(get_session)):
        if session is None:
            return {"flashed": False}
        session.flash(body.key, body.value)
        return {"flashed": True}

    @app.post("/session/logout")
    async def logout(request: Request):
        drop_session(request)
        return {"logged_out": True}

    @app.get("/session/logout/redirect")
    async def logout_redirect(request: Request, to: str = "/"):
        drop_session(request)
        target = safe_redirect_target(to, settings.logout_redirect_origins)
        if target != to:
            logger.warning("Rejected logout redirect target", extra={"extra_data": {"to": to}})
        return RedirectResponse(url=target, status_code=303)

    return app


if __name__ == "__main__":
    import os
    import uvicorn

    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(create_app(), host="0.0.0.0", port=port, log_level="info")
