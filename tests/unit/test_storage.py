"""
Unit tests for CookieSessionStorage and the cookie primitives.
"""

import logging

import pytest
from starlette.requests import Request
from starlette.responses import PlainTextResponse, RedirectResponse

from config.settings import Settings
from errors.codes import ErrorCode
from errors.exceptions import CookieMutationError
from session.cookies import CookieOptions, delete_cookie, get_cookie_value, set_cookie
from session.keys import derive_key
from session.models import Session
from session.storage import CookieSessionStorage


def make_request(cookie_header: str = "") -> Request:
    headers = [(b"cookie", cookie_header.encode("latin-1"))] if cookie_header else []
    return Request({
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("testserver", 80),
        "path": "/",
        "root_path": "",
        "query_string": b"",
        "headers": headers,
    })


def set_cookie_headers(response) -> list[str]:
    return response.headers.getlist("set-cookie")


def freeze_headers(response):
    """Make the response headers immutable, as some redirect responses are."""
    response.raw_headers = tuple(response.raw_headers)
    return response


class TestCookiePrimitives:
    """Tests for reading, setting and deleting the session cookie."""

    def test_get_cookie_value(self):
        request = make_request("other=1; sessionId=abc")

        assert get_cookie_value(request, "sessionId") == "abc"
        assert get_cookie_value(request, "missing") is None

    def test_empty_cookie_value_is_absent(self):
        assert get_cookie_value(make_request("sessionId="), "sessionId") is None

    def test_set_cookie_uses_site_wide_path(self):
        response = PlainTextResponse("ok")

        set_cookie(response, "token-value", CookieOptions())

        [header] = set_cookie_headers(response)
        assert header.startswith("sessionId=token-value;")
        assert "Path=/" in header
        assert "HttpOnly" in header
        assert "SameSite=lax" in header

    def test_delete_cookie_expires_it(self):
        response = PlainTextResponse("ok")

        delete_cookie(response, CookieOptions())

        [header] = set_cookie_headers(response)
        assert header.startswith('sessionId="";') or header.startswith("sessionId=;")
        assert "Max-Age=0" in header
        assert "Path=/" in header

    def test_delete_cookie_on_immutable_headers_raises(self):
        response = freeze_headers(RedirectResponse("https://elsewhere.example/"))

        with pytest.raises(CookieMutationError) as exc_info:
            delete_cookie(response, CookieOptions())

        assert exc_info.value.error_code == ErrorCode.COOKIE_MUTATION_FAILED


class TestCookieSessionStorage:
    """Tests for the storage operations."""

    def test_from_settings_uses_cookie_attributes(self):
        settings = Settings(
            app_key="k",
            session_cookie_name="sid",
            session_cookie_secure=True,
            session_cookie_samesite="strict",
            _env_file=None,
        )

        storage = CookieSessionStorage.from_settings(settings)

        assert storage.cookie == CookieOptions(
            name="sid", path="/", httponly=True, secure=True, samesite="strict"
        )

    def test_from_settings_accepts_explicit_key(self, app_settings):
        other = CookieSessionStorage.from_settings(app_settings, key=derive_key("other"))
        storage = CookieSessionStorage.from_settings(app_settings)

        token = other.codec.encode(Session({"a": 1}))

        assert other.exists(token)
        assert not storage.exists(token)

    def test_create_returns_empty_session(self, storage):
        assert storage.create() == Session()

    def test_persist_then_get(self, storage):
        response = PlainTextResponse("ok")
        session = Session({"user_id": "u-1"})

        storage.persist(response, session)

        [header] = set_cookie_headers(response)
        token = header.split(";", 1)[0].split("=", 1)[1]
        assert storage.exists(token)
        assert storage.get(token).data == {"user_id": "u-1"}

    def test_token_from_request(self, storage):
        request = make_request("sessionId=tok")

        assert storage.token_from(request) == "tok"

    def test_drop_removes_cookie(self, storage):
        response = storage.drop(PlainTextResponse("ok"))

        [header] = set_cookie_headers(response)
        assert "Max-Age=0" in header

    def test_drop_on_immutable_response_is_a_logged_no_op(self, storage, caplog):
        response = freeze_headers(RedirectResponse("https://elsewhere.example/"))

        with caplog.at_level(logging.DEBUG, logger="session.storage"):
            result = storage.drop(response)

        assert result is response
        assert set_cookie_headers(result) == []
        events = [getattr(r, "extra_data", {}).get("event") for r in caplog.records]
        assert ErrorCode.COOKIE_MUTATION_FAILED.value in events
