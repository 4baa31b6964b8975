"""
In-memory session model.

A Session holds the durable ``data`` fields of a visitor plus two flash
mappings: the values flashed by the previous request (readable once during
this request) and the values flashed during this request (shipped to the
next one). Nothing is stored server-side; the whole object is rebuilt from
the signed cookie on every request.
"""

from typing import Any, Optional

# Reserved payload key holding the flash mapping on the wire
FLASH_KEY = "_flash"

_UNSET = object()


class Session:
    """
    Per-request session state.

    Note:
        ``FLASH_KEY`` is reserved. A ``data`` field with that name is
        overwritten by the flash mapping when the session is encoded and is
        stripped out again when it is decoded, so its value is lost.
    """

    def __init__(
        self,
        data: Optional[dict[str, Any]] = None,
        flashed_data: Optional[dict[str, Any]] = None,
    ):
        self._data: dict[str, Any] = dict(data or {})
        self._flash: dict[str, Any] = dict(flashed_data or {})
        self._incoming_flash: dict[str, Any] = {}
        self._destroyed = False
        self._modified = False

    @property
    def data(self) -> dict[str, Any]:
        """Copy of the durable session fields."""
        return dict(self._data)

    @property
    def flashed_data(self) -> dict[str, Any]:
        """Copy of the flash values that will be delivered to the next request."""
        return dict(self._flash)

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def modified(self) -> bool:
        """
        Whether this request changed data or queued a flash value.

        For handlers only: the middleware re-issues the cookie for every live
        session regardless, so the token stays current either way.
        """
        return self._modified

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> "Session":
        self._data[key] = value
        self._modified = True
        return self

    def has(self, key: str) -> bool:
        return key in self._data

    def delete(self, key: str) -> "Session":
        if self._data.pop(key, _UNSET) is not _UNSET:
            self._modified = True
        return self

    def clear(self) -> "Session":
        """Remove every durable field, keeping flash values."""
        if self._data:
            self._modified = True
        self._data.clear()
        return self

    def flash(self, key: str, value: Any = _UNSET) -> Any:
        """
        Write or read a flash value.

        With a value, queue it for the next request and return the session.
        Without one, return the value flashed by the previous request (or
        None) and remove it so a second read in the same request gets None.
        """
        if value is _UNSET:
            return self._incoming_flash.pop(key, None)
        self._flash[key] = value
        self._modified = True
        return self

    def peek_flash(self, key: str, default: Any = None) -> Any:
        """Return a flash value from the previous request without consuming it."""
        return self._incoming_flash.get(key, default)

    def rotate_flash(self) -> "Session":
        """
        Make the decoded flash values readable for this request only.

        Called once, right after the session is loaded from a cookie: the
        decoded outgoing mapping becomes the incoming one and a fresh, empty
        outgoing mapping is started.
        """
        self._incoming_flash = self._flash
        self._flash = {}
        return self

    def destroy(self) -> None:
        """Mark the session for removal at the end of the request."""
        self._destroyed = True

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Session):
            return NotImplemented
        return self._data == other._data and self._flash == other._flash

    def __repr__(self) -> str:
        return f"Session(data={self._data!r}, flashed_data={self._flash!r})"
