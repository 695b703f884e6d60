"""HTTP Basic authentication for metrics endpoints."""

from __future__ import annotations

from collections.abc import Callable

from promkit.base64 import base64_decode

AuthCallback = Callable[[str, str], bool]

_PREFIX = "Basic "


class BasicAuthHandler:
    """Checks Basic credentials against a callback taking username and password."""

    status = 401

    def __init__(self, callback: AuthCallback, realm: str) -> None:
        self.callback = callback
        self.realm = realm

    def authorize(self, authorization: str | None) -> bool:
        """Return whether the Authorization header value grants access.

        A missing header, another scheme, malformed base64 or credentials
        without a colon are rejected; otherwise the callback decides.
        """
        if authorization is None or not authorization.startswith(_PREFIX):
            return False
        try:
            decoded = base64_decode(authorization[len(_PREFIX):])
        except Exception:
            return False
        text = decoded.decode("utf-8", errors="surrogateescape")
        username, colon, remainder = text.partition(":")
        if not colon:
            return False
        return bool(self.callback(username, remainder))

    def unauthorized_headers(self) -> list[tuple[str, str]]:
        """Headers of the 401 response sent when authorization fails."""
        return [
            ("WWW-Authenticate", f'Basic realm="{self.realm}"'),
            ("Connection", "close"),
            ("Content-Length", "0"),
        ]