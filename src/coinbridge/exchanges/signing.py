"""Request signing for private exchange endpoints."""

from __future__ import annotations

import hashlib
import hmac
from decimal import Decimal
from typing import Any, Mapping
from urllib.parse import quote


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def form_encode(payload: Mapping[str, Any] | None) -> str:
    """Render a payload as ``key=value&key=value``.

    Keys keep the mapping's insertion order. Keys and values are
    percent-escaped. ``None`` values are dropped.
    """
    if not payload:
        return ""
    return "&".join(
        f"{quote(str(key), safe='')}={quote(_format_value(value), safe='')}"
        for key, value in payload.items()
        if value is not None
    )


def sign(secret: str | bytes, payload: Mapping[str, Any] | None) -> str:
    """Return the uppercase hex HMAC-SHA256 of the form-encoded payload."""
    key = secret.encode() if isinstance(secret, str) else secret
    message = form_encode(payload).encode()
    return hmac.new(key, message, hashlib.sha256).hexdigest().upper()


class RequestSigner:
    """Builds authentication headers from an API key pair."""

    KEY_HEADER = "API-Key"
    SIGN_HEADER = "Sign"

    def __init__(self, api_key: str, api_secret: str):
        self._api_key = api_key
        self._api_secret = api_secret

    def __repr__(self) -> str:
        return f"{type(self).__name__}(api_key=***)"

    def sign(self, payload: Mapping[str, Any] | None) -> str:
        return sign(self._api_secret, payload)

    def headers(self, payload: Mapping[str, Any] | None) -> dict[str, str]:
        return {
            self.KEY_HEADER: self._api_key,
            self.SIGN_HEADER: self.sign(payload),
        }
