"""Error taxonomy for exchange adapters."""

from __future__ import annotations


class ExchangeError(Exception):
    """Base class for all adapter errors."""


class CallerContractError(ExchangeError, ValueError):
    """Raised before any I/O when a call's input is invalid."""


class MissingCredentialsError(CallerContractError):
    """Raised when a private call is made without an API key pair."""


class UnsupportedOperationError(ExchangeError, NotImplementedError):
    """Raised when the exchange does not offer the requested capability."""


class TransportError(ExchangeError):
    """Raised when the HTTP round trip fails."""


class NetworkError(TransportError):
    """Connection, DNS or timeout failure."""


class HTTPStatusError(TransportError):
    """Non-2xx HTTP status."""

    def __init__(self, status: int, body: str = ""):
        super().__init__(f"HTTP {status}: {body}")
        self.status = status
        self.body = body


class MalformedResponseError(TransportError):
    """Response body is not valid JSON."""


class ExchangeAPIError(ExchangeError):
    """The exchange answered with ``success: false``."""

    def __init__(self, message: str, error_code: int | str | None = None):
        super().__init__(message if error_code is None else f"[{error_code}] {message}")
        self.message = message
        self.error_code = error_code


class MappingError(ExchangeError, ValueError):
    """A single response record does not match the expected shape."""

    def __init__(self, message: str, *, kind: str | None = None, field: str | None = None):
        super().__init__(message)
        self.kind = kind
        self.field = field
