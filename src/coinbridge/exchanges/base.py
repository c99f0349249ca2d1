"""Base client class for exchange adapters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Mapping

from .errors import MissingCredentialsError, UnsupportedOperationError
from .protocol import (
    DepositAddress,
    OrderBook,
    OrderRequest,
    OrderResult,
    Ticker,
    Trade,
    WithdrawalRequest,
    WithdrawalResult,
)
from .signing import RequestSigner, form_encode
from .transport import AiohttpTransport, ProxyConfig, Transport

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseExchangeClient(ABC):
    """Base class for all exchange adapters."""

    def __init__(
        self,
        name: str,
        api_key: str | None = None,
        api_secret: str | None = None,
        *,
        proxy: ProxyConfig | None = None,
        base_url: str | None = None,
        timeout_seconds: float = 30.0,
        transport: Transport | None = None,
        clock: Callable[[], datetime] | None = None,
        **options: Any,
    ):
        """Initialize exchange client.

        Args:
            name: Exchange name
            api_key: API key, None for a public-only client
            api_secret: API secret, None for a public-only client
            proxy: Proxy configuration
            base_url: Override of the exchange's API root
            timeout_seconds: Total timeout of one HTTP round trip
            transport: Transport to use instead of the default aiohttp one
            clock: Source of the current UTC time
            **options: Additional exchange-specific options
        """
        self.name = name
        self.api_key = api_key
        self.proxy = proxy or ProxyConfig()
        self.base_url = base_url
        self.options = options
        self.clock = clock or utc_now
        self._signer = RequestSigner(api_key, api_secret) if api_key and api_secret else None
        self.transport = transport or AiohttpTransport(
            self.get_base_url(),
            proxy=self.proxy,
            timeout_seconds=timeout_seconds,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, authenticated={self.has_credentials})"

    @property
    def has_credentials(self) -> bool:
        return self._signer is not None

    def get_base_url(self) -> str:
        """Get base API URL.

        Subclasses return their exchange's API root.
        """
        return self.base_url or "https://api.example.com"

    def _require_signer(self) -> RequestSigner:
        if self._signer is None:
            raise MissingCredentialsError(f"{self.name} requires an API key pair for this call")
        return self._signer

    def _check_response(self, node: Any) -> Any:
        """Hook for exchange-level error envelopes."""
        return node

    async def _request(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        *,
        private: bool = False,
    ) -> Any:
        """Send one request and return the decoded body.

        Parameters go to the query string for GET and to a form body
        otherwise. Private calls are signed over the same form.
        """
        headers: dict[str, str] = {}
        if private:
            headers.update(self._require_signer().headers(params))

        form = form_encode(params)
        body = None
        if method == "GET":
            if form:
                path = f"{path}?{form}"
        else:
            body = form
            headers["Content-Type"] = FORM_CONTENT_TYPE

        node = await self.transport.send(method, path, headers, body)
        return self._check_response(node)

    @abstractmethod
    async def get_ticker(self, symbol: str) -> Ticker:
        ...

    @abstractmethod
    async def get_tickers(self) -> dict[str, Ticker]:
        ...

    @abstractmethod
    async def get_order_book(self, symbol: str, max_count: int = 100) -> OrderBook:
        ...

    @abstractmethod
    async def get_recent_trades(self, symbol: str) -> list[Trade]:
        ...

    @abstractmethod
    async def get_balances(self) -> dict[str, Decimal]:
        ...

    @abstractmethod
    async def get_tradable_balances(self) -> dict[str, Decimal]:
        ...

    @abstractmethod
    async def place_order(self, request: OrderRequest) -> OrderResult:
        ...

    @abstractmethod
    async def cancel_order(self, order_id: str) -> None:
        ...

    async def get_candles(
        self,
        symbol: str,
        period_seconds: int,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> list[Any]:
        """Fetch OHLC candles.

        Default implementation raises UnsupportedOperationError.
        Override in subclasses whose exchange serves candles.
        """
        raise UnsupportedOperationError(f"{self.name} does not provide candles")

    async def get_deposit_address(self, symbol: str) -> DepositAddress | None:
        raise UnsupportedOperationError(f"{self.name} does not provide deposit addresses")

    async def withdraw(self, request: WithdrawalRequest) -> WithdrawalResult:
        raise UnsupportedOperationError(f"{self.name} does not support withdrawals")

    async def close(self) -> None:
        """Close connections."""
        await self.transport.close()
