"""Factory for creating exchange client instances."""

from __future__ import annotations

from typing import Any, Type

from .base import BaseExchangeClient
from .livecoin import LivecoinClient
from .transport import ProxyConfig


EXCHANGE_CLIENTS: dict[str, Type[BaseExchangeClient]] = {
    "livecoin": LivecoinClient,
}


def create_exchange_client(
    exchange: str,
    api_key: str | None = None,
    api_secret: str | None = None,
    *,
    proxy: dict[str, Any] | None = None,
    **options: Any,
) -> BaseExchangeClient:
    """Create an exchange client instance.

    Args:
        exchange: Exchange name
        api_key: API key (omit for a public-only client)
        api_secret: API secret (omit for a public-only client)
        proxy: Proxy configuration (url, username, password)
        **options: Additional exchange-specific options (base_url, timeout_seconds, ...)

    Returns:
        Configured exchange client

    Raises:
        ValueError: If exchange is not supported
        ValueError: If only one half of the key pair is given
    """
    exchange_lower = exchange.lower()

    if exchange_lower not in EXCHANGE_CLIENTS:
        supported = ", ".join(EXCHANGE_CLIENTS.keys())
        raise ValueError(
            f"Unsupported exchange: {exchange}. Supported exchanges: {supported}"
        )

    if bool(api_key) != bool(api_secret):
        raise ValueError(f"{exchange} requires both api_key and api_secret, or neither")

    client_class = EXCHANGE_CLIENTS[exchange_lower]

    proxy_config = None
    if proxy:
        proxy_config = ProxyConfig(
            url=proxy.get("url"),
            username=proxy.get("username"),
            password=proxy.get("password"),
        )

    kwargs = {
        "api_key": api_key,
        "api_secret": api_secret,
        "proxy": proxy_config,
    }
    kwargs.update(options)

    return client_class(**kwargs)
