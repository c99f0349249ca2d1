"""coinbridge: canonical exchange connectors."""

from .settings import Settings
from .exchanges import ExchangeAdapter, LivecoinClient, normalize_symbol, create_exchange_client

__all__ = [
    "Settings",
    "ExchangeAdapter",
    "LivecoinClient",
    "normalize_symbol",
    "create_exchange_client",
]
