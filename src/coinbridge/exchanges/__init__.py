"""Exchange adapters and connectivity layer."""

from .protocol import (
    Balances,
    Currency,
    DepositAddress,
    ExchangeAdapter,
    MarketMetadata,
    OrderBook,
    OrderBookEntry,
    OrderRequest,
    OrderResult,
    OrderSide,
    OrderStatus,
    OrderType,
    Symbol,
    Ticker,
    TickerVolume,
    Trade,
    Transaction,
    TransactionType,
    WithdrawalRequest,
    WithdrawalResult,
    can_transition,
)
from .errors import (
    CallerContractError,
    ExchangeAPIError,
    ExchangeError,
    HTTPStatusError,
    MalformedResponseError,
    MappingError,
    MissingCredentialsError,
    NetworkError,
    TransportError,
    UnsupportedOperationError,
)
from .normalization import normalize_symbol, split_symbol, to_wire, check_symbol_mismatch
from .signing import RequestSigner, form_encode, sign
from .transport import AiohttpTransport, ProxyConfig, Transport
from .base import BaseExchangeClient
from .livecoin import LivecoinClient
from .factory import create_exchange_client, EXCHANGE_CLIENTS

__all__ = [
    "Balances",
    "Currency",
    "DepositAddress",
    "ExchangeAdapter",
    "MarketMetadata",
    "OrderBook",
    "OrderBookEntry",
    "OrderRequest",
    "OrderResult",
    "OrderSide",
    "OrderStatus",
    "OrderType",
    "Symbol",
    "Ticker",
    "TickerVolume",
    "Trade",
    "Transaction",
    "TransactionType",
    "WithdrawalRequest",
    "WithdrawalResult",
    "can_transition",
    "CallerContractError",
    "ExchangeAPIError",
    "ExchangeError",
    "HTTPStatusError",
    "MalformedResponseError",
    "MappingError",
    "MissingCredentialsError",
    "NetworkError",
    "TransportError",
    "UnsupportedOperationError",
    "normalize_symbol",
    "split_symbol",
    "to_wire",
    "check_symbol_mismatch",
    "RequestSigner",
    "form_encode",
    "sign",
    "AiohttpTransport",
    "ProxyConfig",
    "Transport",
    "BaseExchangeClient",
    "LivecoinClient",
    "create_exchange_client",
    "EXCHANGE_CLIENTS",
]
