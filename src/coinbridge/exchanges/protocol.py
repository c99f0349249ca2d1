"""Canonical trading model and the protocol every exchange adapter follows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class Symbol:
    """Canonical trading pair.

    ``value`` is the ``MARKET/BASE`` string. ``market`` and ``base`` are only
    set when the string splits into exactly two non-empty legs.
    """

    value: str
    market: str | None = None
    base: str | None = None

    def __str__(self) -> str:
        return self.value

    @property
    def has_legs(self) -> bool:
        return self.market is not None and self.base is not None


class OrderSide(Enum):
    BUY = "buy"
    SELL = "sell"
    UNKNOWN = "unknown"


class OrderType(Enum):
    LIMIT = "limit"
    MARKET = "market"
    UNKNOWN = "unknown"


class OrderStatus(Enum):
    """Order lifecycle state."""

    PENDING = "pending"
    OPEN = "open"
    PARTIALLY_FILLED = "partially_filled"
    FILLED = "filled"
    CANCELED = "canceled"
    REJECTED = "rejected"
    UNKNOWN = "unknown"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATUSES


_TERMINAL_STATUSES = frozenset({OrderStatus.FILLED, OrderStatus.CANCELED, OrderStatus.REJECTED})

ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({
        OrderStatus.OPEN,
        OrderStatus.FILLED,
        OrderStatus.PARTIALLY_FILLED,
        OrderStatus.CANCELED,
        OrderStatus.REJECTED,
    }),
    OrderStatus.OPEN: frozenset({
        OrderStatus.PARTIALLY_FILLED,
        OrderStatus.FILLED,
        OrderStatus.CANCELED,
    }),
    OrderStatus.PARTIALLY_FILLED: frozenset({OrderStatus.FILLED, OrderStatus.CANCELED}),
}


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    """Return True if an order may move from ``current`` to ``new``.

    ``UNKNOWN`` carries no lifecycle information, so it is never a valid
    source or target.
    """
    return new in ORDER_TRANSITIONS.get(current, frozenset())


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class TickerVolume:
    converted_volume: Decimal
    converted_symbol: str
    base_volume: Decimal
    base_symbol: str
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class Ticker:
    symbol: Symbol
    last: Decimal
    bid: Decimal
    ask: Decimal
    volume: TickerVolume


@dataclass(frozen=True, slots=True)
class Trade:
    trade_id: int
    timestamp: datetime
    price: Decimal
    amount: Decimal
    side: OrderSide

    @property
    def is_buy(self) -> bool:
        return self.side is OrderSide.BUY


@dataclass(frozen=True, slots=True)
class OrderBookEntry:
    price: Decimal
    amount: Decimal


@dataclass(frozen=True, slots=True)
class OrderBook:
    bids: tuple[OrderBookEntry, ...]
    asks: tuple[OrderBookEntry, ...]
    timestamp: datetime | None = None


@dataclass(frozen=True, slots=True)
class OrderRequest:
    """Order placement parameters supplied by the caller."""

    symbol: str
    amount: Decimal
    side: OrderSide
    order_type: OrderType = OrderType.LIMIT
    price: Decimal | None = None
    extra_parameters: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class OrderResult:
    order_id: str
    status: OrderStatus
    symbol: Symbol | None = None
    side: OrderSide = OrderSide.UNKNOWN
    order_type: OrderType = OrderType.UNKNOWN
    price: Decimal | None = None
    amount: Decimal | None = None
    amount_filled: Decimal = Decimal("0")
    fee: Decimal | None = None
    issued_at: datetime | None = None

    @property
    def is_buy(self) -> bool:
        return self.side is OrderSide.BUY


@dataclass(frozen=True, slots=True)
class Balances:
    """Available and total amounts per currency, positive entries only."""

    available: dict[str, Decimal]
    total: dict[str, Decimal]


@dataclass(frozen=True, slots=True)
class DepositAddress:
    symbol: str
    address: str
    address_tag: str | None = None


@dataclass(frozen=True, slots=True)
class MarketMetadata:
    symbol: Symbol
    min_trade_size: Decimal
    price_step_size: Decimal
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class Currency:
    name: str
    full_name: str
    deposit_enabled: bool
    withdrawal_enabled: bool
    tx_fee: Decimal
    wallet_status: str
    min_deposit_amount: Decimal | None = None
    min_withdrawal_amount: Decimal | None = None


@dataclass(frozen=True, slots=True)
class Transaction:
    transaction_id: str
    transaction_type: TransactionType
    timestamp: datetime
    currency: str
    amount: Decimal
    fee: Decimal | None = None
    external: str | None = None


@dataclass(frozen=True, slots=True)
class WithdrawalRequest:
    symbol: str
    address: str
    amount: Decimal
    address_tag: str | None = None


@dataclass(frozen=True, slots=True)
class WithdrawalResult:
    success: bool
    withdrawal_id: str | None = None
    state: str | None = None
    fault: str | None = None


class ExchangeAdapter(Protocol):
    """Protocol for exchange connectivity."""

    name: str

    async def get_currencies(self) -> dict[str, Currency]:
        """Fetch currencies keyed by exchange code."""
        ...

    async def get_symbols(self) -> list[str]:
        """Fetch canonical symbols of every market."""
        ...

    async def get_markets(self) -> list[MarketMetadata]:
        """Fetch trading rules of every market."""
        ...

    async def get_ticker(self, symbol: str) -> Ticker:
        """Fetch the ticker of one market.

        Args:
            symbol: Symbol in any separator format (``LTC/BTC``, ``LTC_BTC``)
        """
        ...

    async def get_tickers(self) -> dict[str, Ticker]:
        """Fetch tickers of every market keyed by canonical symbol."""
        ...

    async def get_order_book(self, symbol: str, max_count: int = 100) -> OrderBook:
        """Fetch bid/ask ladders, at most ``max_count`` levels per side."""
        ...

    async def get_recent_trades(self, symbol: str) -> list[Trade]:
        """Fetch trades from the exchange's short trailing window."""
        ...

    async def get_historical_trades(
        self,
        symbol: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Trade]:
        """Fetch trades from the longest window the exchange retains."""
        ...

    async def get_candles(
        self,
        symbol: str,
        period_seconds: int,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> list[Any]:
        """Fetch OHLC candles."""
        ...

    async def get_balances(self) -> dict[str, Decimal]:
        """Fetch total balances, positive amounts only."""
        ...

    async def get_tradable_balances(self) -> dict[str, Decimal]:
        """Fetch balances available for trading, positive amounts only."""
        ...

    async def get_order_details(self, order_id: str) -> OrderResult | None:
        """Fetch one order, None if the exchange does not know it."""
        ...

    async def get_open_orders(self, symbol: str | None = None) -> list[OrderResult]:
        """Fetch open orders."""
        ...

    async def get_completed_orders(
        self,
        symbol: str | None = None,
        after: datetime | None = None,
    ) -> list[OrderResult]:
        """Fetch closed and cancelled orders."""
        ...

    async def place_order(self, request: OrderRequest) -> OrderResult:
        """Place an order. The result is always ``PENDING``."""
        ...

    async def cancel_order(self, order_id: str) -> None:
        """Cancel an order. Unknown orders are ignored."""
        ...

    async def get_deposit_history(
        self,
        symbol: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Transaction]:
        """Fetch deposits and withdrawals."""
        ...

    async def get_deposit_address(self, symbol: str) -> DepositAddress | None:
        """Fetch the deposit address of a currency."""
        ...

    async def withdraw(self, request: WithdrawalRequest) -> WithdrawalResult:
        """Withdraw funds to an external address."""
        ...

    async def close(self) -> None:
        """Close the HTTP session."""
        ...
