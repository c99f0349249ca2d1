"""Mapping of Livecoin response documents into the canonical model.

Every parser takes one decoded JSON node and returns one entity, or raises
``MappingError`` for that record only. Batch endpoints go through
``map_batch`` which skips failing elements.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, TypeVar

from .errors import MappingError
from .fields import EpochUnit, decimal_field, epoch_field, get_field, int_field, str_field
from .normalization import normalize_symbol, split_symbol
from .protocol import (
    Currency,
    DepositAddress,
    MarketMetadata,
    OrderBook,
    OrderBookEntry,
    OrderResult,
    OrderSide,
    OrderStatus,
    OrderType,
    Ticker,
    TickerVolume,
    Trade,
    Transaction,
    TransactionType,
    WithdrawalResult,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

ADDRESS_TAG_DELIMITER = "::"
WALLET_STATUS_NORMAL = "normal"

TRADE_SIDES = {
    "BUY": OrderSide.BUY,
    "SELL": OrderSide.SELL,
}

CLIENT_ORDER_TYPES = {
    "LIMIT_BUY": (OrderType.LIMIT, OrderSide.BUY),
    "LIMIT_SELL": (OrderType.LIMIT, OrderSide.SELL),
    "MARKET_BUY": (OrderType.MARKET, OrderSide.BUY),
    "MARKET_SELL": (OrderType.MARKET, OrderSide.SELL),
}

ORDER_STATUSES = {
    "OPEN": OrderStatus.OPEN,
    "EXECUTED": OrderStatus.FILLED,
    "PARTIALLY_FILLED": OrderStatus.PARTIALLY_FILLED,
    "CANCELLED": OrderStatus.CANCELED,
    "PARTIALLY_FILLED_AND_CANCELLED": OrderStatus.CANCELED,
    "REJECTED": OrderStatus.REJECTED,
}

TRANSACTION_TYPES = {
    "DEPOSIT": TransactionType.DEPOSIT,
    "WITHDRAWAL": TransactionType.WITHDRAWAL,
}


def map_batch(
    items: Iterable[Any],
    parser: Callable[..., T | None],
    kind: str,
    *args: Any,
) -> list[T]:
    """Apply ``parser`` to each element, skipping elements that fail.

    A parser may return None to drop an element on purpose; only
    ``MappingError`` counts as a failure.
    """
    results: list[T] = []
    skipped = 0
    for item in items:
        try:
            mapped = parser(item, *args)
        except MappingError as exc:
            skipped += 1
            logger.debug("Skipping malformed %s record: %s", kind, exc)
            continue
        if mapped is not None:
            results.append(mapped)
    if skipped:
        logger.warning("Skipped %d malformed %s record(s)", skipped, kind)
    return results


def expect_list(node: Any, key: str | None = None, *, kind: str) -> list[Any]:
    """Return the list at ``node[key]``, or ``node`` itself when it is a list.

    Raises:
        MappingError: If no list is found
    """
    if isinstance(node, list):
        return node
    if key is not None:
        value = get_field(node, key)
        if isinstance(value, list):
            return value
        if value is None and isinstance(node, dict) and key in node:
            return []
    raise MappingError(f"Expected a list of {kind} records", kind=kind)


def _non_negative(value: Decimal, key: str) -> Decimal:
    if value < 0:
        raise MappingError(f"Negative value for {key!r}: {value}", field=key)
    return value


def parse_ticker(node: Any, observed_at: datetime) -> Ticker:
    # {"symbol": "LTC/BTC", "last": 0.00805061, "high": 0.00813633, "low": 0.00784855,
    #  "volume": 14729.48452951, "vwap": 0.00795126, "max_bid": 0.00813633,
    #  "min_ask": 0.00784855, "best_bid": 0.00798, "best_ask": 0.00811037}
    symbol = normalize_symbol(str_field(node, "symbol"))
    market, base = split_symbol(symbol)
    last = _non_negative(decimal_field(node, "last"), "last")
    volume = decimal_field(node, "volume")
    return Ticker(
        symbol=symbol,
        last=last,
        bid=_non_negative(decimal_field(node, "best_bid"), "best_bid"),
        ask=_non_negative(decimal_field(node, "best_ask"), "best_ask"),
        volume=TickerVolume(
            converted_volume=volume,
            converted_symbol=market,
            base_volume=volume * last,
            base_symbol=base,
            timestamp=observed_at,
        ),
    )


def parse_trade(node: Any) -> Trade:
    # {"time": 1409935047, "id": 99451, "price": 350, "quantity": 2.85714285, "type": "BUY"}
    return Trade(
        trade_id=int_field(node, "id"),
        timestamp=epoch_field(node, "time", EpochUnit.SECONDS),
        price=decimal_field(node, "price"),
        amount=decimal_field(node, "quantity"),
        side=TRADE_SIDES.get(str_field(node, "type", ""), OrderSide.UNKNOWN),
    )


def _parse_book_level(level: Any) -> OrderBookEntry:
    if not isinstance(level, (list, tuple)) or len(level) < 2:
        raise MappingError(f"Order book level is not a [price, amount] pair: {level!r}", kind="order_book")
    return OrderBookEntry(
        price=decimal_field({"price": level[0]}, "price"),
        amount=decimal_field({"amount": level[1]}, "amount"),
    )


def parse_order_book(node: Any, max_count: int | None = None) -> OrderBook:
    # {"timestamp": 1429190911023, "asks": [["0.02", "1.5"], ...], "bids": [...]}
    asks = map_batch(expect_list(node, "asks", kind="ask"), _parse_book_level, "ask")
    bids = map_batch(expect_list(node, "bids", kind="bid"), _parse_book_level, "bid")
    if max_count is not None:
        asks = asks[:max_count]
        bids = bids[:max_count]
    return OrderBook(
        bids=tuple(bids),
        asks=tuple(asks),
        timestamp=epoch_field(node, "timestamp", EpochUnit.MILLISECONDS, None),
    )


def _filled(amount: Decimal | None, remaining: Decimal | None) -> Decimal:
    if amount is None:
        return Decimal("0")
    return max(amount - (remaining or Decimal("0")), Decimal("0"))


def parse_order(node: Any) -> OrderResult | None:
    """Parse the single-order detail document, None when no order is present."""
    # {"id": 88504958, "client_id": 1150, "status": "CANCELLED", "symbol": "DASH/USD",
    #  "price": 1.5, "quantity": 1.2, "remaining_quantity": 1.2, "blocked": 1.8018,
    #  "blocked_remain": 0, "commission_rate": 0.001, "trades": null}
    if not node or get_field(node, "id") is None:
        return None
    amount = decimal_field(node, "quantity", None)
    order_type, side = CLIENT_ORDER_TYPES.get(
        str_field(node, "type", ""), (OrderType.UNKNOWN, OrderSide.UNKNOWN)
    )
    symbol = str_field(node, "symbol", None)
    return OrderResult(
        order_id=str_field(node, "id"),
        status=ORDER_STATUSES.get(str_field(node, "status", ""), OrderStatus.UNKNOWN),
        symbol=normalize_symbol(symbol) if symbol else None,
        side=side,
        order_type=order_type,
        price=decimal_field(node, "price", None),
        amount=amount,
        amount_filled=_filled(amount, decimal_field(node, "remaining_quantity", None)),
        fee=decimal_field(node, "commission", None),
    )


def parse_client_order(node: Any) -> OrderResult:
    """Parse one element of the client order list."""
    # {"id": 4910, "currencyPair": "BTC/USD", "goodUntilTime": 0, "type": "MARKET_SELL",
    #  "orderStatus": "EXECUTED", "issueTime": 1409920636701, "price": null,
    #  "quantity": 2.85714285, "remainingQuantity": 0, "commission": null,
    #  "commissionRate": 0.005, "lastModificationTime": 1409920636701}
    amount = decimal_field(node, "quantity")
    order_type, side = CLIENT_ORDER_TYPES.get(
        str_field(node, "type", ""), (OrderType.UNKNOWN, OrderSide.UNKNOWN)
    )
    wire_status = str_field(node, "orderStatus", None) or str_field(node, "status", "")
    return OrderResult(
        order_id=str_field(node, "id"),
        status=ORDER_STATUSES.get(wire_status, OrderStatus.UNKNOWN),
        symbol=normalize_symbol(str_field(node, "currencyPair")),
        side=side,
        order_type=order_type,
        price=decimal_field(node, "price", None),
        amount=amount,
        amount_filled=_filled(amount, decimal_field(node, "remainingQuantity", None)),
        fee=decimal_field(node, "commission", None),
        issued_at=epoch_field(node, "issueTime", EpochUnit.MILLISECONDS, None),
    )


def _parse_balance_entry(node: Any, balance_type: str) -> tuple[str, Decimal] | None:
    if str_field(node, "type", None) != balance_type:
        return None
    amount = decimal_field(node, "value")
    if amount <= 0:
        return None
    return str_field(node, "currency"), amount


def parse_balances(node: Any, balance_type: str) -> dict[str, Decimal]:
    """Collect positive amounts of one balance type keyed by currency."""
    # [{"type": "total", "currency": "USD", "value": 20},
    #  {"type": "available", "currency": "USD", "value": 10},
    #  {"type": "trade", "currency": "USD", "value": 10},
    #  {"type": "available_withdrawal", "currency": "USD", "value": 10}, ...]
    entries = map_batch(expect_list(node, kind="balance"), _parse_balance_entry, "balance", balance_type)
    return dict(entries)


def parse_transaction(node: Any) -> Transaction:
    # {"id": "OK521780496", "type": "DEPOSIT", "date": 1431882524782, "amount": 27190,
    #  "fee": 269.2079208, "fixedCurrency": "RUR", "taxCurrency": "RUR",
    #  "variableAmount": null, "variableCurrency": null, "external": "OkPay", "login": null}
    return Transaction(
        transaction_id=str_field(node, "id"),
        transaction_type=TRANSACTION_TYPES.get(str_field(node, "type", ""), TransactionType.UNKNOWN),
        timestamp=epoch_field(node, "date", EpochUnit.MILLISECONDS),
        currency=str_field(node, "fixedCurrency"),
        amount=decimal_field(node, "amount"),
        fee=decimal_field(node, "fee", None),
        external=str_field(node, "external", None),
    )


def parse_currency(node: Any) -> Currency:
    # {"name": "Bitcoin", "symbol": "BTC", "walletStatus": "down", "withdrawFee": 0.0004,
    #  "minDepositAmount": 0, "minWithdrawAmount": 0.002}
    wallet_status = str_field(node, "walletStatus", "")
    enabled = wallet_status == WALLET_STATUS_NORMAL
    return Currency(
        name=str_field(node, "symbol"),
        full_name=str_field(node, "name", ""),
        deposit_enabled=enabled,
        withdrawal_enabled=enabled,
        tx_fee=decimal_field(node, "withdrawFee", Decimal("0")),
        wallet_status=wallet_status,
        min_deposit_amount=decimal_field(node, "minDepositAmount", None),
        min_withdrawal_amount=decimal_field(node, "minWithdrawAmount", None),
    )


def parse_market(node: Any) -> MarketMetadata:
    # {"currencyPair": "BTC/USD", "minLimitQuantity": 0.0001, "priceScale": 5}
    symbol = normalize_symbol(str_field(node, "currencyPair"))
    split_symbol(symbol)
    price_scale = int_field(node, "priceScale")
    return MarketMetadata(
        symbol=symbol,
        min_trade_size=decimal_field(node, "minLimitQuantity"),
        price_step_size=Decimal(1).scaleb(-price_scale),
        is_active=True,
    )


def parse_deposit_address(node: Any, currency: str) -> DepositAddress | None:
    """Parse a deposit address, splitting an ``address::tag`` wallet."""
    # {"fault": null, "userId": 797, "userName": "poorguy", "currency": "BTC",
    #  "wallet": "1Biu9ZdHMcNZwrqvCWK2J6Gm7vE2pbKVWr"}
    if not node or str_field(node, "currency", None) != currency:
        return None
    wallet = str_field(node, "wallet", "")
    if not wallet:
        return None
    if ADDRESS_TAG_DELIMITER in wallet:
        address, _, tag = wallet.partition(ADDRESS_TAG_DELIMITER)
        return DepositAddress(symbol=currency, address=address, address_tag=tag or None)
    return DepositAddress(symbol=currency, address=wallet)


def parse_withdrawal(node: Any) -> WithdrawalResult:
    """Build the withdrawal result.

    Success is reported for any response the transport accepted; a non-null
    ``fault`` is carried on the result and logged but does not flip it.
    """
    # {"fault": null, "userId": 797, "id": 11285042, "state": "APPROVED", "amount": 0.002,
    #  "currency": "BTC", "wallet": "1111111", ...}
    fault = str_field(node, "fault", None)
    if fault:
        logger.warning("Withdrawal response carries fault: %s", fault)
    return WithdrawalResult(
        success=True,
        withdrawal_id=str_field(node, "id", None),
        state=str_field(node, "state", None),
        fault=fault,
    )
