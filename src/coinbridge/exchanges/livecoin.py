"""Livecoin exchange adapter."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from .base import BaseExchangeClient
from .errors import CallerContractError, ExchangeAPIError
from .fields import EpochUnit, as_utc, get_field, to_epoch
from .livecoin_parsers import (
    ADDRESS_TAG_DELIMITER,
    expect_list,
    map_batch,
    parse_balances,
    parse_client_order,
    parse_currency,
    parse_deposit_address,
    parse_market,
    parse_order,
    parse_order_book,
    parse_ticker,
    parse_trade,
    parse_transaction,
    parse_withdrawal,
)
from .normalization import check_symbol_mismatch, normalize_symbol, to_wire
from .protocol import (
    Balances,
    Currency,
    DepositAddress,
    MarketMetadata,
    OrderBook,
    OrderRequest,
    OrderResult,
    OrderSide,
    OrderStatus,
    OrderType,
    Ticker,
    Trade,
    Transaction,
    WithdrawalRequest,
    WithdrawalResult,
)
from .transport import ProxyConfig

logger = logging.getLogger(__name__)

TOTAL_BALANCE_TYPE = "total"
TRADABLE_BALANCE_TYPE = "available"

# openClosed filter of /exchange/client_orders. Accepted values: ALL, OPEN,
# CLOSED, CANCELLED, NOT_CANCELLED, PARTIALLY.
OPEN_ORDERS_FILTER = "OPEN"
CLOSED_ORDERS_FILTER = "CLOSED"

DEPOSIT_HISTORY_LOOKBACK = timedelta(days=365)
DEPOSIT_HISTORY_TYPES = "DEPOSIT,WITHDRAWAL"


class LivecoinClient(BaseExchangeClient):
    """Livecoin exchange client.

    Livecoin verifies signatures over alphabetically ordered parameters, so
    every payload below is built in that order.
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_secret: str | None = None,
        *,
        proxy: ProxyConfig | None = None,
        **options: Any,
    ):
        super().__init__(
            "livecoin",
            api_key,
            api_secret,
            proxy=proxy,
            **options,
        )

    def get_base_url(self) -> str:
        return self.base_url or "https://api.livecoin.net"

    def _check_response(self, node: Any) -> Any:
        if isinstance(node, dict) and node.get("success") is False:
            message = node.get("errorMessage") or node.get("exception") or "request rejected"
            raise ExchangeAPIError(str(message), node.get("errorCode"))
        return node

    @staticmethod
    def _wire_symbol(symbol: str) -> str:
        wire = to_wire(symbol)
        if not wire:
            raise CallerContractError("Symbol must not be empty")
        return wire

    # Public endpoints

    async def get_currencies(self) -> dict[str, Currency]:
        """Fetch currencies keyed by code. Only ``normal`` wallets are enabled."""
        data = await self._request("GET", "/info/coinInfo")
        currencies = map_batch(expect_list(data, "info", kind="currency"), parse_currency, "currency")
        return {currency.name: currency for currency in currencies}

    async def get_symbols(self) -> list[str]:
        data = await self._request("GET", "/exchange/restrictions")
        rows = expect_list(data, "restrictions", kind="market")
        return [
            normalize_symbol(row["currencyPair"]).value
            for row in rows
            if isinstance(row, dict) and row.get("currencyPair")
        ]

    async def get_markets(self) -> list[MarketMetadata]:
        data = await self._request("GET", "/exchange/restrictions")
        return map_batch(expect_list(data, "restrictions", kind="market"), parse_market, "market")

    async def get_ticker(self, symbol: str) -> Ticker:
        wire = self._wire_symbol(symbol)
        data = await self._request("GET", "/exchange/ticker", {"currencyPair": wire})
        ticker = parse_ticker(data, self.clock())
        check_symbol_mismatch(wire, ticker.symbol.value)
        return ticker

    async def get_tickers(self) -> dict[str, Ticker]:
        data = await self._request("GET", "/exchange/ticker")
        tickers = map_batch(expect_list(data, kind="ticker"), parse_ticker, "ticker", self.clock())
        return {ticker.symbol.value: ticker for ticker in tickers}

    async def get_order_book(self, symbol: str, max_count: int = 100) -> OrderBook:
        if max_count <= 0:
            raise CallerContractError(f"max_count must be positive, got {max_count}")
        wire = self._wire_symbol(symbol)
        data = await self._request(
            "GET",
            "/exchange/order_book",
            {"currencyPair": wire, "depth": max_count},
        )
        return parse_order_book(data, max_count)

    async def get_recent_trades(self, symbol: str) -> list[Trade]:
        """Fetch trades from the last minute."""
        wire = self._wire_symbol(symbol)
        data = await self._request("GET", "/exchange/last_trades", {"currencyPair": wire})
        return map_batch(expect_list(data, kind="trade"), parse_trade, "trade")

    async def get_historical_trades(
        self,
        symbol: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Trade]:
        """Fetch trades from the last hour, the longest window Livecoin serves.

        Trades older than one hour cannot be retrieved. ``start`` and ``end``
        only filter the returned window.
        """
        wire = self._wire_symbol(symbol)
        data = await self._request(
            "GET",
            "/exchange/last_trades",
            {"currencyPair": wire, "minutesOrHour": "false"},
        )
        trades = map_batch(expect_list(data, kind="trade"), parse_trade, "trade")
        if start is not None:
            start = as_utc(start)
            trades = [trade for trade in trades if trade.timestamp > start]
        if end is not None:
            end = as_utc(end)
            trades = [trade for trade in trades if trade.timestamp <= end]
        return trades

    # Private endpoints

    async def _fetch_balances(self) -> Any:
        return await self._request("GET", "/payment/balances", {}, private=True)

    async def get_balances(self) -> dict[str, Decimal]:
        return parse_balances(await self._fetch_balances(), TOTAL_BALANCE_TYPE)

    async def get_tradable_balances(self) -> dict[str, Decimal]:
        return parse_balances(await self._fetch_balances(), TRADABLE_BALANCE_TYPE)

    async def get_balance_snapshot(self) -> Balances:
        """Fetch both balance views with one request."""
        data = await self._fetch_balances()
        return Balances(
            available=parse_balances(data, TRADABLE_BALANCE_TYPE),
            total=parse_balances(data, TOTAL_BALANCE_TYPE),
        )

    async def get_order_details(self, order_id: str) -> OrderResult | None:
        data = await self._request("GET", "/exchange/order", {"orderId": order_id}, private=True)
        return parse_order(data)

    async def _get_client_orders(self, params: dict[str, Any]) -> list[OrderResult]:
        data = await self._request("GET", "/exchange/client_orders", params, private=True)
        return map_batch(expect_list(data, "data", kind="order"), parse_client_order, "order")

    async def get_open_orders(self, symbol: str | None = None) -> list[OrderResult]:
        """Fetch open orders, at most the latest 100."""
        params: dict[str, Any] = {}
        if symbol:
            params["currencyPair"] = self._wire_symbol(symbol)
        params["openClosed"] = OPEN_ORDERS_FILTER
        return await self._get_client_orders(params)

    async def get_completed_orders(
        self,
        symbol: str | None = None,
        after: datetime | None = None,
    ) -> list[OrderResult]:
        """Fetch executed and cancelled orders."""
        params: dict[str, Any] = {}
        if symbol:
            params["currencyPair"] = self._wire_symbol(symbol)
        if after is not None:
            params["issuedFrom"] = to_epoch(after, EpochUnit.MILLISECONDS)
        params["openClosed"] = CLOSED_ORDERS_FILTER
        return await self._get_client_orders(params)

    async def place_order(self, request: OrderRequest) -> OrderResult:
        """Place an order.

        The exchange only acknowledges the order id, so the result is always
        PENDING. Query ``get_order_details`` for fill state.
        """
        if request.amount is None or request.amount <= 0:
            raise CallerContractError(f"Order amount must be positive, got {request.amount}")
        if request.side not in (OrderSide.BUY, OrderSide.SELL):
            raise CallerContractError(f"Order side must be buy or sell, got {request.side}")
        if request.order_type not in (OrderType.LIMIT, OrderType.MARKET):
            raise CallerContractError(f"Unsupported order type: {request.order_type}")
        if request.order_type is OrderType.LIMIT and (request.price is None or request.price <= 0):
            raise CallerContractError("Limit orders require a positive price")

        wire = self._wire_symbol(request.symbol)
        side = "buy" if request.side is OrderSide.BUY else "sell"
        kind = "market" if request.order_type is OrderType.MARKET else "limit"

        params: dict[str, Any] = {"currencyPair": wire}
        if request.order_type is OrderType.LIMIT:
            params["price"] = request.price
        params["quantity"] = request.amount
        params.update(request.extra_parameters)
        params = dict(sorted(params.items()))

        # {"success": true, "added": true, "orderId": 4912}
        data = await self._request("POST", f"/exchange/{side}{kind}", params, private=True)
        order_id = get_field(data, "orderId")
        if order_id is None:
            raise ExchangeAPIError(f"Order was not acknowledged: {data!r}")

        logger.info("Placed %s %s order %s on %s", kind, side, order_id, wire)
        return OrderResult(
            order_id=str(order_id),
            status=OrderStatus.PENDING,
            symbol=normalize_symbol(wire),
            side=request.side,
            order_type=request.order_type,
            price=request.price,
            amount=request.amount,
            issued_at=self.clock(),
        )

    async def cancel_order(self, order_id: str) -> None:
        """Cancel a limit order.

        The cancel endpoint needs the currency pair, so the order is looked up
        first. Orders the lookup cannot resolve, and orders that already
        reached a terminal status, are left alone.
        """
        try:
            order = await self.get_order_details(order_id)
        except ExchangeAPIError as exc:
            # Livecoin answers unknown ids with a success:false envelope
            logger.info("Order %s lookup rejected (%s), nothing to cancel", order_id, exc)
            return
        if order is None or order.symbol is None:
            logger.info("Order %s not found, nothing to cancel", order_id)
            return
        if order.status.is_terminal:
            logger.info("Order %s is already %s, nothing to cancel", order_id, order.status.value)
            return

        # {"success": true, "cancelled": true, "message": null, "quantity": 0.0005, "tradeQuantity": 0}
        await self._request(
            "GET",
            "/exchange/cancel_limit",
            {"currencyPair": to_wire(order.symbol), "orderId": order_id},
            private=True,
        )
        logger.info("Cancelled order %s", order_id)

    async def get_deposit_history(
        self,
        symbol: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Transaction]:
        """Fetch deposits and withdrawals, one year back by default."""
        now = self.clock()
        end = as_utc(end) if end is not None else now
        start = as_utc(start) if start is not None else end - DEPOSIT_HISTORY_LOOKBACK
        params = {
            "end": to_epoch(end, EpochUnit.MILLISECONDS),
            "start": to_epoch(start, EpochUnit.MILLISECONDS),
            "types": DEPOSIT_HISTORY_TYPES,
        }
        data = await self._request("GET", "/payment/history/transactions", params, private=True)
        transactions = map_batch(expect_list(data, kind="transaction"), parse_transaction, "transaction")
        if symbol:
            currency = normalize_symbol(symbol).value
            transactions = [tx for tx in transactions if tx.currency == currency]
        return transactions

    async def get_deposit_address(self, symbol: str) -> DepositAddress | None:
        currency = self._wire_symbol(symbol)
        data = await self._request("GET", "/payment/get/address", {"currency": currency}, private=True)
        return parse_deposit_address(data, currency)

    async def withdraw(self, request: WithdrawalRequest) -> WithdrawalResult:
        if not request.address:
            raise CallerContractError("Withdrawal address must not be empty")
        if request.amount is None or request.amount <= 0:
            raise CallerContractError(f"Withdrawal amount must be positive, got {request.amount}")

        wallet = request.address
        if request.address_tag:
            wallet = f"{wallet}{ADDRESS_TAG_DELIMITER}{request.address_tag}"

        params = {
            "amount": request.amount,
            "currency": self._wire_symbol(request.symbol),
            "wallet": wallet,
        }
        data = await self._request("POST", "/payment/out/coin", params, private=True)
        logger.info("Requested withdrawal of %s %s", request.amount, params["currency"])
        return parse_withdrawal(data)
