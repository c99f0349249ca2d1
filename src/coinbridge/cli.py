"""Typer-based CLI for querying exchange adapters."""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from pathlib import Path
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional

import typer
from rich.console import Console
from rich.table import Table

from .exchanges.errors import ExchangeError

if TYPE_CHECKING:
    from .di import AppContainer
    from .exchanges.base import BaseExchangeClient


# Import with local function to avoid circular imports
def _load_settings(config_path: Optional[Path] = None):
    from .config import load_settings
    return load_settings(config_path)

def _build_container(settings, exchange_clients):
    from .di import build_container
    return build_container(settings, exchange_clients)

def _create_exchange_clients_from_settings(settings):
    from .exchanges.init import create_exchange_clients_from_settings
    return create_exchange_clients_from_settings(settings)

def _create_public_client(exchange: str):
    from .exchanges.factory import create_exchange_client
    return create_exchange_client(exchange)

app = typer.Typer(help="Exchange connector CLI")
console = Console()
logger = logging.getLogger(__name__)

ExchangeOption = typer.Option("livecoin", "--exchange", "-e", help="Exchange name")
ConfigOption = typer.Option(None, "--config", help="Path to config file")


def run_cli(argv: list[str] | None = None) -> None:
    """Run CLI with optional argv parameter."""
    app(argv)


def init_components(config_path: Optional[Path] = None) -> "AppContainer":
    """Load settings and build the container with configured clients."""
    settings = _load_settings(config_path)
    exchange_clients = _create_exchange_clients_from_settings(settings)
    return _build_container(settings, exchange_clients)


def _resolve_client(container: "AppContainer", exchange: str) -> "BaseExchangeClient":
    name = exchange.lower()
    if name not in container.exchange_clients:
        # Public calls work without configuration
        container.exchange_clients[name] = _create_public_client(name)
    return container.client(name)


def _execute(
    exchange: str,
    config: Optional[Path],
    action: Callable[["BaseExchangeClient"], Awaitable[Any]],
) -> Any:
    async def _run() -> Any:
        container = init_components(config)
        try:
            return await action(_resolve_client(container, exchange))
        finally:
            await container.close()

    try:
        return asyncio.run(_run())
    except (ExchangeError, KeyError, ValueError) as e:
        logger.error("Command failed: %s", e)
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _fmt(value: Decimal | None) -> str:
    if value is None:
        return "-"
    return format(value.normalize(), "f")


@app.command()
def ticker(
    symbol: str = typer.Argument(..., help="Market symbol, e.g. LTC/BTC"),
    exchange: str = ExchangeOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Show the ticker of one market."""
    result = _execute(exchange, config, lambda client: client.get_ticker(symbol))

    table = Table(title=f"{result.symbol} on {exchange}")
    table.add_column("Last", justify="right")
    table.add_column("Bid", justify="right")
    table.add_column("Ask", justify="right")
    table.add_column(f"Volume ({result.volume.converted_symbol})", justify="right")
    table.add_column(f"Volume ({result.volume.base_symbol})", justify="right")
    table.add_row(
        _fmt(result.last),
        _fmt(result.bid),
        _fmt(result.ask),
        _fmt(result.volume.converted_volume),
        _fmt(result.volume.base_volume),
    )
    console.print(table)


@app.command()
def tickers(
    limit: int = typer.Option(20, help="Maximum rows to show"),
    exchange: str = ExchangeOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Show tickers of every market."""
    result = _execute(exchange, config, lambda client: client.get_tickers())

    table = Table(title=f"Tickers on {exchange} ({len(result)} markets)")
    table.add_column("Symbol")
    table.add_column("Last", justify="right")
    table.add_column("Bid", justify="right")
    table.add_column("Ask", justify="right")
    for name in sorted(result)[:limit]:
        item = result[name]
        table.add_row(name, _fmt(item.last), _fmt(item.bid), _fmt(item.ask))
    console.print(table)


@app.command("orderbook")
def order_book(
    symbol: str = typer.Argument(..., help="Market symbol"),
    depth: int = typer.Option(10, help="Levels per side"),
    exchange: str = ExchangeOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Show bid and ask ladders."""
    result = _execute(exchange, config, lambda client: client.get_order_book(symbol, depth))

    table = Table(title=f"{symbol} order book")
    table.add_column("Bid amount", justify="right")
    table.add_column("Bid", justify="right", style="green")
    table.add_column("Ask", justify="right", style="red")
    table.add_column("Ask amount", justify="right")
    for i in range(max(len(result.bids), len(result.asks))):
        bid = result.bids[i] if i < len(result.bids) else None
        ask = result.asks[i] if i < len(result.asks) else None
        table.add_row(
            _fmt(bid.amount) if bid else "",
            _fmt(bid.price) if bid else "",
            _fmt(ask.price) if ask else "",
            _fmt(ask.amount) if ask else "",
        )
    console.print(table)


@app.command()
def trades(
    symbol: str = typer.Argument(..., help="Market symbol"),
    hour: bool = typer.Option(False, "--hour", help="Use the one-hour window instead of the last minute"),
    exchange: str = ExchangeOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Show recent trades."""
    if hour:
        result = _execute(exchange, config, lambda client: client.get_historical_trades(symbol))
    else:
        result = _execute(exchange, config, lambda client: client.get_recent_trades(symbol))

    table = Table(title=f"{symbol} trades ({len(result)})")
    table.add_column("Id")
    table.add_column("Time")
    table.add_column("Side")
    table.add_column("Price", justify="right")
    table.add_column("Amount", justify="right")
    for trade in result:
        table.add_row(
            str(trade.trade_id),
            trade.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            trade.side.value,
            _fmt(trade.price),
            _fmt(trade.amount),
        )
    console.print(table)


@app.command()
def markets(
    exchange: str = ExchangeOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Show trading rules of every market."""
    result = _execute(exchange, config, lambda client: client.get_markets())

    table = Table(title=f"Markets on {exchange}")
    table.add_column("Symbol")
    table.add_column("Min quantity", justify="right")
    table.add_column("Price step", justify="right")
    for market in result:
        table.add_row(market.symbol.value, _fmt(market.min_trade_size), _fmt(market.price_step_size))
    console.print(table)


@app.command()
def currencies(
    exchange: str = ExchangeOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Show currencies and wallet status."""
    result = _execute(exchange, config, lambda client: client.get_currencies())

    table = Table(title=f"Currencies on {exchange}")
    table.add_column("Code")
    table.add_column("Name")
    table.add_column("Wallet")
    table.add_column("Withdraw fee", justify="right")
    for code in sorted(result):
        item = result[code]
        style = "green" if item.deposit_enabled else "yellow"
        table.add_row(code, item.full_name, f"[{style}]{item.wallet_status}[/{style}]", _fmt(item.tx_fee))
    console.print(table)


@app.command()
def balances(
    tradable: bool = typer.Option(False, "--tradable", help="Show amounts available for trading"),
    exchange: str = ExchangeOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Show account balances."""
    if tradable:
        result = _execute(exchange, config, lambda client: client.get_tradable_balances())
    else:
        result = _execute(exchange, config, lambda client: client.get_balances())

    if not result:
        console.print("[yellow]No balances[/yellow]")
        return

    table = Table(title="Tradable balances" if tradable else "Total balances")
    table.add_column("Currency")
    table.add_column("Amount", justify="right")
    for currency in sorted(result):
        table.add_row(currency, _fmt(result[currency]))
    console.print(table)


@app.command()
def deposit_address(
    currency: str = typer.Argument(..., help="Currency code, e.g. BTC"),
    exchange: str = ExchangeOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Show the deposit address of a currency."""
    result = _execute(exchange, config, lambda client: client.get_deposit_address(currency))
    if result is None:
        console.print(f"[yellow]No deposit address for {currency}[/yellow]")
        raise typer.Exit(1)

    console.print(f"Address: {result.address}")
    if result.address_tag:
        console.print(f"Tag: {result.address_tag}")


def _orders_table(title: str, orders: list) -> Table:
    table = Table(title=title)
    table.add_column("Id")
    table.add_column("Symbol")
    table.add_column("Side")
    table.add_column("Status")
    table.add_column("Price", justify="right")
    table.add_column("Amount", justify="right")
    table.add_column("Filled", justify="right")
    for order in orders:
        table.add_row(
            order.order_id,
            order.symbol.value if order.symbol else "-",
            order.side.value,
            order.status.value,
            _fmt(order.price),
            _fmt(order.amount),
            _fmt(order.amount_filled),
        )
    return table


@app.command()
def order(
    order_id: str = typer.Argument(..., help="Order id"),
    exchange: str = ExchangeOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Show one order."""
    result = _execute(exchange, config, lambda client: client.get_order_details(order_id))
    if result is None:
        console.print(f"[yellow]Order {order_id} not found[/yellow]")
        raise typer.Exit(1)
    console.print(_orders_table(f"Order {order_id}", [result]))


@app.command()
def open_orders(
    symbol: Optional[str] = typer.Option(None, help="Restrict to one market"),
    exchange: str = ExchangeOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Show open orders."""
    result = _execute(exchange, config, lambda client: client.get_open_orders(symbol))
    console.print(_orders_table(f"Open orders ({len(result)})", result))


@app.command()
def cancel(
    order_id: str = typer.Argument(..., help="Order id"),
    exchange: str = ExchangeOption,
    config: Optional[Path] = ConfigOption,
) -> None:
    """Cancel an order. Orders that no longer exist are ignored."""
    _execute(exchange, config, lambda client: client.cancel_order(order_id))
    console.print(f"[green]✓[/green] Cancel request for {order_id} done")
