"""Tests for CLI command parsing and output."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, Mock, patch

from typer.testing import CliRunner

from coinbridge.cli import app
from coinbridge.di import build_container
from coinbridge.exchanges.errors import MissingCredentialsError
from coinbridge.exchanges.protocol import (
    OrderBook,
    OrderBookEntry,
    Symbol,
    Ticker,
    TickerVolume,
)
from coinbridge.settings import Settings

runner = CliRunner()


def make_client():
    client = Mock()
    client.close = AsyncMock()
    return client


def container_with(client):
    return build_container(Settings(), {"livecoin": client})


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Exchange connector CLI" in result.output
    for command in ("ticker", "orderbook", "balances", "open-orders", "deposit-address"):
        assert command in result.output


def test_ticker_command():
    client = make_client()
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    client.get_ticker = AsyncMock(return_value=Ticker(
        symbol=Symbol("LTC/BTC", "LTC", "BTC"),
        last=Decimal("0.0123"),
        bid=Decimal("0.0122"),
        ask=Decimal("0.0124"),
        volume=TickerVolume(Decimal("100"), "LTC", Decimal("1.23"), "BTC", now),
    ))

    with patch("coinbridge.cli.init_components", return_value=container_with(client)):
        result = runner.invoke(app, ["ticker", "LTC/BTC"])

    assert result.exit_code == 0, result.output
    assert "0.0123" in result.output
    client.get_ticker.assert_awaited_once_with("LTC/BTC")
    client.close.assert_awaited_once()


def test_orderbook_depth_option():
    client = make_client()
    client.get_order_book = AsyncMock(return_value=OrderBook(
        bids=(OrderBookEntry(Decimal("0.5"), Decimal("2")),),
        asks=(),
        timestamp=None,
    ))

    with patch("coinbridge.cli.init_components", return_value=container_with(client)):
        result = runner.invoke(app, ["orderbook", "LTC/BTC", "--depth", "5"])

    assert result.exit_code == 0, result.output
    client.get_order_book.assert_awaited_once_with("LTC/BTC", 5)


def test_tradable_balances():
    client = make_client()
    client.get_tradable_balances = AsyncMock(return_value={"BTC": Decimal("0.5")})

    with patch("coinbridge.cli.init_components", return_value=container_with(client)):
        result = runner.invoke(app, ["balances", "--tradable"])

    assert result.exit_code == 0, result.output
    assert "BTC" in result.output
    assert "0.5" in result.output


def test_balances_without_credentials_fails():
    client = make_client()
    client.get_balances = AsyncMock(side_effect=MissingCredentialsError("livecoin requires an API key pair"))

    with patch("coinbridge.cli.init_components", return_value=container_with(client)):
        result = runner.invoke(app, ["balances"])

    assert result.exit_code == 1
    assert "Error" in result.output
    client.close.assert_awaited_once()


def test_unknown_exchange_fails():
    with patch("coinbridge.cli.init_components", return_value=build_container(Settings())):
        result = runner.invoke(app, ["ticker", "LTC/BTC", "--exchange", "nope"])

    assert result.exit_code == 1
    assert "Unsupported exchange" in result.output


def test_missing_order():
    client = make_client()
    client.get_order_details = AsyncMock(return_value=None)

    with patch("coinbridge.cli.init_components", return_value=container_with(client)):
        result = runner.invoke(app, ["order", "88504958"])

    assert result.exit_code == 1
    assert "not found" in result.output
