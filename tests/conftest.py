"""Pytest configuration and fixtures."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import pytest

from coinbridge.exchanges.livecoin import LivecoinClient

FIXED_NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


@dataclass
class RecordedRequest:
    method: str
    path: str
    headers: dict[str, str]
    body: str | None

    @property
    def route(self) -> str:
        return self.path.split("?")[0]

    @property
    def query(self) -> str:
        return self.path.partition("?")[2]


@dataclass
class FakeTransport:
    """In-memory transport answering by route (path without query string)."""

    routes: dict[str, Any] = field(default_factory=dict)
    requests: list[RecordedRequest] = field(default_factory=list)
    closed: bool = False

    def add(self, route: str, response: Any) -> None:
        self.routes[route] = response

    async def send(self, method, path, headers=None, body=None):
        request = RecordedRequest(method, path, dict(headers or {}), body)
        self.requests.append(request)
        if request.route not in self.routes:
            raise AssertionError(f"Unexpected request: {method} {path}")
        response = self.routes[request.route]
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def api_key():
    """Test API key."""
    return "test_api_key_123456"


@pytest.fixture
def api_secret():
    """Test API secret."""
    return "test_api_secret_789012"


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(api_key, api_secret, transport):
    """Authenticated Livecoin client on the fake transport with a fixed clock."""
    return LivecoinClient(api_key, api_secret, transport=transport, clock=lambda: FIXED_NOW)


@pytest.fixture
def public_client(transport):
    """Livecoin client without credentials."""
    return LivecoinClient(transport=transport, clock=lambda: FIXED_NOW)


@pytest.fixture
def sample_ticker():
    return {
        "symbol": "LTC/BTC",
        "last": 0.008,
        "high": 0.0082,
        "low": 0.0078,
        "volume": 100,
        "vwap": 0.00795,
        "max_bid": 0.0082,
        "min_ask": 0.0078,
        "best_bid": 0.0079,
        "best_ask": 0.0081,
    }


@pytest.fixture
def sample_trade():
    return {"time": 1409935047, "id": 99451, "price": 350, "quantity": 2.85714285, "type": "BUY"}


@pytest.fixture
def sample_balances():
    return [
        {"type": "total", "currency": "USD", "value": 20},
        {"type": "available", "currency": "USD", "value": 0},
        {"type": "trade", "currency": "USD", "value": 10},
        {"type": "total", "currency": "BTC", "value": 0.5},
        {"type": "available", "currency": "BTC", "value": 0.25},
        {"type": "available_withdrawal", "currency": "BTC", "value": 0.25},
    ]


@pytest.fixture
def sample_order():
    return {
        "id": 88504958,
        "client_id": 1150,
        "status": "CANCELLED",
        "symbol": "DASH/USD",
        "price": 1.5,
        "quantity": 1.2,
        "remaining_quantity": 1.2,
        "blocked": 1.8018,
        "blocked_remain": 0,
        "commission_rate": 0.001,
        "trades": None,
    }


@pytest.fixture
def sample_client_order():
    return {
        "id": 4910,
        "currencyPair": "BTC/USD",
        "goodUntilTime": 0,
        "type": "MARKET_SELL",
        "orderStatus": "EXECUTED",
        "issueTime": 1409920636701,
        "price": None,
        "quantity": 2.85714285,
        "remainingQuantity": 0,
        "commission": None,
        "commissionRate": 0.005,
        "lastModificationTime": 1409920636701,
    }


@pytest.fixture
def sample_transaction():
    return {
        "id": "OK521780496",
        "type": "DEPOSIT",
        "date": 1431882524782,
        "amount": 27190,
        "fee": 269.2079208,
        "fixedCurrency": "RUR",
        "taxCurrency": "RUR",
        "variableAmount": None,
        "variableCurrency": None,
        "external": "OkPay",
        "login": None,
    }
