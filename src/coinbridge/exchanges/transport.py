"""HTTP transport used by exchange adapters."""

from __future__ import annotations

import asyncio
import json
import logging
from decimal import Decimal
from typing import Any, Protocol

import aiohttp

from .errors import HTTPStatusError, MalformedResponseError, NetworkError

logger = logging.getLogger(__name__)

_ERROR_BODY_LIMIT = 240


class ProxyConfig:
    """HTTP proxy configuration."""

    def __init__(self, url: str | None = None, username: str | None = None, password: str | None = None):
        self.url = url
        self.username = username
        self.password = password

    @property
    def proxy_url(self) -> str | None:
        if not self.url:
            return None
        if self.username and self.password:
            protocol = self.url.split("://")[0] if "://" in self.url else "http"
            rest = self.url.split("://")[1] if "://" in self.url else self.url
            return f"{protocol}://{self.username}:{self.password}@{rest}"
        return self.url


class Transport(Protocol):
    """Sends one request and returns the decoded JSON body."""

    async def send(
        self,
        method: str,
        path: str,
        headers: dict[str, str] | None = None,
        body: str | None = None,
    ) -> Any:
        ...

    async def close(self) -> None:
        ...


def decode_json(text: str) -> Any:
    """Decode a JSON body keeping every non-integer number as Decimal."""
    try:
        return json.loads(text, parse_float=Decimal)
    except ValueError as exc:
        raise MalformedResponseError(f"Invalid JSON body: {text[:_ERROR_BODY_LIMIT]!r}") from exc


class AiohttpTransport:
    """aiohttp-backed transport with a lazily created session."""

    def __init__(
        self,
        base_url: str,
        *,
        proxy: ProxyConfig | None = None,
        timeout_seconds: float = 30.0,
        user_agent: str = "coinbridge/1.0",
    ):
        self.base_url = base_url.rstrip("/")
        self.proxy = proxy or ProxyConfig()
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self.session: aiohttp.ClientSession | None = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            connector = aiohttp.TCPConnector()
            self.session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            )
        return self.session

    async def send(
        self,
        method: str,
        path: str,
        headers: dict[str, str] | None = None,
        body: str | None = None,
    ) -> Any:
        session = await self._ensure_session()
        url = f"{self.base_url}{path}"
        request_headers = {"User-Agent": self.user_agent}
        request_headers.update(headers or {})

        logger.debug("%s %s", method, path.split("?")[0])
        try:
            async with session.request(
                method,
                url,
                data=body,
                headers=request_headers,
                proxy=self.proxy.proxy_url,
            ) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise HTTPStatusError(resp.status, text[:_ERROR_BODY_LIMIT])
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise NetworkError(f"{method} {url.split('?')[0]} failed: {exc}") from exc

        return decode_json(text)

    async def close(self) -> None:
        if self.session:
            await self.session.close()
            self.session = None
