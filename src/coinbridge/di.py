from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .exchanges.base import BaseExchangeClient

if TYPE_CHECKING:
    from .settings import Settings


@dataclass(slots=True)
class AppContainer:
    settings: "Settings"
    exchange_clients: dict[str, BaseExchangeClient] = field(default_factory=dict)

    def client(self, name: str) -> BaseExchangeClient:
        """Return a configured client or raise KeyError naming the known ones."""
        try:
            return self.exchange_clients[name.lower()]
        except KeyError:
            known = ", ".join(sorted(self.exchange_clients)) or "none"
            raise KeyError(f"Exchange '{name}' not configured (configured: {known})") from None

    async def close(self) -> None:
        for client in self.exchange_clients.values():
            await client.close()


def build_container(
    settings: "Settings",
    exchange_clients: dict[str, BaseExchangeClient] | None = None,
) -> AppContainer:
    """Build application container with exchange clients."""
    return AppContainer(settings=settings, exchange_clients=exchange_clients or {})
