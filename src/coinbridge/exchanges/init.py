"""Exchange client initialization from settings."""

from __future__ import annotations

import logging
from typing import Any, Dict

from .base import BaseExchangeClient
from .factory import create_exchange_client
from ..settings import Settings

logger = logging.getLogger(__name__)


def _proxy_options(settings: Settings) -> dict[str, Any] | None:
    proxy = settings.proxy
    if not proxy.enabled or not proxy.url:
        return None
    return {
        "url": proxy.url,
        "username": proxy.username,
        "password": proxy.password.get_secret_value() if proxy.password else None,
    }


def create_exchange_clients_from_settings(settings: Settings) -> Dict[str, BaseExchangeClient]:
    """Create exchange clients from settings configuration."""
    clients: Dict[str, BaseExchangeClient] = {}
    proxy = _proxy_options(settings)

    for exchange_name, exchange_config in settings.exchanges.items():
        if not exchange_config.enabled:
            logger.debug("Exchange %s is disabled, skipping", exchange_name)
            continue

        credentials = exchange_config.credentials
        if not credentials:
            logger.warning("Exchange %s has no credentials configured, private calls will fail", exchange_name)

        options: dict[str, Any] = dict(exchange_config.options)
        if exchange_config.base_url:
            options["base_url"] = exchange_config.base_url
        options["timeout_seconds"] = exchange_config.timeout_seconds

        try:
            client = create_exchange_client(
                exchange=exchange_name,
                api_key=credentials.api_key.get_secret_value() if credentials else None,
                api_secret=credentials.api_secret.get_secret_value() if credentials else None,
                proxy=proxy,
                **options,
            )
            clients[exchange_name] = client
            logger.info("Initialized exchange client for %s", exchange_name)

        except ValueError as e:
            logger.error("Failed to initialize exchange client for %s: %s", exchange_name, e)
            continue

    return clients
