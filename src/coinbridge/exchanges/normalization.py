"""Symbol normalization utilities for exchange symbols."""

from __future__ import annotations

import logging
from typing import Any

from .errors import MappingError
from .protocol import Symbol

logger = logging.getLogger(__name__)

SEPARATOR = "/"
EXCHANGE_SEPARATORS = ("_", "-")


def normalize_symbol(symbol: str | Symbol | None) -> Symbol:
    """Normalize a symbol to the canonical ``MARKET/BASE`` form.

    Converts the exchange separators to ``/``:
    - LTC_BTC -> LTC/BTC
    - LTC-BTC -> LTC/BTC
    - LTC/BTC -> LTC/BTC (unchanged)

    Anything else passes through as a single-token symbol. Never raises.

    Args:
        symbol: Symbol in any format

    Returns:
        Normalized Symbol
    """
    if isinstance(symbol, Symbol):
        symbol = symbol.value
    if symbol is None:
        return Symbol("")
    if not isinstance(symbol, str):
        symbol = str(symbol)

    value = symbol.strip()
    for sep in EXCHANGE_SEPARATORS:
        value = value.replace(sep, SEPARATOR)

    parts = value.split(SEPARATOR)
    if len(parts) == 2 and parts[0] and parts[1]:
        return Symbol(value, parts[0], parts[1])
    return Symbol(value)


def split_symbol(symbol: str | Symbol) -> tuple[str, str]:
    """Return the (market, base) legs of a symbol.

    Raises:
        MappingError: If the symbol does not have two legs
    """
    normalized = normalize_symbol(symbol)
    if not normalized.has_legs:
        raise MappingError(f"Symbol {normalized.value!r} has no market/base legs", field="symbol")
    return normalized.market, normalized.base


def to_wire(symbol: str | Symbol, separator: str = SEPARATOR) -> str:
    """Render a symbol with the exchange's separator."""
    normalized = normalize_symbol(symbol)
    if not normalized.has_legs:
        return normalized.value
    return f"{normalized.market}{separator}{normalized.base}"


def check_symbol_mismatch(
    expected: str,
    actual: str,
    logger_func: Any = None,
) -> bool:
    """Check if two symbols represent the same trading pair.

    Logs a warning if they don't match.

    Args:
        expected: Expected symbol
        actual: Actual symbol
        logger_func: Logger function (defaults to logging.warning)

    Returns:
        True if symbols match, False otherwise
    """
    if logger_func is None:
        logger_func = logger.warning

    expected_normalized = normalize_symbol(expected)
    actual_normalized = normalize_symbol(actual)

    if expected_normalized != actual_normalized:
        logger_func(
            f"Symbol mismatch: expected {expected} ({expected_normalized}), "
            f"got {actual} ({actual_normalized})"
        )
        return False

    return True
