from __future__ import annotations

import logging
import sys

from .logging import configure_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Console entry point: ``coinbridge <command> ...``."""
    if argv is None:
        argv = sys.argv[1:]

    configure_logging()

    # Import CLI app here to avoid circular import
    from .cli import run_cli

    try:
        run_cli(argv)
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0
