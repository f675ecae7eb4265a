#!/usr/bin/env python3

import logging

from rich.console import Console as RichConsole
from rich.logging import RichHandler


class Console:
    """Simple console wrapper for diagnostics on stderr."""

    def __init__(self, stderr: bool = True):
        self._rich = RichConsole(stderr=stderr)

    def print(self, *args, **kwargs):
        """Print using Rich console."""
        return self._rich.print(*args, **kwargs)

    @property
    def rich(self) -> RichConsole:
        return self._rich


def setup_logging(console: Console, verbose: bool = False) -> None:
    """Route log records for the ctrim package to the console."""
    handler = RichHandler(console=console.rich, show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("ctrim")
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
