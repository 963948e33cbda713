"""Logging for protodto with Rich console output."""

import logging
from collections.abc import Iterable
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table


class ProtodtoLogger(logging.Logger):
    """
    Logger that combines standard logging with a few CLI formatting helpers.

    Standard levels (debug, info, warning, error, critical) report engine progress and
    diagnostics. The helpers (success, hint, rule, key_value, table) are used by the
    command line interface to present results.
    """

    def __init__(self, name: str, level: int = logging.INFO) -> None:
        """
        Initialize the logger.

        Args:
            name: Logger name
            level: Initial log level
        """
        super().__init__(name, level)
        self.console = Console(stderr=True)

        handler = RichHandler(
            console=self.console,
            rich_tracebacks=True,
            show_time=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        self.addHandler(handler)

    def print(self, message: str) -> None:
        """Print a plain message (with Rich markup support)."""
        self.console.print(message)

    def success(self, message: str) -> None:
        """
        Print a success message in green with a checkmark icon.

        Args:
            message: Message to display
        """
        self.print(f"[green]✓[/green] {message}")

    def hint(self, message: str) -> None:
        """Print a dimmed secondary message."""
        self.print(f"[dim]{message}[/dim]")

    def rule(self, title: str, style: str = "bold blue") -> None:
        """
        Print a horizontal rule with a title.

        Args:
            title: Title text for the rule
            style: Rich style string (default: "bold blue")
        """
        self.console.rule(f"[{style}]{title}")

    def table(self, title: str, rows: Iterable[tuple[str, Any]], headers: tuple[str, str] = ("Name", "Value")) -> None:
        """
        Print two-column rows as a table, e.g. output units and their declaration counts.

        Args:
            title: Table title
            rows: (name, value) pairs in display order
            headers: Column headers
        """
        table = Table(title=title, title_justify="left")
        table.add_column(headers[0], style="cyan", no_wrap=True)
        table.add_column(headers[1])
        for name, value in rows:
            table.add_row(name, str(value))
        self.console.print(table)

    def key_value(self, key: str, value: Any, key_style: str = "dim") -> None:
        """
        Print a formatted key-value pair, e.g. "Type: .pkg.Message".

        Args:
            key: The key/label to display
            value: The value to display
            key_style: Style for the key (default: "dim")
        """
        self.print(f"[{key_style}]{key}:[/{key_style}] {value}")


def get_logger(name: str = "protodto") -> ProtodtoLogger:
    """
    Get or create a protodto logger instance.

    Args:
        name: Logger name (default: "protodto")

    Returns:
        ProtodtoLogger instance
    """
    previous = logging.getLoggerClass()
    logging.setLoggerClass(ProtodtoLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        logging.setLoggerClass(previous)

    return logger  # type: ignore[return-value]
