"""Rich logging integration for piececache.

Provides a Rich console handler with correlation ID support and a file
formatter that strips Rich markup.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

# Rich markup tags like [red], [bold], [#ff69b4] and their closing forms
_MARKUP_PATTERN = re.compile(r"\[/?[^\]]+\]")


class CorrelationRichHandler(RichHandler):
    """RichHandler with correlation ID support and cache event highlighting.

    Method names are colored pink (#ff69b4) and cache events such as
    evictions and flushes are colored bright cyan.
    """

    LEVEL_COLORS: dict[str, str] = {
        "DEBUG": "dim",
        "INFO": "cyan",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "bold red",
    }

    ACTION_PATTERNS = [
        r"Evicting block",
        r"Flushed \d+ buffered block\(s\)",
        r"Disposing memory writer",
    ]

    def __init__(
        self,
        *args: Any,
        console: Console | None = None,
        show_colors: bool = True,
        **kwargs: Any,
    ) -> None:
        """Initialize RichHandler.

        Args:
            *args: Positional arguments for RichHandler
            console: Optional Rich Console instance
            show_colors: Whether to colorize method names and cache events
            **kwargs: Keyword arguments for RichHandler

        """
        if console is None:
            console = Console(file=sys.stdout, markup=True)

        self.show_colors = show_colors

        # RichHandler does not render markup in messages unless asked to
        kwargs.setdefault("markup", True)
        super().__init__(*args, console=console, **kwargs)

    def _colorize_action_text(self, message: str) -> str:
        """Wrap cache event text in bright cyan markup."""
        for pattern in self.ACTION_PATTERNS:
            matches = list(re.finditer(pattern, message))
            # Walk backwards so earlier spans keep their indices
            for match in reversed(matches):
                start, end = match.span()
                message = (
                    message[:start]
                    + f"[bright_cyan]{message[start:end]}[/bright_cyan]"
                    + message[end:]
                )
        return message

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record with correlation ID and method name coloring."""
        try:
            if not hasattr(record, "correlation_id"):
                from piececache.utils.logging_config import get_correlation_id

                record.correlation_id = get_correlation_id() or "no-correlation-id"

            if self.show_colors:
                message = self._colorize_action_text(record.getMessage())
                func_name = getattr(record, "funcName", None)
                if func_name:
                    message = f"[#ff69b4]{func_name}[/#ff69b4] {message}"
                record.msg = message
                record.args = ()

            super().emit(record)
        except Exception:
            self.handleError(record)

    def handleError(self, record: logging.LogRecord) -> None:
        """Report logging failures on stderr without re-entering logging."""
        try:
            sys.stderr.write(
                f"Logging error (suppressed to prevent circular errors): "
                f"{record.levelname} {record.name}: {record.getMessage()}\n"
            )
            sys.stderr.flush()
        except Exception:  # noqa: S110
            pass


def strip_rich_markup(text: str) -> str:
    """Strip Rich markup from text for file logging.

    Args:
        text: Text with Rich markup

    Returns:
        Text without Rich markup

    """
    return _MARKUP_PATTERN.sub("", text)


class FileFormatter(logging.Formatter):
    """Formatter for file output that strips Rich markup."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record, stripping Rich markup for file output."""
        return strip_rich_markup(super().format(record))


def create_rich_handler(
    console: Console | None = None,
    level: int | str = logging.INFO,
    show_path: bool = False,
    rich_tracebacks: bool = True,
    show_colors: bool = True,
) -> logging.Handler:
    """Create a RichHandler with correlation ID support.

    Args:
        console: Optional Rich Console instance
        level: Log level
        show_path: Whether to show file paths in log output
        rich_tracebacks: Whether to use rich tracebacks
        show_colors: Whether to colorize method names and cache events

    Returns:
        Configured RichHandler instance

    """
    if console is None:
        console = Console(
            file=sys.stdout,
            force_interactive=False,
            legacy_windows=False,
            markup=True,
        )

    return CorrelationRichHandler(
        console=console,
        level=level,
        show_path=show_path,
        rich_tracebacks=rich_tracebacks,
        show_colors=show_colors,
    )
