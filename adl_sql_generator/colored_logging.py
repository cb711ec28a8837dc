"""
Colored console logging for the ADL SQL generator.

Messages are colored by level; INFO lines produced through the log_* helpers
get their own colors so the phases of a run stand out on a terminal.
"""

import logging
import sys
from typing import Optional


class ColoredFormatter(logging.Formatter):
    """
    Logging formatter that adds ANSI color codes to log messages.

    Errors and warnings are always colored by level; INFO and DEBUG lines are
    colored by the marker the log_* helpers put in front of them.
    """

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }

    SPECIAL_COLORS = {
        'success': '\033[92m',    # Bright Green
        'progress': '\033[94m',   # Bright Blue
        'highlight': '\033[96m',  # Bright Cyan
    }

    SUCCESS_MARKER = "✓"
    PROGRESS_MARKER = "→"
    HIGHLIGHT_MARKER = "•"
    SECTION_RULE = "=" * 60

    RESET = '\033[0m'
    BOLD = '\033[1m'

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = True, stream=None):
        """
        Args:
            fmt: Log format string (uses "LEVEL: message" if None)
            use_colors: Whether to use colors at all
            stream: Stream the handler writes to; colors are only used on a TTY
        """
        if fmt is None:
            fmt = "%(levelname)s: %(message)s"
        super().__init__(fmt)

        stream = stream if stream is not None else sys.stderr
        self.use_colors = use_colors and hasattr(stream, 'isatty') and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted_message = super().format(record)
        if not self.use_colors:
            return formatted_message

        color = self._color_for(record)
        if color:
            formatted_message = f"{color}{formatted_message}{self.RESET}"
        return formatted_message

    def _color_for(self, record: logging.LogRecord) -> str:
        if record.levelname in ('ERROR', 'CRITICAL', 'WARNING'):
            return self.COLORS[record.levelname]

        message = record.getMessage().lstrip()
        if message.startswith(self.SUCCESS_MARKER):
            return self.SPECIAL_COLORS['success'] + self.BOLD
        if message.startswith(self.PROGRESS_MARKER):
            return self.SPECIAL_COLORS['progress']
        if message.startswith(self.HIGHLIGHT_MARKER):
            return self.SPECIAL_COLORS['highlight']
        if self._is_section_message(message):
            return self.BOLD + self.SPECIAL_COLORS['highlight']
        if record.levelname == 'DEBUG':
            return self.COLORS['DEBUG']
        # Plain INFO stays uncolored
        return ''

    def _is_section_message(self, message: str) -> bool:
        """Section headers are the rule lines and the title between them."""
        return message.strip() == self.SECTION_RULE or (message.startswith("  ") and message.isupper())


def setup_colored_logging(level: int = logging.INFO, use_colors: bool = True) -> None:
    """
    Route all logging to stderr through a ColoredFormatter.

    Args:
        level: Logging level (default: INFO)
        use_colors: Whether to use colors (default: True)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers to avoid duplication
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ColoredFormatter(use_colors=use_colors, stream=sys.stderr))
    console_handler.setLevel(level)

    root_logger.addHandler(console_handler)
    root_logger.setLevel(level)


def log_success(logger: logging.Logger, message: str) -> None:
    logger.info(f"{ColoredFormatter.SUCCESS_MARKER} {message}")


def log_progress(logger: logging.Logger, message: str) -> None:
    logger.info(f"{ColoredFormatter.PROGRESS_MARKER} {message}")


def log_highlight(logger: logging.Logger, message: str) -> None:
    logger.info(f"{ColoredFormatter.HIGHLIGHT_MARKER} {message}")


def log_section(logger: logging.Logger, section_name: str) -> None:
    """Log a section header framed by rule lines."""
    logger.info(ColoredFormatter.SECTION_RULE)
    logger.info(f"  {section_name.upper()}")
    logger.info(ColoredFormatter.SECTION_RULE)
