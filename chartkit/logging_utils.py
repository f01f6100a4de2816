"""Logging utilities for chartkit.

Provides color-coded, level-filtered output so gate traffic, graph builds and
discovery runs are easy to tell apart in a terminal.
"""

import os
from enum import Enum

from .config import LOG_LEVELS, Config


class Color(Enum):
    """ANSI color codes for terminal output."""

    BLUE = "\033[94m"      # Deterministic computations (graph builds, searches)
    YELLOW = "\033[93m"    # Refusals and warnings
    RED = "\033[91m"       # Errors
    GREEN = "\033[92m"     # Success/completion
    CYAN = "\033[96m"      # Info/metadata

    # Formatting
    BOLD = "\033[1m"
    RESET = "\033[0m"


# Markers for message types (color-blind accessible)
TAG_DEBUG = "[•]"
TAG_WARNING = "[!]"
TAG_ERROR = "[x]"
TAG_SUCCESS = "[✓]"
TAG_INFO = "[i]"


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Wrap text in ANSI color codes if colors are enabled.

    Args:
        text: Text to colorize
        color: Color to apply
        bold: Whether to make text bold

    Returns:
        Colorized text if CHARTKIT_NO_COLOR is not set, otherwise plain text
    """
    if os.getenv("CHARTKIT_NO_COLOR"):
        return text

    prefix = color.value
    if bold:
        prefix = Color.BOLD.value + prefix

    return f"{prefix}{text}{Color.RESET.value}"


def is_enabled(level: str) -> bool:
    """Return True when messages at ``level`` pass the configured threshold."""
    threshold = Config.LOG_LEVEL if Config.LOG_LEVEL in LOG_LEVELS else "INFO"
    return LOG_LEVELS.index(level) >= LOG_LEVELS.index(threshold)


def log_debug(message: str) -> None:
    """Log a deterministic computation step (blue)."""
    if is_enabled("DEBUG"):
        print(colored(f"{TAG_DEBUG} {message}", Color.BLUE))


def log_info(message: str) -> None:
    """Log metadata/info (cyan)."""
    if is_enabled("INFO"):
        print(colored(f"{TAG_INFO} {message}", Color.CYAN))


def log_success(message: str) -> None:
    """Log a success (green)."""
    if is_enabled("INFO"):
        print(colored(f"{TAG_SUCCESS} {message}", Color.GREEN))


def log_warning(message: str) -> None:
    """Log a refusal or recoverable problem (yellow)."""
    if is_enabled("WARNING"):
        print(colored(f"{TAG_WARNING} {message}", Color.YELLOW))


def log_error(message: str) -> None:
    """Log an error (red)."""
    if is_enabled("ERROR"):
        print(colored(f"{TAG_ERROR} {message}", Color.RED, bold=True))
