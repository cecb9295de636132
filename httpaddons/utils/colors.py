"""Colour tables for the access log.

The tables are read-only mappings built at import time; the middleware
takes them as constructor arguments so they can be replaced per app.
"""

from types import MappingProxyType
from typing import Mapping

from colorama import Fore, Style

DEFAULT_COLOR = Fore.RESET

METHOD_COLORS: Mapping[str, str] = MappingProxyType({
    "GET": Fore.BLUE,
    "POST": Fore.CYAN,
    "PUT": Fore.YELLOW,
    "DELETE": Fore.RED,
    "PATCH": Fore.GREEN,
    "HEAD": Fore.MAGENTA,
    "OPTIONS": Fore.WHITE,
})

# Status buckets: (low inclusive, high exclusive) -> colour. Anything
# outside these ranges, including an unset status, uses STATUS_DEFAULT_COLOR.
STATUS_COLORS: Mapping[tuple, str] = MappingProxyType({
    (200, 300): Fore.GREEN,
    (300, 400): Fore.CYAN,
    (400, 500): Fore.YELLOW,
})

STATUS_DEFAULT_COLOR = Fore.RED


def color_for_method(method: str, table: Mapping[str, str] = METHOD_COLORS) -> str:
    """Return the display colour for an HTTP method."""
    return table.get(method, DEFAULT_COLOR)


def color_for_status(
    code: int,
    table: Mapping[tuple, str] = STATUS_COLORS,
    default: str = STATUS_DEFAULT_COLOR,
) -> str:
    """Return the display colour for a status code's range bucket."""
    for (low, high), color in table.items():
        if low <= code < high:
            return color
    return default


def render(text: str, color: str, enabled: bool = True) -> str:
    """Wrap text in an ANSI colour sequence (plain text when disabled)."""
    if not enabled:
        return text
    return f"{color}{text}{Style.RESET_ALL}"
