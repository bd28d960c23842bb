"""Shell argument escaping.

Turns any string into a token the local shell reads back as exactly one
literal argument. Values should already have passed validation; escaping is
the last step before a command line is assembled.
"""

from __future__ import annotations

import os
import re
from typing import Iterable

# A run of backslashes followed by a double quote, or ending the string.
_WINDOWS_BACKSLASH_RUN = re.compile(r'(\\*)("|\Z)')


def _is_windows() -> bool:
    return os.name == "nt"


def escape_posix_arg(value: str) -> str:
    """Single-quote ``value`` for a POSIX shell.

    Inside single quotes nothing is special except the quote itself, which
    is written as close-quote, escaped quote, open-quote.
    """
    _require_str(value)
    return "'" + value.replace("'", "'\\''") + "'"


def escape_windows_arg(value: str) -> str:
    """Double-quote ``value`` following the CommandLineToArgvW rules.

    Backslashes are literal unless they precede a double quote, so runs
    before a quote (and before the closing quote we add) are doubled.
    """
    _require_str(value)

    def _double(match: "re.Match[str]") -> str:
        slashes, quote = match.group(1), match.group(2)
        if quote:
            return slashes * 2 + '\\"'
        return slashes * 2

    return '"' + _WINDOWS_BACKSLASH_RUN.sub(_double, value) + '"'


def escape_shell_arg(value: str) -> str:
    """Escape ``value`` for the shell of the machine we are running on.

    Raises:
        TypeError: If ``value`` is not a string.
    """
    if _is_windows():
        return escape_windows_arg(value)
    return escape_posix_arg(value)


def join_shell_args(args: Iterable[str]) -> str:
    """Escape each argument and join them into one command-line fragment."""
    return " ".join(escape_shell_arg(arg) for arg in args)


def _require_str(value) -> None:
    if not isinstance(value, str):
        raise TypeError("escape_shell_arg requires a string argument")
