# src/pipeline/selection.py - v2
"""Interactive suggestion picker.

Renders the suggestion list on stderr (stdout is reserved for the
generated test) and reads a single 1-based index. A bad answer ends the
invocation; there is no retry loop.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence

from rich.console import Console
from rich.markup import escape

from unitgen.core.errors import InvalidSelectionError
from unitgen.core.models import Suggestion

PROMPT = "Select unit test: "


def parse_selection(raw: str, suggestions: Sequence[Suggestion]) -> Suggestion:
    """Map a 1-based index typed by the user to a suggestion.

    Raises:
        InvalidSelectionError: raw is not an integer in 1..len(suggestions).
    """
    value = raw.strip()
    # int() alone would also take "+1", "1_0" and non-ASCII digits.
    if not (value.isascii() and value.removeprefix("-").isdigit()):
        raise InvalidSelectionError(f"invalid input: {value!r}")
    index = int(value)

    if index <= 0 or index > len(suggestions):
        raise InvalidSelectionError(f"invalid index: {index}")
    return suggestions[index - 1]


def render_suggestions(suggestions: Sequence[Suggestion], console: Console) -> None:
    console.print("\nSuggested Unit Tests:")
    for i, s in enumerate(suggestions, start=1):
        console.print(f"\n{i}. {escape(s.title)}", highlight=False)
        for reason in s.reasons:
            console.print(f"   - {escape(reason)}", style="dim", highlight=False)


def make_console(color: bool = True) -> Console:
    """Console on stderr; color=False strips all styling."""
    return Console(file=sys.stderr, no_color=not color, highlight=False)


def read_line(fd: int | None = None) -> str:
    """Read one line of input straight from the stdin file descriptor.

    sys.stdin is bypassed so a read left pending on an abandoned thread
    holds none of its buffered reader locks at interpreter shutdown.

    Raises:
        EOFError: Input ended before any character was read.
    """
    if fd is None:
        fd = sys.stdin.fileno()
    buf = bytearray()
    while True:
        ch = os.read(fd, 1)
        if not ch:
            if not buf:
                raise EOFError
            break
        if ch == b"\n":
            break
        buf += ch
    return buf.decode("utf-8", errors="replace")


class TerminalSelector:
    """Selection collaborator backed by a terminal."""

    def __init__(
        self,
        console: Console | None = None,
        reader: Callable[[], str] | None = None,
    ) -> None:
        self._console = console or make_console()
        self._reader = reader

    def __call__(self, suggestions: Sequence[Suggestion]) -> Suggestion:
        if not suggestions:
            raise InvalidSelectionError("no suggestions to choose from")
        render_suggestions(suggestions, self._console)
        self._console.print()
        self._console.print(PROMPT, end="")
        try:
            raw = (self._reader or read_line)()
        except EOFError as e:
            raise InvalidSelectionError("no selection entered") from e
        return parse_selection(raw, suggestions)
