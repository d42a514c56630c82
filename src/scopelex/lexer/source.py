# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Splitting raw source text into measured physical lines."""

import re
from collections.abc import Iterator
from dataclasses import dataclass

# ###############
# Public Interface
# ###############

DEFAULT_TAB_WIDTH = 4


@dataclass(frozen=True)
class LogicalLine:
    """One physical source line with its measured indentation.

    Attributes:
        number: 1-based physical line number.
        text: Raw line content without its terminator.
        ending: The line terminator (``"\\n"``, ``"\\r\\n"``, ``"\\r"``), or an
            empty string for a final line without one.
        indent: Width of the leading whitespace with tabs expanded.
    """

    number: int
    text: str
    ending: str
    indent: int

    @property
    def is_blank(self) -> bool:
        """True if the line holds nothing but whitespace."""
        return not self.text.strip()

    @property
    def is_comment_only(self) -> bool:
        """True if the first non-blank character starts a ``#`` comment."""
        return self.text.lstrip().startswith("#")


def logical_lines(source: str, tab_width: int = DEFAULT_TAB_WIDTH) -> Iterator[LogicalLine]:
    """Yield a LogicalLine for every physical line of *source*, in order.

    Each call starts again from the first line. Blank and comment-only lines
    are yielded like any other line.

    Args:
        source: The full source text.
        tab_width: Column multiple a tab advances to when measuring indentation.
    """
    pos = 0
    number = 0
    while pos < len(source):
        match = _LINE_PATTERN.match(source, pos)
        assert match is not None
        pos = match.end()
        number += 1
        text = match.group(1)
        yield LogicalLine(
            number=number,
            text=text,
            ending=match.group(2) or "",
            indent=measure_indent(text, tab_width),
        )


def measure_indent(text: str, tab_width: int = DEFAULT_TAB_WIDTH) -> int:
    """Return the width of the leading spaces and tabs of *text*."""
    width = 0
    for ch in text:
        if ch == " ":
            width += 1
        elif ch == "\t":
            width += tab_width - width % tab_width
        else:
            break
    return width


# ################
# Implementation
# ################

# Only CR, LF and CRLF end a line; other separators stay part of the text.
_LINE_PATTERN = re.compile(r"([^\r\n]*)(\r\n|\r|\n)?")
