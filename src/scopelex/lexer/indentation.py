# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Indentation tracking: INDENT/DEDENT tokens and the scope stack.

Scopes are kept in an arena so a frame keeps its identity (its index) after
it has been closed; symbol entries refer to frames by that index.
"""

from dataclasses import dataclass

from scopelex.lexer.diagnostics import (
    EXPECTED_INDENTED_BLOCK,
    UNEXPECTED_INDENT,
    UNMATCHED_DEDENT,
    ErrorKind,
    ErrorReporter,
)
from scopelex.lexer.source import LogicalLine
from scopelex.lexer.statement import Statement
from scopelex.lexer.tokens import BLOCK_KEYWORDS, CONDITION_KEYWORDS, Token, TokenKind

# ###############
# Public Interface
# ###############

GLOBAL_SCOPE = "global"


@dataclass(frozen=True)
class ScopeFrame:
    """One indentation level that has been opened during the scan.

    Attributes:
        index: Position of the frame in the scope arena.
        name: Label taken from the block header (``def``/``class`` name or
            ``"<keyword> line <n>"``).
        width: Indentation width that opened the frame.
        parent: Arena index of the enclosing frame, None for the global frame.
        line: Line that opened the frame, 0 for the global frame.
    """

    index: int
    name: str
    width: int
    parent: int | None
    line: int


class ScopeStack:
    """Open scope frames, innermost last, over an arena of every frame ever opened."""

    def __init__(self) -> None:
        self._frames: list[ScopeFrame] = [ScopeFrame(0, GLOBAL_SCOPE, 0, None, 0)]
        self._open: list[int] = [0]

    @property
    def top(self) -> ScopeFrame:
        """The innermost open frame."""
        return self._frames[self._open[-1]]

    @property
    def depth(self) -> int:
        """Number of open frames; 1 when only the global frame is open."""
        return len(self._open)

    @property
    def frames(self) -> tuple[ScopeFrame, ...]:
        """Every frame opened so far, closed ones included, in opening order."""
        return tuple(self._frames)

    def open_frames(self) -> tuple[ScopeFrame, ...]:
        """The currently open frames, outermost first."""
        return tuple(self._frames[index] for index in self._open)

    def push(self, name: str, width: int, line: int) -> ScopeFrame:
        """Open a new innermost frame and return it."""
        frame = ScopeFrame(len(self._frames), name, width, self.top.index, line)
        self._frames.append(frame)
        self._open.append(frame.index)
        return frame

    def pop(self) -> ScopeFrame:
        """Close the innermost frame and return it.

        Raises:
            IndexError: If only the global frame is open.
        """
        if len(self._open) == 1:
            raise IndexError("The global scope cannot be closed")
        return self._frames[self._open.pop()]

    def __getitem__(self, index: int) -> ScopeFrame:
        return self._frames[index]


@dataclass(frozen=True)
class BlockHeader:
    """A block-opening statement waiting for its indented body.

    Attributes:
        name: Name given to the frame the body will open.
        line: Line of the header statement.
        params: Parameter names to declare inside the body's frame.
    """

    name: str
    line: int
    params: tuple[Token, ...] = ()


class IndentationTracker:
    """Turns indentation changes into INDENT/DEDENT tokens and scope frames.

    Only the first physical line of each statement is passed to
    :meth:`open_line`; blank lines, comment-only lines and continuation lines
    are not measured.
    """

    def __init__(self, reporter: ErrorReporter, scopes: ScopeStack) -> None:
        self._reporter = reporter
        self._scopes = scopes
        self._expecting: BlockHeader | None = None

    @property
    def expecting_indented_block(self) -> bool:
        """True if the last statement opened a block whose body has not started yet."""
        return self._expecting is not None

    def open_line(self, line: LogicalLine) -> tuple[list[Token], BlockHeader | None]:
        """Handle the indentation of a statement's first line.

        Returns:
            The structural tokens to emit before the line's content, and the
            block header whose body this line opened (None if no block opened).
        """
        tokens: list[Token] = []
        width = line.indent
        previous = self._scopes.top.width
        pending = self._expecting
        self._expecting = None
        column = len(line.text) - len(line.text.lstrip(" \t")) + 1

        if pending is not None and width > previous:
            self._scopes.push(pending.name, width, line.number)
            tokens.append(Token(TokenKind.INDENT, "", line.number, 1))
            return tokens, pending

        if pending is not None:
            self._reporter.report(
                ErrorKind.INDENTATION_ERROR,
                line.number,
                column,
                f"{EXPECTED_INDENTED_BLOCK} after '{pending.name}' on line {pending.line}",
            )
        elif width > previous:
            self._reporter.report(ErrorKind.INDENTATION_ERROR, line.number, column, UNEXPECTED_INDENT)
            self._scopes.push(f"block line {line.number}", width, line.number)
            tokens.append(Token(TokenKind.INDENT, "", line.number, 1))
            return tokens, None

        if width < previous:
            while self._scopes.depth > 1 and self._scopes.top.width > width:
                self._scopes.pop()
                tokens.append(Token(TokenKind.DEDENT, "", line.number, 1))
            if self._scopes.top.width != width:
                self._reporter.report(ErrorKind.INDENTATION_ERROR, line.number, column, UNMATCHED_DEDENT)
                self._scopes.push(f"block line {line.number}", width, line.number)
                tokens.append(Token(TokenKind.INDENT, "", line.number, 1))
        return tokens, None

    def close_statement(self, statement: Statement, params: tuple[Token, ...] = ()) -> None:
        """Check a finished statement for a block-opening colon.

        A statement led by a block keyword but lacking a top-level colon is
        reported as a missing colon; it still expects an indented body so the
        body does not also count as an unexpected indent.
        """
        statement = statement.strip_async()
        keyword = statement.leading_keyword
        last = statement.last
        if last is None:
            return
        if keyword in BLOCK_KEYWORDS and not statement.has_top_level(":"):
            bare_condition = keyword in CONDITION_KEYWORDS and len(statement) == 1
            if not bare_condition:
                self._reporter.report(
                    ErrorKind.MISSING_COLON,
                    last.line,
                    last.column + len(last.lexeme),
                    f"Expected ':' at the end of the '{keyword}' statement",
                )
            self._expecting = _header_for(statement, params)
        elif statement.ends_with_block_colon:
            self._expecting = _header_for(statement, params)

    def finish(self, line: int, column: int) -> list[Token]:
        """Close every open non-global frame at end of input."""
        self._expecting = None
        tokens: list[Token] = []
        while self._scopes.depth > 1:
            self._scopes.pop()
            tokens.append(Token(TokenKind.DEDENT, "", line, column))
        return tokens


# ################
# Implementation
# ################


def _header_for(statement: Statement, params: tuple[Token, ...]) -> BlockHeader:
    """Derive the name of the frame a block-opening statement will open."""
    first = statement.tokens[0]
    keyword = statement.leading_keyword
    if keyword in ("def", "class"):
        name_token = statement.token_at(1)
        if name_token is not None and name_token.kind == TokenKind.IDENTIFIER:
            return BlockHeader(name_token.lexeme, first.line, params)
    label = keyword or "block"
    return BlockHeader(f"{label} line {first.line}", first.line, params)
