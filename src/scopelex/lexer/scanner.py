# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""The scan pipeline: lines, indentation, classification and symbol binding.

The scan is a sequential fold over the physical lines of the source. Tokens
are produced lazily, line by line; diagnostics and the symbol table are
complete once the token stream is exhausted.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass

from scopelex.config.loader import ScanConfig
from scopelex.lexer.classifier import ScanState, TokenClassifier, check_statement
from scopelex.lexer.diagnostics import Diagnostic, ErrorKind, ErrorReporter
from scopelex.lexer.indentation import IndentationTracker, ScopeFrame, ScopeStack
from scopelex.lexer.source import LogicalLine, logical_lines
from scopelex.lexer.statement import Statement
from scopelex.lexer.symbols import SymbolEntry, SymbolTable, bind_statement
from scopelex.lexer.tokens import BUILTINS, Token, TokenKind

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ScanResult:
    """Everything a finished scan produced.

    Attributes:
        tokens: All tokens in source order, ending with END_OF_INPUT.
        diagnostics: All diagnostics in the order they were reported.
        symbols: Symbol table entries in declaration order.
        scopes: Every scope frame opened during the scan, global frame first.
    """

    tokens: tuple[Token, ...]
    diagnostics: tuple[Diagnostic, ...]
    symbols: tuple[SymbolEntry, ...]
    scopes: tuple[ScopeFrame, ...]

    @property
    def ok(self) -> bool:
        """True if the scan reported no diagnostics."""
        return not self.diagnostics

    def kinds(self) -> list[ErrorKind]:
        """The kinds of all diagnostics, in order."""
        return [d.kind for d in self.diagnostics]


class Scanner:
    """A lazily evaluated scan of one source text.

    Every iteration starts a fresh scan from the beginning of the source. The
    ``diagnostics``, ``symbols`` and ``scopes`` properties describe the most
    recent iteration and are complete once it has been exhausted.
    """

    def __init__(self, source: str, config: ScanConfig | None = None) -> None:
        self._source = source
        self._config = config or ScanConfig()
        self._reporter = ErrorReporter()
        self._table = SymbolTable()
        self._scopes = ScopeStack()

    def __iter__(self) -> Iterator[Token]:
        self._reporter = ErrorReporter()
        self._table = SymbolTable()
        self._scopes = ScopeStack()
        return _Run(self._source, self._config, self._reporter, self._table, self._scopes).tokens()

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return self._reporter.diagnostics

    @property
    def symbols(self) -> tuple[SymbolEntry, ...]:
        return self._table.entries()

    @property
    def scopes(self) -> tuple[ScopeFrame, ...]:
        return self._scopes.frames

    @property
    def scope_depth(self) -> int:
        """Number of scope frames still open; 1 once a scan has finished."""
        return self._scopes.depth


def scan(source: str, config: ScanConfig | None = None) -> ScanResult:
    """Scan *source* to completion.

    Source problems never raise; they are returned as diagnostics.

    Args:
        source: The full source text.
        config: Scan settings; defaults apply when omitted.

    Returns:
        The tokens, diagnostics, symbol table and scope frames of the scan.
    """
    scanner = Scanner(source, config)
    tokens = tuple(scanner)
    return ScanResult(tokens, scanner.diagnostics, scanner.symbols, scanner.scopes)


def reconstruct(tokens: tuple[Token, ...] | list[Token]) -> str:
    """Rebuild source text from tokens, filling gaps between them with spaces.

    The result equals the scanned source when the whitespace between tokens
    consists of spaces and no character was dropped as invalid.
    """
    parts: list[str] = []
    line, column = 1, 1
    for token in tokens:
        if token.line > line:
            parts.append("\n" * (token.line - line))
            line, column = token.line, 1
        if token.column > column:
            parts.append(" " * (token.column - column))
            column = token.column
        if not token.lexeme:
            continue
        parts.append(token.lexeme)
        segments = _LINE_BREAK.split(token.lexeme)
        if len(segments) > 1:
            line += len(segments) - 1
            column = len(segments[-1]) + 1
        else:
            column += len(token.lexeme)
    return "".join(parts)


# ################
# Implementation
# ################

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class _Run:
    """State of a single pass over the source."""

    def __init__(
        self,
        source: str,
        config: ScanConfig,
        reporter: ErrorReporter,
        table: SymbolTable,
        scopes: ScopeStack,
    ) -> None:
        self._source = source
        self._config = config
        self._reporter = reporter
        self._table = table
        self._scopes = scopes
        self._classifier = TokenClassifier(reporter)
        self._tracker = IndentationTracker(reporter, scopes)
        self._builtins = BUILTINS | frozenset(config.extra_builtins)
        self._statement: list[Token] = []

    def tokens(self) -> Iterator[Token]:
        state = ScanState()
        end_line, end_column = 1, 1

        for line in logical_lines(self._source, self._config.tab_width):
            self._check_length(line)
            if not state.is_continuation and not line.is_blank and not line.is_comment_only:
                structural, opened = self._tracker.open_line(line)
                yield from structural
                if opened is not None:
                    for param in opened.params:
                        self._table.declare(param, self._scopes, "parameter", shadow=True)

            line_tokens, state = self._classifier.classify(line, state)
            for token in line_tokens:
                yield token
                if token.is_symbol(";"):
                    self._close_statement()
                else:
                    self._statement.append(token)
            if not state.is_continuation:
                self._close_statement()

            if line.ending:
                end_line, end_column = line.number + 1, 1
            else:
                end_line, end_column = line.number, len(line.text) + 1

        for token in self._classifier.finish(state):
            yield token
            self._statement.append(token)
        self._close_statement()

        yield from self._tracker.finish(end_line, end_column)
        yield Token(TokenKind.END_OF_INPUT, "", end_line, end_column)

    def _check_length(self, line: LogicalLine) -> None:
        limit = self._config.max_line_length
        if limit is not None and len(line.text) > limit:
            self._reporter.report(
                ErrorKind.LINE_TOO_LONG,
                line.number,
                limit + 1,
                f"Line is {len(line.text)} characters long, the limit is {limit}",
            )

    def _close_statement(self) -> None:
        statement = Statement.from_tokens(self._statement)
        self._statement = []
        if not statement.tokens:
            return
        check = check_statement(statement, self._reporter)
        parts = [statement] if check.boundary is None else list(statement.split_at(check.boundary))
        params: tuple[Token, ...] = ()
        for part in parts:
            params = bind_statement(
                part,
                self._table,
                self._scopes,
                self._reporter,
                builtins=self._builtins,
                skip=check.stray,
            )
        self._tracker.close_statement(parts[-1], params)
