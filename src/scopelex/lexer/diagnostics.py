# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Typed diagnostics and the append-only sink every scanner stage reports to."""

import enum
from collections.abc import Iterator
from dataclasses import dataclass

# ###############
# Public Interface
# ###############


class ErrorKind(enum.Enum):
    """The taxonomy of lexical-level errors."""

    INDENTATION_ERROR = "IndentationError"
    UNTERMINATED_STRING_LITERAL = "UnterminatedStringLiteral"
    UNCLOSED_BLOCK_COMMENT = "UnclosedBlockComment"
    MISSING_RIGHT_HAND_SIDE = "MissingRightHandSide"
    INVALID_IDENTIFIER = "InvalidIdentifier"
    MALFORMED_NUMBER_LITERAL = "MalformedNumberLiteral"
    MISSING_CONDITION = "MissingCondition"
    MISSING_COLON = "MissingColon"
    UNDECLARED_VARIABLE = "UndeclaredVariable"
    INVALID_CHARACTER = "InvalidCharacter"
    MULTIPLE_STATEMENTS_PER_LINE = "MultipleStatementsPerLine"
    LINE_TOO_LONG = "LineTooLong"


# IndentationError sub-cases
EXPECTED_INDENTED_BLOCK = "expected an indented block"
UNEXPECTED_INDENT = "unexpected indent"
UNMATCHED_DEDENT = "unindent does not match any outer indentation level"


@dataclass(frozen=True)
class Diagnostic:
    """A lexical error found during a scan.

    Attributes:
        kind: The error category.
        line: 1-based line of the offending text.
        column: 1-based column of the offending text.
        message: Human-readable description.
    """

    kind: ErrorKind
    line: int
    column: int
    message: str

    def __str__(self) -> str:
        return f"Line {self.line}, column {self.column}: {self.kind.value}: {self.message}"


class ErrorReporter:
    """Collects diagnostics in the order they are reported.

    Reporting never raises, so the scan always continues past an error.
    """

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []

    def report(self, kind: ErrorKind, line: int, column: int, message: str) -> Diagnostic:
        """Record a new diagnostic and return it."""
        diagnostic = Diagnostic(kind, line, column, message)
        self._diagnostics.append(diagnostic)
        return diagnostic

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    def count(self, kind: ErrorKind) -> int:
        """Return how many diagnostics of *kind* were reported."""
        return sum(1 for d in self._diagnostics if d.kind == kind)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(tuple(self._diagnostics))

    def __len__(self) -> int:
        return len(self._diagnostics)
