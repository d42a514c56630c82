# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Per-line token classification and statement-level lexical checks.

The classifier scans one physical line at a time. Everything that must
survive a line boundary (open triple-quoted strings, bracket nesting,
backslash continuations) lives in an explicit :class:`ScanState` value that
is passed in and returned, never in hidden fields.
"""

from dataclasses import dataclass, replace

from scopelex.lexer.diagnostics import ErrorKind, ErrorReporter
from scopelex.lexer.source import LogicalLine
from scopelex.lexer.statement import Statement
from scopelex.lexer.tokens import (
    ASSIGNMENT_OPERATORS,
    CLOSING_BRACKETS,
    CONDITION_KEYWORDS,
    KEYWORDS,
    OPENING_BRACKETS,
    STRING_PREFIXES,
    Token,
    TokenKind,
    match_symbol,
    symbol_kind,
)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class OpenString:
    """A triple-quoted string or block comment still open at the end of a line.

    Attributes:
        delimiter: The closing delimiter, ``'\"\"\"'`` or ``\"'''\"``.
        text: Source text consumed so far, prefix, quotes and line endings included.
        line: Line where the string starts.
        column: Column where the string starts.
        is_comment: True if the string stands alone as a block comment.
    """

    delimiter: str
    text: str
    line: int
    column: int
    is_comment: bool


@dataclass(frozen=True)
class ScanState:
    """Scanner condition carried from one physical line to the next.

    Attributes:
        bracket_depth: Number of currently open ``(``, ``[`` and ``{`` groups.
        open_string: The triple-quoted string spanning the line break, if any.
        line_continued: True if the previous line ended in a backslash.
        at_statement_start: True if the next content token starts a statement.
    """

    bracket_depth: int = 0
    open_string: OpenString | None = None
    line_continued: bool = False
    at_statement_start: bool = True

    @property
    def is_continuation(self) -> bool:
        """True if the next physical line continues the current statement."""
        return self.open_string is not None or self.bracket_depth > 0 or self.line_continued


class TokenClassifier:
    """Splits physical lines into classified tokens, reporting lexical errors."""

    def __init__(self, reporter: ErrorReporter) -> None:
        self._reporter = reporter

    def classify(self, line: LogicalLine, state: ScanState) -> tuple[list[Token], ScanState]:
        """Tokenize one physical line.

        Args:
            line: The line to scan.
            state: The state left behind by the previous line.

        Returns:
            The tokens of the line (a trailing NEWLINE included when the line
            has a terminator outside any string) and the state for the next line.
        """
        return _LineScanner(line, state, self._reporter).run()

    def finish(self, state: ScanState) -> list[Token]:
        """Close whatever is still open at end of input.

        An unterminated triple-quoted string is emitted as a token and reported
        as an unclosed block comment or an unterminated string literal.
        """
        pending = state.open_string
        if pending is None:
            return []
        if pending.is_comment:
            self._reporter.report(
                ErrorKind.UNCLOSED_BLOCK_COMMENT,
                pending.line,
                pending.column,
                f"Block comment opened with {pending.delimiter} is never closed",
            )
            return [Token(TokenKind.COMMENT, pending.text, pending.line, pending.column)]
        self._reporter.report(
            ErrorKind.UNTERMINATED_STRING_LITERAL,
            pending.line,
            pending.column,
            f"String opened with {pending.delimiter} is never closed",
        )
        return [Token(TokenKind.STRING, pending.text, pending.line, pending.column)]


@dataclass(frozen=True)
class StatementCheck:
    """What the statement-level checks found beyond the diagnostics they reported.

    Attributes:
        stray: Identifier tokens that must not be looked up in the symbol table.
        boundary: Index of the token where a second statement starts on the
            same line, or None.
    """

    stray: frozenset[Token] = frozenset()
    boundary: int | None = None


def check_statement(statement: Statement, reporter: ErrorReporter) -> StatementCheck:
    """Run the statement-level lexical checks.

    Reports missing right-hand sides, missing conditions, stray identifiers
    and several statements written on one line.

    The stray identifier heuristic: a statement that starts with two
    identifiers where the second is directly followed by an assignment
    operator (``he llo = 1``) is taken to be one name broken by whitespace.
    The first identifier is reported and returned so symbol resolution can
    skip it.

    A second statement is detected where a complete statement or expression
    (``x = 1``, ``pass``, ``f()``) is directly followed by an assignment
    target or a statement keyword.
    """
    tokens = statement.tokens
    if not tokens:
        return StatementCheck()

    stray: set[Token] = set()
    boundary: int | None = None
    first = tokens[0]
    last = tokens[-1]
    header = statement.strip_async().first

    if last.is_symbol(*ASSIGNMENT_OPERATORS) and statement.depths[-1] == 0:
        reporter.report(
            ErrorKind.MISSING_RIGHT_HAND_SIDE,
            last.line,
            last.column,
            f"Assignment operator '{last.lexeme}' has no right-hand side",
        )

    if header is not None and header.is_keyword(*CONDITION_KEYWORDS):
        following = statement.token_at(tokens.index(header) + 1)
        if following is None or following.is_symbol(":"):
            what = "loop variable and iterable" if header.lexeme == "for" else "condition"
            reporter.report(
                ErrorKind.MISSING_CONDITION,
                header.line,
                header.column,
                f"Expected a {what} after '{header.lexeme}'",
            )

    if (
        len(tokens) >= 3
        and first.kind == TokenKind.IDENTIFIER
        and tokens[1].kind == TokenKind.IDENTIFIER
        and tokens[2].is_symbol(*ASSIGNMENT_OPERATORS)
    ):
        reporter.report(
            ErrorKind.INVALID_IDENTIFIER,
            first.line,
            first.column,
            f"Invalid identifier '{first.lexeme} {tokens[1].lexeme}': names cannot contain whitespace",
        )
        stray.add(first)

    # The second word of a stray identifier is not a new statement.
    for index in range(2 if stray else 1, len(tokens)):
        if statement.depths[index] != 0 or not _completes_statement(tokens[index - 1]):
            continue
        token = tokens[index]
        following = statement.token_at(index + 1)
        starts_assignment = (
            token.kind == TokenKind.IDENTIFIER
            and following is not None
            and following.is_symbol(*ASSIGNMENT_OPERATORS)
        )
        if starts_assignment or token.is_keyword(*_STATEMENT_KEYWORDS):
            reporter.report(
                ErrorKind.MULTIPLE_STATEMENTS_PER_LINE,
                token.line,
                token.column,
                "A new statement starts here without a separating ';' or line break",
            )
            boundary = index
            break

    return StatementCheck(frozenset(stray), boundary)


# ################
# Implementation
# ################

_QUOTES = "\"'"
_WHITESPACE = " \t\f\v"

# Keywords that only ever begin a statement.
_STATEMENT_KEYWORDS = frozenset(
    {
        "assert",
        "break",
        "class",
        "continue",
        "def",
        "del",
        "global",
        "nonlocal",
        "pass",
        "raise",
        "return",
        "try",
        "while",
        "with",
    }
)

_OPERAND_KEYWORDS = frozenset({"True", "False", "None"})

# Keywords that make up a whole statement on their own.
_COMPLETE_KEYWORDS = frozenset({"pass", "break", "continue"})

_ASCII_DIGITS = "0123456789"


def _completes_statement(token: Token) -> bool:
    """True if *token* can be the last token of a complete expression or statement."""
    if token.kind in (TokenKind.IDENTIFIER, TokenKind.NUMBER, TokenKind.STRING):
        return True
    if token.is_keyword(*_OPERAND_KEYWORDS, *_COMPLETE_KEYWORDS):
        return True
    return token.is_symbol(*CLOSING_BRACKETS)


def _is_digit(ch: str) -> bool:
    """True for a single ASCII decimal digit."""
    return len(ch) == 1 and ch in _ASCII_DIGITS


def _find_closing(text: str, start: int, delimiter: str) -> int:
    """Return the index of *delimiter* in *text* from *start*, skipping escapes, or -1."""
    pos = start
    while pos < len(text):
        if text[pos] == "\\":
            pos += 2
            continue
        if text.startswith(delimiter, pos):
            return pos
        pos += 1
    return -1


class _LineScanner:
    """Scanning state machine for a single physical line."""

    def __init__(self, line: LogicalLine, state: ScanState, reporter: ErrorReporter) -> None:
        self._line = line
        self._text = line.text
        self._reporter = reporter
        self._pos = 0
        self._tokens: list[Token] = []
        self._depth = state.bracket_depth
        self._open_string = state.open_string
        self._continued = False
        self._at_start = state.at_statement_start

    def run(self) -> tuple[list[Token], ScanState]:
        """Scan the whole line and return its tokens and the outgoing state."""
        if self._open_string is not None:
            self._resume_string(self._open_string)

        while self._pos < len(self._text) and self._open_string is None:
            self._scan_token()

        if self._open_string is None and self._line.ending:
            self._emit(TokenKind.NEWLINE, self._line.ending, len(self._text) + 1)

        state = ScanState(
            bracket_depth=self._depth,
            open_string=self._open_string,
            line_continued=self._continued,
            at_statement_start=self._at_start,
        )
        if not state.is_continuation:
            state = replace(state, at_statement_start=True)
        return self._tokens, state

    # ------------------------------------------------------------------
    # Low-level helpers
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of line."""
        if self._pos < len(self._text):
            return self._text[self._pos]
        return ""

    def _peek(self, offset: int = 1) -> str:
        """Return the character *offset* positions ahead, or '' past end of line."""
        idx = self._pos + offset
        if idx < len(self._text):
            return self._text[idx]
        return ""

    def _emit(self, kind: TokenKind, lexeme: str, column: int) -> Token:
        token = Token(kind, lexeme, self._line.number, column)
        self._tokens.append(token)
        if kind not in (TokenKind.COMMENT, TokenKind.NEWLINE):
            self._at_start = lexeme == ";"
        return token

    def _error(self, kind: ErrorKind, column: int, message: str) -> None:
        self._reporter.report(kind, self._line.number, column, message)

    def _previous_content(self) -> Token | None:
        for token in reversed(self._tokens):
            if token.kind not in (TokenKind.COMMENT, TokenKind.NEWLINE):
                return token
        return None

    # ------------------------------------------------------------------
    # Token scanning dispatcher
    # ------------------------------------------------------------------

    def _scan_token(self) -> None:
        """Dispatch to the appropriate handler based on the current character."""
        ch = self._current()
        start = self._pos

        if ch in _WHITESPACE:
            self._pos += 1
        elif ch == "#":
            self._emit(TokenKind.COMMENT, self._text[start:], start + 1)
            self._pos = len(self._text)
        elif ch == "\\":
            self._scan_backslash()
        elif ch in _QUOTES:
            self._scan_string(start, start)
        elif _is_digit(ch) or (ch == "." and _is_digit(self._peek()) and self._operand_may_start()):
            self._scan_number()
        elif ch.isalpha() or ch == "_":
            self._scan_word()
        else:
            self._scan_symbol()

    def _scan_backslash(self) -> None:
        """A backslash is only valid as the last character of a line."""
        col = self._pos + 1
        self._pos += 1
        if self._pos == len(self._text):
            self._tokens.append(Token(TokenKind.DELIMITER, "\\", self._line.number, col))
            self._continued = True
        else:
            self._error(ErrorKind.INVALID_CHARACTER, col, "Unexpected character '\\' outside a line continuation")

    def _scan_symbol(self) -> None:
        """Scan an operator or delimiter by maximal munch, or report a stray character."""
        col = self._pos + 1
        symbol = match_symbol(self._text, self._pos)
        if symbol is None or symbol == "\\":
            ch = self._current()
            self._error(ErrorKind.INVALID_CHARACTER, col, f"Invalid character {ch!r}")
            self._pos += 1
            return
        self._pos += len(symbol)
        if symbol in OPENING_BRACKETS:
            self._depth += 1
        elif symbol in CLOSING_BRACKETS:
            self._depth = max(0, self._depth - 1)
        self._emit(symbol_kind(symbol), symbol, col)

    def _operand_may_start(self) -> bool:
        """True if a leading-dot float may start here rather than an attribute dot."""
        previous = self._previous_content()
        if previous is None:
            return True
        if previous.kind in (TokenKind.IDENTIFIER, TokenKind.NUMBER, TokenKind.STRING):
            return False
        return not previous.is_symbol(*CLOSING_BRACKETS)

    # ------------------------------------------------------------------
    # Identifiers and keywords
    # ------------------------------------------------------------------

    def _scan_word(self) -> None:
        """Scan an identifier or keyword, or a prefixed string literal."""
        start = self._pos
        while self._pos < len(self._text) and (self._current().isalnum() or self._current() == "_"):
            self._pos += 1
        word = self._text[start : self._pos]
        if word.lower() in STRING_PREFIXES and self._current() in _QUOTES and self._current():
            self._scan_string(start, self._pos)
            return
        kind = TokenKind.KEYWORD if word in KEYWORDS else TokenKind.IDENTIFIER
        self._emit(kind, word, start + 1)

    # ------------------------------------------------------------------
    # Numbers
    # ------------------------------------------------------------------

    def _scan_number(self) -> None:
        """Scan a numeric literal.

        The whole malformed run is consumed as one token so scanning resumes
        after it. Identifier characters glued to the digits are consumed too
        and reported as an invalid identifier.
        """
        start = self._pos
        col = start + 1
        problem: str | None = None

        if self._current() == "0" and self._peek() in _RADIX_DIGITS:
            digits = _RADIX_DIGITS[self._peek()]
            self._pos += 2
            run_start = self._pos
            while self._pos < len(self._text) and (self._current().isalnum() or self._current() == "_"):
                self._pos += 1
            run = self._text[run_start : self._pos].replace("_", "")
            if not run or any(c not in digits for c in run.lower()):
                problem = "prefixed integer has no valid digits"
        else:
            problem = self._scan_decimal()
            if self._current() in "jJ" and self._current():
                self._pos += 1
            if problem is None and (self._current().isalpha() or self._current() == "_"):
                while self._pos < len(self._text) and (self._current().isalnum() or self._current() == "_"):
                    self._pos += 1
                lexeme = self._text[start : self._pos]
                self._emit(TokenKind.NUMBER, lexeme, col)
                self._error(
                    ErrorKind.INVALID_IDENTIFIER,
                    col,
                    f"Invalid identifier '{lexeme}': names cannot start with a digit",
                )
                return

        if problem is not None:
            # Swallow whatever else is glued to the malformed literal.
            while self._pos < len(self._text) and (self._current().isalnum() or self._current() in "._"):
                self._pos += 1
            lexeme = self._text[start : self._pos]
            self._emit(TokenKind.NUMBER, lexeme, col)
            self._error(ErrorKind.MALFORMED_NUMBER_LITERAL, col, f"Malformed number literal '{lexeme}': {problem}")
            return

        self._emit(TokenKind.NUMBER, self._text[start : self._pos], col)

    def _scan_decimal(self) -> str | None:
        """Consume a decimal literal; return a description of what is wrong, or None."""
        problem: str | None = None
        seen_dot = False
        seen_exponent = False
        while self._pos < len(self._text):
            ch = self._current()
            if _is_digit(ch) or ch == "_":
                self._pos += 1
            elif ch == ".":
                if seen_exponent:
                    problem = problem or "decimal point inside the exponent"
                elif seen_dot:
                    problem = problem or "more than one decimal point"
                seen_dot = True
                self._pos += 1
            elif ch in "eE":
                if seen_exponent:
                    problem = problem or "more than one exponent"
                seen_exponent = True
                self._pos += 1
                if self._current() in "+-" and self._current():
                    self._pos += 1
                if not _is_digit(self._current()):
                    problem = problem or "exponent has no digits"
            else:
                break
        return problem

    # ------------------------------------------------------------------
    # Strings and block comments
    # ------------------------------------------------------------------

    def _scan_string(self, start: int, quote_pos: int) -> None:
        """Scan a string literal whose (optional) prefix begins at *start*."""
        col = start + 1
        quote = self._text[quote_pos]
        is_standalone = self._at_start

        if self._text.startswith(quote * 3, quote_pos):
            delimiter = quote * 3
            end = _find_closing(self._text, quote_pos + 3, delimiter)
            if end < 0:
                self._open_string = OpenString(
                    delimiter=delimiter,
                    text=self._text[start:] + self._line.ending,
                    line=self._line.number,
                    column=col,
                    is_comment=is_standalone,
                )
                self._pos = len(self._text)
                return
            self._pos = end + 3
            kind = TokenKind.COMMENT if is_standalone else TokenKind.STRING
            self._emit(kind, self._text[start : self._pos], col)
            return

        pos = quote_pos + 1
        while pos < len(self._text):
            ch = self._text[pos]
            if ch == "\\":
                pos += 2
            elif ch == quote:
                self._pos = pos + 1
                self._emit(TokenKind.STRING, self._text[start : self._pos], col)
                return
            else:
                pos += 1

        # Recover at end of line: the string and any brackets it sits in are closed.
        self._pos = len(self._text)
        self._depth = 0
        self._emit(TokenKind.STRING, self._text[start:], col)
        self._error(ErrorKind.UNTERMINATED_STRING_LITERAL, col, "String literal is not closed before end of line")

    def _resume_string(self, pending: OpenString) -> None:
        """Continue a triple-quoted string opened on an earlier line."""
        end = _find_closing(self._text, 0, pending.delimiter)
        if end < 0:
            self._open_string = replace(pending, text=pending.text + self._text + self._line.ending)
            self._pos = len(self._text)
            return
        self._open_string = None
        self._pos = end + 3
        kind = TokenKind.COMMENT if pending.is_comment else TokenKind.STRING
        token = Token(kind, pending.text + self._text[: self._pos], pending.line, pending.column)
        self._tokens.append(token)
        if kind == TokenKind.STRING:
            self._at_start = False


_RADIX_DIGITS: dict[str, str] = {
    "x": "0123456789abcdef",
    "X": "0123456789abcdef",
    "o": "01234567",
    "O": "01234567",
    "b": "01",
    "B": "01",
}
