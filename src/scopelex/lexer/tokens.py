# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Token model and the fixed symbol tables of the scanned language."""

import enum
from dataclasses import dataclass

# ###############
# Public Interface
# ###############


class TokenKind(enum.Enum):
    """All token kinds produced by the scanner."""

    IDENTIFIER = "IDENTIFIER"
    KEYWORD = "KEYWORD"
    NUMBER = "NUMBER"
    STRING = "STRING"
    OPERATOR = "OPERATOR"
    DELIMITER = "DELIMITER"
    COMMENT = "COMMENT"
    NEWLINE = "NEWLINE"

    # Structural
    INDENT = "INDENT"
    DEDENT = "DEDENT"

    # End of input
    END_OF_INPUT = "END_OF_INPUT"


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location.

    Attributes:
        kind: The kind of token.
        lexeme: The exact source text of the token. Empty for INDENT, DEDENT
            and END_OF_INPUT.
        line: 1-based line number where the token starts.
        column: 1-based column number where the token starts.
    """

    kind: TokenKind
    lexeme: str
    line: int
    column: int

    def is_symbol(self, *lexemes: str) -> bool:
        """Return True if this is an operator or delimiter with one of *lexemes*."""
        return self.kind in (TokenKind.OPERATOR, TokenKind.DELIMITER) and self.lexeme in lexemes

    def is_keyword(self, *words: str) -> bool:
        """Return True if this is a keyword token spelled as one of *words*."""
        return self.kind == TokenKind.KEYWORD and self.lexeme in words


KEYWORDS: frozenset[str] = frozenset(
    {
        "False",
        "None",
        "True",
        "and",
        "as",
        "assert",
        "async",
        "await",
        "break",
        "class",
        "continue",
        "def",
        "del",
        "elif",
        "else",
        "except",
        "finally",
        "for",
        "from",
        "global",
        "if",
        "import",
        "in",
        "is",
        "lambda",
        "nonlocal",
        "not",
        "or",
        "pass",
        "raise",
        "return",
        "try",
        "while",
        "with",
        "yield",
    }
)

OPERATORS: frozenset[str] = frozenset(
    {
        "+",
        "-",
        "*",
        "/",
        "//",
        "%",
        "**",
        "@",
        "&",
        "|",
        "^",
        "~",
        "<<",
        ">>",
        "<",
        ">",
        "<=",
        ">=",
        "==",
        "!=",
        "=",
        ":=",
        "->",
    }
    | {"+=", "-=", "*=", "/=", "//=", "%=", "**=", "@=", "&=", "|=", "^=", "<<=", ">>="}
)

DELIMITERS: frozenset[str] = frozenset({"(", ")", "[", "]", "{", "}", ",", ":", ";", ".", "...", "\\"})

ASSIGNMENT_OPERATORS: frozenset[str] = frozenset(
    {"=", "+=", "-=", "*=", "/=", "//=", "%=", "**=", "@=", "&=", "|=", "^=", "<<=", ">>="}
)

OPENING_BRACKETS: frozenset[str] = frozenset({"(", "[", "{"})
CLOSING_BRACKETS: frozenset[str] = frozenset({")", "]", "}"})

# Keywords whose statement must end in a block-opening colon.
BLOCK_KEYWORDS: frozenset[str] = frozenset(
    {"if", "elif", "else", "while", "for", "def", "class", "try", "except", "finally", "with"}
)

# Block keywords that must be followed by a condition or loop header.
CONDITION_KEYWORDS: frozenset[str] = frozenset({"if", "elif", "while", "for"})

BUILTINS: frozenset[str] = frozenset(
    {
        # Core builtins
        "print",
        "input",
        "lower",
        "upper",
        "len",
        "range",
        "str",
        "int",
        "float",
        "bool",
        "list",
        "dict",
        "set",
        "tuple",
        # Common runtime names
        "abs",
        "all",
        "any",
        "bytes",
        "callable",
        "chr",
        "classmethod",
        "enumerate",
        "filter",
        "frozenset",
        "getattr",
        "hasattr",
        "isinstance",
        "iter",
        "map",
        "max",
        "min",
        "next",
        "object",
        "open",
        "ord",
        "property",
        "repr",
        "reversed",
        "round",
        "setattr",
        "sorted",
        "staticmethod",
        "sum",
        "super",
        "type",
        "zip",
        "Exception",
        "AttributeError",
        "IndexError",
        "KeyError",
        "NotImplementedError",
        "RuntimeError",
        "StopIteration",
        "TypeError",
        "ValueError",
        "ZeroDivisionError",
        "__name__",
        "__file__",
    }
)

STRING_PREFIXES: frozenset[str] = frozenset({"r", "u", "f", "b", "br", "rb", "fr", "rf"})


def match_symbol(text: str, pos: int) -> str | None:
    """Return the longest operator or delimiter starting at *pos*, or None."""
    for length in range(_LONGEST_SYMBOL, 0, -1):
        candidate = text[pos : pos + length]
        if len(candidate) == length and candidate in _SYMBOL_KINDS:
            return candidate
    return None


def symbol_kind(symbol: str) -> TokenKind:
    """Return OPERATOR or DELIMITER for a symbol returned by :func:`match_symbol`."""
    return _SYMBOL_KINDS[symbol]


# ################
# Implementation
# ################

_SYMBOL_KINDS: dict[str, TokenKind] = {
    **{op: TokenKind.OPERATOR for op in OPERATORS},
    **{delim: TokenKind.DELIMITER for delim in DELIMITERS},
}

_LONGEST_SYMBOL = max(len(symbol) for symbol in _SYMBOL_KINDS)
