# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the token model and the symbol tables."""

import pytest

from scopelex.lexer.tokens import (
    ASSIGNMENT_OPERATORS,
    BUILTINS,
    KEYWORDS,
    OPERATORS,
    Token,
    TokenKind,
    match_symbol,
    symbol_kind,
)

# ###############
# Token Model
# ###############


class TestToken:
    def test_tokens_are_immutable(self) -> None:
        token = Token(TokenKind.IDENTIFIER, "x", 1, 1)
        with pytest.raises(AttributeError):
            token.lexeme = "y"  # type: ignore[misc]

    def test_is_symbol_matches_operators_and_delimiters(self) -> None:
        assert Token(TokenKind.OPERATOR, "=", 1, 3).is_symbol("=", "+=")
        assert Token(TokenKind.DELIMITER, ":", 1, 3).is_symbol(":")

    def test_is_symbol_ignores_strings_with_the_same_text(self) -> None:
        assert not Token(TokenKind.STRING, "=", 1, 1).is_symbol("=")

    def test_is_keyword(self) -> None:
        token = Token(TokenKind.KEYWORD, "if", 1, 1)
        assert token.is_keyword("if", "while")
        assert not token.is_keyword("else")
        assert not Token(TokenKind.IDENTIFIER, "if_", 1, 1).is_keyword("if")


# ###############
# Symbol Tables
# ###############


class TestTables:
    def test_keywords_and_builtins_are_disjoint_from_operators(self) -> None:
        assert not KEYWORDS & OPERATORS
        assert not BUILTINS & KEYWORDS

    def test_assignment_operators_are_operators(self) -> None:
        assert ASSIGNMENT_OPERATORS <= OPERATORS

    def test_common_builtins_are_known(self) -> None:
        for name in ("print", "input", "len", "range", "str", "int"):
            assert name in BUILTINS


class TestMatchSymbol:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            (">>= 2", ">>="),
            ("== b", "=="),
            ("= b", "="),
            ("**kwargs", "**"),
            ("//= 2", "//="),
            ("-> int", "->"),
            (":= 3", ":="),
            ("...", "..."),
            (".attr", "."),
        ],
    )
    def test_longest_match_wins(self, text: str, expected: str) -> None:
        assert match_symbol(text, 0) == expected

    def test_match_at_offset(self) -> None:
        assert match_symbol("a!=b", 1) == "!="

    def test_unknown_character(self) -> None:
        assert match_symbol("$x", 0) is None
        assert match_symbol("!x", 0) is None

    def test_symbol_kind(self) -> None:
        assert symbol_kind("+=") == TokenKind.OPERATOR
        assert symbol_kind("(") == TokenKind.DELIMITER
        assert symbol_kind(",") == TokenKind.DELIMITER
