# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""A view of one statement's content tokens with their bracket nesting."""

from dataclasses import dataclass

from scopelex.lexer.tokens import (
    ASSIGNMENT_OPERATORS,
    BLOCK_KEYWORDS,
    CLOSING_BRACKETS,
    OPENING_BRACKETS,
    Token,
    TokenKind,
)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class Statement:
    """The content tokens of a single statement.

    Comments, newlines and continuation backslashes are not part of a
    statement. ``depths[i]`` is the bracket nesting level in effect at
    ``tokens[i]``; an opening bracket carries the level outside of it.

    Attributes:
        tokens: Content tokens in source order.
        depths: Bracket nesting level of each token.
    """

    tokens: tuple[Token, ...]
    depths: tuple[int, ...]

    @classmethod
    def from_tokens(cls, tokens: list[Token]) -> "Statement":
        """Build a Statement, computing the bracket depth of every token."""
        content = tuple(t for t in tokens if t.kind not in _NON_CONTENT and not t.is_symbol("\\"))
        depths: list[int] = []
        depth = 0
        for token in content:
            if token.is_symbol(*CLOSING_BRACKETS):
                depth = max(0, depth - 1)
            depths.append(depth)
            if token.is_symbol(*OPENING_BRACKETS):
                depth += 1
        return cls(content, tuple(depths))

    def __len__(self) -> int:
        return len(self.tokens)

    @property
    def first(self) -> Token | None:
        return self.tokens[0] if self.tokens else None

    @property
    def last(self) -> Token | None:
        return self.tokens[-1] if self.tokens else None

    @property
    def leading_keyword(self) -> str | None:
        """The keyword that starts the statement, if any."""
        first = self.first
        if first is not None and first.kind == TokenKind.KEYWORD:
            return first.lexeme
        return None

    @property
    def ends_with_block_colon(self) -> bool:
        """True if the last token is a ``:`` outside any brackets."""
        return bool(self.tokens) and self.tokens[-1].is_symbol(":") and self.depths[-1] == 0

    def has_top_level(self, *lexemes: str) -> bool:
        """True if any operator/delimiter in *lexemes* occurs outside brackets."""
        return self.index_of_top_level(*lexemes) is not None

    def index_of_top_level(self, *lexemes: str, last: bool = False) -> int | None:
        """Return the index of the first (or last) top-level symbol in *lexemes*."""
        indices = range(len(self.tokens) - 1, -1, -1) if last else range(len(self.tokens))
        for index in indices:
            if self.depths[index] == 0 and self.tokens[index].is_symbol(*lexemes):
                return index
        return None

    def last_assignment_index(self) -> int | None:
        """Index of the last top-level assignment operator, if any."""
        return self.index_of_top_level(*ASSIGNMENT_OPERATORS, last=True)

    def token_at(self, index: int) -> Token | None:
        """Return ``tokens[index]`` or None when out of range."""
        if 0 <= index < len(self.tokens):
            return self.tokens[index]
        return None

    def strip_async(self) -> "Statement":
        """Return the statement without a leading ``async`` keyword."""
        if len(self.tokens) > 1 and self.tokens[0].is_keyword("async"):
            return Statement(self.tokens[1:], self.depths[1:])
        return self

    def split_at(self, index: int) -> tuple["Statement", "Statement"]:
        """Split into the tokens before *index* and the tokens from *index* on."""
        return (
            Statement(self.tokens[:index], self.depths[:index]),
            Statement(self.tokens[index:], self.depths[index:]),
        )

    def split_header(self) -> tuple["Statement", "Statement"] | None:
        """Split a one-line compound statement into its header and its body.

        ``for i in x: print(i)`` splits into ``for i in x :`` and ``print(i)``.
        Returns None unless the statement starts with a block keyword and has
        tokens after its first top-level colon.
        """
        if self.leading_keyword not in BLOCK_KEYWORDS:
            return None
        colon = self.index_of_top_level(":")
        if colon is None or colon == len(self.tokens) - 1:
            return None
        return self.split_at(colon + 1)


# ################
# Implementation
# ################

_NON_CONTENT = frozenset({TokenKind.COMMENT, TokenKind.NEWLINE, TokenKind.INDENT, TokenKind.DEDENT})
