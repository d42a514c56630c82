# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Symbol table of declared identifiers and use-before-declaration checks.

Binding happens once per statement. All reads in the statement are resolved
first, then the statement's declarations are recorded, so ``y = y + 1``
reports ``y`` when it was never declared before.

Declaration rules:
- Assignment targets (top-level names left of the last assignment operator)
  are recorded only if the name is not visible from the current scope. A bare
  annotation (``name: Type``) declares its name the same way.
- Explicit declarations (``def``, ``class``, ``import``, ``as`` aliases,
  ``global``/``nonlocal``) always get an entry in the current scope, so they
  may shadow an outer name.
- ``for`` loop targets and ``:=`` targets behave like assignment targets.
- Function parameters are returned to the caller and declared inside the
  frame the function body opens. A body on the same line as its ``def``
  sees them as statement locals.
- A leading ``async`` is ignored.
- Lambda parameters and comprehension variables are local to the statement
  and never enter the table.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from scopelex.lexer.diagnostics import ErrorKind, ErrorReporter
from scopelex.lexer.indentation import ScopeStack
from scopelex.lexer.statement import Statement
from scopelex.lexer.tokens import BUILTINS, Token, TokenKind

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class SymbolEntry:
    """A declared identifier.

    Attributes:
        id: 1-based position in declaration order.
        name: The identifier.
        scope: Arena index of the owning scope frame.
        depth: Scope stack depth at declaration time (1 is the global scope).
        line: Line of the declaring token.
        column: Column of the declaring token.
        type_name: Category inferred from the declaration (``int``,
            ``string``, ``function``, ``parameter``, ``unknown``...).
    """

    id: int
    name: str
    scope: int
    depth: int
    line: int
    column: int
    type_name: str = "unknown"


class SymbolTable:
    """Declared identifiers per scope frame. Entries are never removed."""

    def __init__(self) -> None:
        self._entries: list[SymbolEntry] = []
        self._by_scope: dict[int, dict[str, SymbolEntry]] = {}

    def lookup(self, name: str, scopes: ScopeStack) -> SymbolEntry | None:
        """Find *name* in the open frames, innermost first."""
        for frame in reversed(scopes.open_frames()):
            entry = self._by_scope.get(frame.index, {}).get(name)
            if entry is not None:
                return entry
        return None

    def declare(
        self,
        token: Token,
        scopes: ScopeStack,
        type_name: str = "unknown",
        *,
        shadow: bool = False,
    ) -> SymbolEntry:
        """Record *token* as a declaration in the innermost open frame.

        Args:
            token: The identifier token being declared.
            scopes: The current scope stack.
            type_name: Inferred category for a new entry.
            shadow: When True only an entry in the innermost frame prevents a
                new entry; otherwise an entry in any open frame does.

        Returns:
            The new entry, or the existing one that made a new entry unnecessary.
        """
        frame = scopes.top
        if shadow:
            existing = self._by_scope.get(frame.index, {}).get(token.lexeme)
        else:
            existing = self.lookup(token.lexeme, scopes)
        if existing is not None:
            return existing
        entry = SymbolEntry(
            id=len(self._entries) + 1,
            name=token.lexeme,
            scope=frame.index,
            depth=scopes.depth,
            line=token.line,
            column=token.column,
            type_name=type_name,
        )
        self._entries.append(entry)
        self._by_scope.setdefault(frame.index, {})[entry.name] = entry
        return entry

    def entries(self) -> tuple[SymbolEntry, ...]:
        """All entries in declaration order."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def bind_statement(
    statement: Statement,
    table: SymbolTable,
    scopes: ScopeStack,
    reporter: ErrorReporter,
    *,
    builtins: Iterable[str] = BUILTINS,
    skip: frozenset[Token] = frozenset(),
    local_names: Iterable[str] = (),
) -> tuple[Token, ...]:
    """Resolve the reads and record the declarations of one statement.

    A one-line compound statement (``for i in x: print(i)``) is bound as its
    header followed by its body, so the body sees the loop targets, aliases
    and parameters the header introduces.

    Args:
        statement: The statement to bind.
        table: Symbol table to query and update.
        scopes: The current scope stack.
        reporter: Sink for undeclared-variable diagnostics.
        builtins: Names that are always defined.
        skip: Identifier tokens to leave alone (already reported elsewhere).
        local_names: Names bound only for the duration of the statement.

    Returns:
        The parameter names of a ``def`` statement, to be declared inside the
        function body's frame. Empty when the body is on the same line.
    """
    statement = statement.strip_async()
    names = frozenset(builtins)
    locals_ = frozenset(local_names)
    split = statement.split_header()
    if split is None:
        return _StatementBinder(statement, table, scopes, reporter, names, skip, locals_).bind()

    header, body = split
    params = _StatementBinder(header, table, scopes, reporter, names, skip, locals_).bind()
    bind_statement(
        body,
        table,
        scopes,
        reporter,
        builtins=names,
        skip=skip,
        local_names=locals_ | {param.lexeme for param in params},
    )
    return ()


# ################
# Implementation
# ################

_CONSTRUCTOR_TYPES: dict[str, str] = {
    "input": "string",
    "str": "string",
    "int": "int",
    "float": "float",
    "bool": "bool",
    "list": "list",
    "dict": "dict",
    "set": "set",
    "tuple": "tuple",
}


@dataclass(frozen=True)
class _Declaration:
    token: Token
    type_name: str
    shadow: bool


class _StatementBinder:
    """Classifies every identifier of a statement as declaration, read or neither."""

    def __init__(
        self,
        statement: Statement,
        table: SymbolTable,
        scopes: ScopeStack,
        reporter: ErrorReporter,
        builtins: frozenset[str],
        skip: frozenset[Token],
        local_names: frozenset[str] = frozenset(),
    ) -> None:
        self._stmt = statement
        self._tokens = statement.tokens
        self._table = table
        self._scopes = scopes
        self._reporter = reporter
        self._builtins = builtins
        self._skip = skip
        self._declarations: list[_Declaration] = []
        self._handled: set[int] = set()
        self._locals: set[str] = set(local_names)
        self._params: list[Token] = []

    def bind(self) -> tuple[Token, ...]:
        keyword = self._stmt.leading_keyword
        if keyword == "def":
            self._bind_def()
        elif keyword == "class":
            self._bind_named(1, "class")
        elif keyword == "import":
            self._bind_import(1, declare_path_root=True)
        elif keyword == "from":
            self._bind_from()
        elif keyword in ("global", "nonlocal"):
            for index, token in enumerate(self._tokens):
                if token.kind == TokenKind.IDENTIFIER:
                    self._declare(index, keyword, shadow=True)
        elif keyword == "for":
            self._bind_loop_targets(0)
        elif keyword is None:
            self._bind_assignment()

        self._bind_aliases_and_walrus()
        self._bind_statement_locals()

        for index, token in enumerate(self._tokens):
            if token.kind == TokenKind.IDENTIFIER and self._is_read(index):
                if self._table.lookup(token.lexeme, self._scopes) is None:
                    self._reporter.report(
                        ErrorKind.UNDECLARED_VARIABLE,
                        token.line,
                        token.column,
                        f"Name '{token.lexeme}' is used before it is declared",
                    )

        for decl in self._declarations:
            self._table.declare(decl.token, self._scopes, decl.type_name, shadow=decl.shadow)
        return tuple(self._params)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _token(self, index: int) -> Token | None:
        return self._stmt.token_at(index)

    def _is_identifier(self, index: int) -> bool:
        token = self._token(index)
        return token is not None and token.kind == TokenKind.IDENTIFIER

    def _declare(self, index: int, type_name: str, *, shadow: bool) -> None:
        self._handled.add(index)
        self._declarations.append(_Declaration(self._tokens[index], type_name, shadow))

    def _is_attribute(self, index: int) -> bool:
        previous = self._token(index - 1)
        return previous is not None and previous.is_symbol(".")

    def _is_read(self, index: int) -> bool:
        token = self._tokens[index]
        if index in self._handled or token in self._skip or self._is_attribute(index):
            return False
        if token.lexeme in self._locals or token.lexeme in self._builtins:
            return False
        following = self._token(index + 1)
        previous = self._token(index - 1)
        is_keyword_argument = (
            self._stmt.depths[index] > 0
            and following is not None
            and following.is_symbol("=")
            and previous is not None
            and previous.is_symbol("(", ",")
        )
        return not is_keyword_argument

    # ------------------------------------------------------------------
    # Statement forms
    # ------------------------------------------------------------------

    def _bind_named(self, index: int, type_name: str) -> None:
        if self._is_identifier(index):
            self._declare(index, type_name, shadow=True)

    def _bind_def(self) -> None:
        self._bind_named(1, "function")
        opening = self._token(2)
        if opening is None or not opening.is_symbol("("):
            return
        index = 3
        while index < len(self._tokens) and self._stmt.depths[index] > 0:
            token = self._tokens[index]
            previous = self._tokens[index - 1]
            if (
                self._stmt.depths[index] == 1
                and token.kind == TokenKind.IDENTIFIER
                and previous.is_symbol("(", ",", "*", "**")
            ):
                self._handled.add(index)
                self._params.append(token)
            index += 1

    def _bind_import(self, start: int, *, declare_path_root: bool) -> None:
        """Bind ``a.b, c as d`` (``import``) or ``a, b as c`` (``from ... import``)."""
        segment_start = True
        for index in range(start, len(self._tokens)):
            token = self._tokens[index]
            if token.is_symbol(","):
                segment_start = True
                continue
            if token.kind != TokenKind.IDENTIFIER or self._is_after_as(index):
                continue
            self._handled.add(index)
            if segment_start and not self._segment_has_alias(index):
                if declare_path_root or not self._is_dotted(index):
                    self._declare(index, "module", shadow=True)
            segment_start = False

    def _bind_from(self) -> None:
        import_index = next((i for i, t in enumerate(self._tokens) if t.is_keyword("import")), None)
        end = import_index if import_index is not None else len(self._tokens)
        for index in range(1, end):
            if self._tokens[index].kind == TokenKind.IDENTIFIER:
                self._handled.add(index)
        if import_index is not None:
            self._bind_import(import_index + 1, declare_path_root=False)

    def _bind_loop_targets(self, for_index: int) -> None:
        depth = self._stmt.depths[for_index]
        index = for_index + 1
        while index < len(self._tokens):
            token = self._tokens[index]
            if token.is_keyword("in") and self._stmt.depths[index] == depth:
                return
            if token.kind == TokenKind.IDENTIFIER and not self._is_attribute(index):
                if for_index == 0:
                    self._declare(index, "loop variable", shadow=False)
                else:
                    self._handled.add(index)
                    self._locals.add(token.lexeme)
            index += 1

    def _bind_assignment(self) -> None:
        operator_index = self._stmt.last_assignment_index()
        if operator_index is None:
            self._bind_bare_annotation()
            return
        target_end = operator_index
        colon = self._stmt.index_of_top_level(":")
        if colon is not None and colon < target_end:
            # Annotated assignment: names after the colon are the annotation.
            target_end = colon

        targets: list[int] = []
        for index in range(target_end):
            if self._stmt.depths[index] != 0 or not self._is_identifier(index) or self._is_attribute(index):
                continue
            following = self._token(index + 1)
            if following is not None and following.is_symbol("(", "[", "."):
                continue
            targets.append(index)

        type_name = "unknown"
        if len(targets) == 1 and self._tokens[operator_index].lexeme == "=":
            type_name = self._infer_type(operator_index)
        for index in targets:
            if self._tokens[index] not in self._skip:
                self._declare(index, type_name, shadow=False)

    def _bind_bare_annotation(self) -> None:
        """Declare ``name`` in ``name: Type``, which has no value."""
        colon = self._token(1)
        if self._is_identifier(0) and colon is not None and colon.is_symbol(":") and len(self._tokens) > 2:
            self._declare(0, "unknown", shadow=False)

    def _bind_aliases_and_walrus(self) -> None:
        for index, token in enumerate(self._tokens):
            if token.kind != TokenKind.IDENTIFIER or index in self._handled:
                continue
            following = self._token(index + 1)
            if self._is_after_as(index):
                self._declare(index, "alias", shadow=True)
            elif following is not None and following.is_symbol(":="):
                self._declare(index, self._infer_type(index + 1), shadow=False)

    def _bind_statement_locals(self) -> None:
        for index, token in enumerate(self._tokens):
            if token.is_keyword("for") and index > 0:
                self._bind_loop_targets(index)
            elif token.is_keyword("lambda"):
                depth = self._stmt.depths[index]
                cursor = index + 1
                while cursor < len(self._tokens):
                    param = self._tokens[cursor]
                    if param.is_symbol(":") and self._stmt.depths[cursor] == depth:
                        break
                    starts_param = cursor == index + 1 or self._tokens[cursor - 1].is_symbol(",", "*", "**")
                    if param.kind == TokenKind.IDENTIFIER and starts_param:
                        self._handled.add(cursor)
                        self._locals.add(param.lexeme)
                    cursor += 1

    def _is_after_as(self, index: int) -> bool:
        previous = self._token(index - 1)
        return previous is not None and previous.is_keyword("as")

    def _segment_has_alias(self, index: int) -> bool:
        """True if the import segment starting at *index* ends in ``as <name>``."""
        for token in self._tokens[index:]:
            if token.is_symbol(","):
                return False
            if token.is_keyword("as"):
                return True
        return False

    def _is_dotted(self, index: int) -> bool:
        following = self._token(index + 1)
        return following is not None and following.is_symbol(".")

    # ------------------------------------------------------------------
    # Type inference
    # ------------------------------------------------------------------

    def _infer_type(self, operator_index: int) -> str:
        """Infer a category for the value right of the operator at *operator_index*."""
        rhs = self._tokens[operator_index + 1 :]
        if not rhs:
            return "unknown"
        first = rhs[0]
        if len(rhs) == 1:
            return self._infer_single(first)
        if first.is_symbol("["):
            return "list"
        if first.is_symbol("{"):
            if rhs[1].is_symbol("}") or any(t.is_symbol(":") for t in rhs):
                return "dict"
            return "set"
        if first.is_symbol("("):
            if rhs[1].is_symbol(")") or any(t.is_symbol(",") for t in rhs):
                return "tuple"
            return "expression"
        if first.kind == TokenKind.IDENTIFIER and rhs[1].is_symbol("("):
            if first.lexeme in _CONSTRUCTOR_TYPES:
                return _CONSTRUCTOR_TYPES[first.lexeme]
            entry = self._table.lookup(first.lexeme, self._scopes)
            if entry is not None and entry.type_name == "class":
                return first.lexeme
            return "func return"
        if all(t.kind == TokenKind.STRING or t.is_symbol("+") for t in rhs):
            return "string"
        return "expression"

    def _infer_single(self, token: Token) -> str:
        if token.kind == TokenKind.NUMBER:
            text = token.lexeme.lower()
            if text.endswith("j"):
                return "complex"
            if text.startswith(("0x", "0o", "0b")):
                return "int"
            return "float" if "." in text or "e" in text else "int"
        if token.kind == TokenKind.STRING:
            prefix = token.lexeme[: len(token.lexeme) - len(token.lexeme.lstrip("rRuUfFbB"))]
            return "bytes" if "b" in prefix.lower() else "string"
        if token.is_keyword("True", "False"):
            return "bool"
        if token.is_keyword("None"):
            return "none"
        if token.kind == TokenKind.IDENTIFIER:
            entry = self._table.lookup(token.lexeme, self._scopes)
            if entry is not None:
                return entry.type_name
        return "unknown"
