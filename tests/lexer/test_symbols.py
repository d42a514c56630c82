# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for symbol declaration, lookup and use-before-declaration checks."""

from scopelex.config.loader import ScanConfig
from scopelex.lexer.diagnostics import ErrorKind
from scopelex.lexer.indentation import ScopeStack
from scopelex.lexer.scanner import scan
from scopelex.lexer.symbols import SymbolEntry, SymbolTable
from scopelex.lexer.tokens import Token, TokenKind

# ###############
# Test Helpers
# ###############


def _symbols(source: str) -> list[tuple[str, str]]:
    """Return (name, type) for every symbol entry of *source*."""
    return [(entry.name, entry.type_name) for entry in scan(source).symbols]


def _undeclared(source: str, config: ScanConfig | None = None) -> list[str]:
    """Return the messages of all undeclared-variable diagnostics."""
    result = scan(source, config)
    return [d.message for d in result.diagnostics if d.kind == ErrorKind.UNDECLARED_VARIABLE]


def _identifier(name: str, line: int = 1, column: int = 1) -> Token:
    return Token(TokenKind.IDENTIFIER, name, line, column)


# ###############
# Symbol Table
# ###############


class TestSymbolTable:
    def test_declare_and_lookup(self) -> None:
        table = SymbolTable()
        scopes = ScopeStack()
        entry = table.declare(_identifier("x", 3, 5), scopes, "int")
        assert entry == SymbolEntry(id=1, name="x", scope=0, depth=1, line=3, column=5, type_name="int")
        assert table.lookup("x", scopes) == entry
        assert table.lookup("y", scopes) is None

    def test_lookup_searches_enclosing_frames(self) -> None:
        table = SymbolTable()
        scopes = ScopeStack()
        table.declare(_identifier("x"), scopes)
        scopes.push("f", 4, 2)
        assert table.lookup("x", scopes) is not None

    def test_closed_frame_is_no_longer_visible(self) -> None:
        table = SymbolTable()
        scopes = ScopeStack()
        scopes.push("f", 4, 2)
        table.declare(_identifier("local"), scopes)
        scopes.pop()
        assert table.lookup("local", scopes) is None
        assert len(table) == 1

    def test_visible_name_is_not_declared_twice(self) -> None:
        table = SymbolTable()
        scopes = ScopeStack()
        first = table.declare(_identifier("x"), scopes)
        scopes.push("f", 4, 2)
        assert table.declare(_identifier("x", 3), scopes) == first
        assert len(table) == 1

    def test_shadowing_declaration_adds_an_entry(self) -> None:
        table = SymbolTable()
        scopes = ScopeStack()
        table.declare(_identifier("x"), scopes)
        frame = scopes.push("f", 4, 2)
        inner = table.declare(_identifier("x", 2), scopes, "parameter", shadow=True)
        assert inner.scope == frame.index
        assert inner.depth == 2
        assert [entry.id for entry in table.entries()] == [1, 2]


# ###############
# Declarations
# ###############


class TestDeclarations:
    def test_assignment_declares(self) -> None:
        assert _symbols("count = 0\n") == [("count", "int")]

    def test_reassignment_in_inner_block_reuses_entry(self) -> None:
        assert _symbols("count = 0\nif True:\n    count = 1\n") == [("count", "int")]

    def test_tuple_targets(self) -> None:
        assert _symbols("a, b = 1, 2\n") == [("a", "unknown"), ("b", "unknown")]

    def test_chained_assignment(self) -> None:
        assert [name for name, _ in _symbols("a = b = 0\n")] == ["a", "b"]

    def test_annotated_assignment(self) -> None:
        assert _symbols("limit: int = 5\n") == [("limit", "int")]

    def test_attribute_and_subscript_targets_are_not_declarations(self) -> None:
        source = "items = [1]\nitems[0] = 2\nitems.extra = 3\n"
        assert _symbols(source) == [("items", "list")]

    def test_function_and_parameters(self) -> None:
        result = scan("def add(x, y=1, *args, **kwargs):\n    return x + y\n")
        assert result.ok
        entries = [(e.name, e.type_name, result.scopes[e.scope].name) for e in result.symbols]
        assert entries == [
            ("add", "function", "global"),
            ("x", "parameter", "add"),
            ("y", "parameter", "add"),
            ("args", "parameter", "add"),
            ("kwargs", "parameter", "add"),
        ]

    def test_parameter_shadows_global(self) -> None:
        result = scan("x = 1\ndef f(x):\n    return x\n")
        assert [(e.name, e.depth) for e in result.symbols] == [("x", 1), ("f", 1), ("x", 2)]

    def test_class_members(self) -> None:
        source = "class Car:\n    wheels = 4\n    def drive(self):\n        return self.wheels\n"
        result = scan(source)
        assert result.ok
        assert [(e.name, result.scopes[e.scope].name) for e in result.symbols] == [
            ("Car", "global"),
            ("wheels", "Car"),
            ("drive", "Car"),
            ("self", "drive"),
        ]

    def test_imports(self) -> None:
        source = "import os.path\nimport numpy as np\nfrom math import sqrt, pi as PI\nprint(os, np, sqrt, PI)\n"
        result = scan(source)
        assert result.ok
        assert [(e.name, e.type_name) for e in result.symbols] == [
            ("os", "module"),
            ("np", "alias"),
            ("sqrt", "module"),
            ("PI", "alias"),
        ]

    def test_for_loop_target(self) -> None:
        result = scan("for i in range(3):\n    print(i)\n")
        assert result.ok
        assert [(e.name, e.type_name) for e in result.symbols] == [("i", "loop variable")]

    def test_with_alias(self) -> None:
        assert scan('with open("data.txt") as handle:\n    print(handle)\n').ok

    def test_global_statement_declares_in_current_scope(self) -> None:
        result = scan("def f():\n    global total\n    total = 1\n")
        assert result.ok
        assert [(e.name, e.depth) for e in result.symbols] == [("f", 1), ("total", 2)]

    def test_walrus_target(self) -> None:
        assert scan("if (n := 10) > 5:\n    print(n)\n").ok

    def test_comprehension_and_lambda_variables_stay_local(self) -> None:
        source = "squares = [n * n for n in range(3)]\nadd = lambda a, b: a + b\n"
        result = scan(source)
        assert result.ok
        assert [e.name for e in result.symbols] == ["squares", "add"]

    def test_bare_annotation_declares(self) -> None:
        result = scan("class Point:\n    x: int\n    y: float\n")
        assert result.ok
        assert [(e.name, result.scopes[e.scope].name) for e in result.symbols] == [
            ("Point", "global"),
            ("x", "Point"),
            ("y", "Point"),
        ]

    def test_bare_annotation_with_unknown_type_is_a_read(self) -> None:
        assert len(_undeclared("total: Missing\n")) == 1

    def test_async_def(self) -> None:
        result = scan("async def f(a):\n    return a\nf(1)\n")
        assert result.ok
        assert [(e.name, e.type_name, result.scopes[e.scope].name) for e in result.symbols] == [
            ("f", "function", "global"),
            ("a", "parameter", "f"),
        ]

    def test_async_for_and_with(self) -> None:
        source = (
            "async def main(items):\n"
            "    async for item in items:\n"
            "        print(item)\n"
            "    async with open(item) as handle:\n"
            "        print(handle)\n"
        )
        result = scan(source)
        assert result.ok
        assert [e.name for e in result.symbols] == ["main", "items", "item", "handle"]


# ###############
# One-line Compound Statements
# ###############


class TestOneLineCompound:
    def test_for_body_sees_loop_variable(self) -> None:
        result = scan("for i in range(3): print(i)\n")
        assert result.ok
        assert [(e.name, e.type_name) for e in result.symbols] == [("i", "loop variable")]

    def test_def_body_sees_parameters(self) -> None:
        result = scan("def f(a): return a\nprint(f(1))\n")
        assert result.ok
        assert [(e.name, e.type_name) for e in result.symbols] == [("f", "function")]

    def test_def_parameters_do_not_leak(self) -> None:
        assert len(_undeclared("def f(a): return a\nprint(a)\n")) == 1

    def test_if_body_declares_in_enclosing_scope(self) -> None:
        assert scan("c = 1\nif c: y = 1\nprint(y)\n").ok

    def test_with_body_sees_alias(self) -> None:
        result = scan("with open('p') as fh: data = fh.read()\nprint(data)\n")
        assert result.ok
        assert [e.name for e in result.symbols] == ["fh", "data"]

    def test_try_except_bodies(self) -> None:
        assert scan("try: v = 1\nexcept ValueError: v = 2\nprint(v)\n").ok

    def test_while_else_bodies(self) -> None:
        assert scan("n = 3\nwhile n: n -= 1\nelse: done = True\nprint(done)\n").ok

    def test_body_read_is_still_checked(self) -> None:
        assert len(_undeclared("if True: print(missing)\n")) == 1

    def test_no_block_is_expected_after_a_one_line_body(self) -> None:
        result = scan("if True: x = 1\ny = 2\n")
        assert result.ok
        assert [frame.name for frame in result.scopes] == ["global"]


# ###############
# Type Inference
# ###############


class TestTypeInference:
    def test_literal_types(self) -> None:
        source = (
            "a = 1\n"
            "b = 2.5\n"
            'c = "s"\n'
            "d = True\n"
            "e = [1, 2]\n"
            "f = (1, 2)\n"
            'g = {"k": 1}\n'
            "h = {1, 2}\n"
            "i = None\n"
            "j = 0xFF\n"
            "k = 2j\n"
            'm = b"raw"\n'
        )
        assert [t for _, t in _symbols(source)] == [
            "int",
            "float",
            "string",
            "bool",
            "list",
            "tuple",
            "dict",
            "set",
            "none",
            "int",
            "complex",
            "bytes",
        ]

    def test_type_copied_from_other_name(self) -> None:
        assert _symbols("a = 1.5\nb = a\n") == [("a", "float"), ("b", "float")]

    def test_calls(self) -> None:
        source = "name = input()\ncount = int(name)\ndef make():\n    return 1\nvalue = make()\n"
        assert [t for _, t in _symbols(source)] == ["string", "int", "function", "func return"]

    def test_class_instantiation(self) -> None:
        source = "class Car:\n    pass\ncar = Car()\n"
        assert _symbols(source)[-1] == ("car", "Car")

    def test_string_concatenation(self) -> None:
        assert _symbols('greeting = "Hello, " + "world"\n') == [("greeting", "string")]

    def test_arithmetic_is_an_expression(self) -> None:
        assert _symbols("a = 1\nb = a + 2\n")[-1] == ("b", "expression")


# ###############
# Use Before Declaration
# ###############


class TestUndeclared:
    def test_undeclared_read(self) -> None:
        result = scan("print(undeclared_variable)\n")
        assert result.kinds() == [ErrorKind.UNDECLARED_VARIABLE]
        assert (result.diagnostics[0].line, result.diagnostics[0].column) == (1, 7)

    def test_self_referencing_assignment(self) -> None:
        assert len(_undeclared("y = y + 1\n")) == 1

    def test_use_after_declaration(self) -> None:
        assert _undeclared("x = 1\nprint(x)\n") == []

    def test_builtins_are_always_declared(self) -> None:
        assert _undeclared("print(len(range(3)), str(1), input)\n") == []

    def test_attribute_names_are_not_reads(self) -> None:
        assert _undeclared('s = "abc"\nprint(s.upper().strip())\n') == []

    def test_keyword_arguments_are_not_reads(self) -> None:
        assert _undeclared('print("a", end="")\n') == []

    def test_name_declared_in_closed_block_is_not_visible(self) -> None:
        source = "def f():\n    inner = 1\n    return inner\nprint(inner)\n"
        assert len(_undeclared(source)) == 1

    def test_later_function_definition_is_reported(self) -> None:
        source = "def f():\n    return g()\ndef g():\n    return 1\n"
        assert len(_undeclared(source)) == 1

    def test_extra_builtins_from_config(self) -> None:
        source = "app.run()\n"
        assert len(_undeclared(source)) == 1
        assert _undeclared(source, ScanConfig(extra_builtins=("app",))) == []

    def test_names_inside_strings_are_ignored(self) -> None:
        assert _undeclared('print("undefined_name")\n') == []
