# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Text rendering of tokens, symbol tables and diagnostics for the terminal."""

from yachalk import chalk

from scopelex.lexer.diagnostics import Diagnostic
from scopelex.lexer.indentation import ScopeFrame
from scopelex.lexer.source import logical_lines
from scopelex.lexer.symbols import SymbolEntry
from scopelex.lexer.tokens import Token

# ###############
# Public Interface
# ###############


def format_token_table(tokens: tuple[Token, ...]) -> str:
    """Render tokens as a Line / Column / Kind / Lexeme table."""
    header = f"{'Line':<8}{'Column':<8}{'Kind':<15}Lexeme"
    rows = [chalk.bold(header), "-" * 50]
    for token in tokens:
        rows.append(f"{token.line:<8}{token.column:<8}{token.kind.value:<15}{_visible(token.lexeme)}")
    return "\n".join(rows)


def format_symbol_table(symbols: tuple[SymbolEntry, ...], scopes: tuple[ScopeFrame, ...]) -> str:
    """Render the symbol table with the name of each entry's scope."""
    header = f"{'ID':<6}{'Name':<20}{'Type':<15}{'Scope':<22}Line"
    rows = [chalk.bold(header), "-" * 67]
    for entry in symbols:
        scope_name = scopes[entry.scope].name if entry.scope < len(scopes) else str(entry.scope)
        rows.append(f"{entry.id:<6}{entry.name:<20}{entry.type_name:<15}{scope_name:<22}{entry.line}")
    return "\n".join(rows)


def format_diagnostic(diagnostic: Diagnostic, source: str, filename: str = "<input>") -> str:
    """Render a diagnostic with the offending source line and a caret marker."""
    lines = [line.text for line in logical_lines(source)]
    line_idx = diagnostic.line - 1
    col = diagnostic.column

    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx]
    else:
        source_line = ""

    line_num = str(diagnostic.line)
    gutter_width = len(line_num) + 1
    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"
    pad = " " * (col - 1)

    return (
        f"{chalk.red('error')}[{diagnostic.kind.value}]: {diagnostic.message}\n"
        f"{' ' * gutter_width}--> {filename}:{diagnostic.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{chalk.red('^')}"
    )


def format_summary(diagnostics: tuple[Diagnostic, ...], filename: str) -> str:
    """One-line outcome of checking a file."""
    if not diagnostics:
        return chalk.green(f"{filename}: no issues found")
    noun = "issue" if len(diagnostics) == 1 else "issues"
    return chalk.red(f"{filename}: {len(diagnostics)} {noun} found")


# ################
# Implementation
# ################


def _visible(lexeme: str) -> str:
    """Make line breaks in a lexeme visible so each token stays on one row."""
    return lexeme.replace("\r", "\\r").replace("\n", "\\n")
