# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical analysis: tokens, indentation scopes, symbols and diagnostics."""

from scopelex.lexer.diagnostics import Diagnostic, ErrorKind, ErrorReporter
from scopelex.lexer.export import serialize, to_dict
from scopelex.lexer.indentation import ScopeFrame, ScopeStack
from scopelex.lexer.scanner import Scanner, ScanResult, reconstruct, scan
from scopelex.lexer.source import LogicalLine, logical_lines
from scopelex.lexer.symbols import SymbolEntry, SymbolTable
from scopelex.lexer.tokens import Token, TokenKind

__all__ = [
    "Diagnostic",
    "ErrorKind",
    "ErrorReporter",
    "LogicalLine",
    "ScanResult",
    "Scanner",
    "ScopeFrame",
    "ScopeStack",
    "SymbolEntry",
    "SymbolTable",
    "Token",
    "TokenKind",
    "logical_lines",
    "reconstruct",
    "scan",
    "serialize",
    "to_dict",
]
