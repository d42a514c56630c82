# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""JSON export of scan results.

The format is versioned so consumers can detect schema changes.
"""

from __future__ import annotations

import json
from typing import Any

from scopelex.lexer.diagnostics import Diagnostic
from scopelex.lexer.indentation import ScopeFrame
from scopelex.lexer.scanner import ScanResult
from scopelex.lexer.symbols import SymbolEntry
from scopelex.lexer.tokens import Token

# ###############
# Public Interface
# ###############

EXPORT_FORMAT_VERSION = "1"


def serialize(result: ScanResult, *, indent: int | None = None) -> str:
    """Serialize a ScanResult to a JSON string (compact unless *indent* is given)."""
    separators = (",", ":") if indent is None else None
    return json.dumps(to_dict(result), indent=indent, separators=separators)


def to_dict(result: ScanResult) -> dict[str, Any]:
    """Convert a ScanResult into plain JSON-compatible data."""
    return {
        "v": EXPORT_FORMAT_VERSION,
        "tokens": [_token_to_dict(t) for t in result.tokens],
        "diagnostics": [_diagnostic_to_dict(d) for d in result.diagnostics],
        "symbols": [_symbol_to_dict(s) for s in result.symbols],
        "scopes": [_scope_to_dict(s) for s in result.scopes],
    }


# ################
# Implementation
# ################


def _token_to_dict(token: Token) -> dict[str, Any]:
    return {"kind": token.kind.value, "lexeme": token.lexeme, "line": token.line, "column": token.column}


def _diagnostic_to_dict(diagnostic: Diagnostic) -> dict[str, Any]:
    return {
        "kind": diagnostic.kind.value,
        "line": diagnostic.line,
        "column": diagnostic.column,
        "message": diagnostic.message,
    }


def _symbol_to_dict(entry: SymbolEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "name": entry.name,
        "type": entry.type_name,
        "scope": entry.scope,
        "depth": entry.depth,
        "line": entry.line,
        "column": entry.column,
    }


def _scope_to_dict(frame: ScopeFrame) -> dict[str, Any]:
    d: dict[str, Any] = {"index": frame.index, "name": frame.name, "width": frame.width, "line": frame.line}
    if frame.parent is not None:
        d["parent"] = frame.parent
    return d
