# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""scopelex: a lexical analyzer for indentation-sensitive, Python-like source."""

from scopelex.lexer import ErrorKind, Scanner, ScanResult, Token, TokenKind, scan

__all__ = [
    "ErrorKind",
    "ScanResult",
    "Scanner",
    "Token",
    "TokenKind",
    "scan",
]
