# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the scopelex command-line interface."""

import argparse
import json
import sys
from pathlib import Path

from scopelex.cli.report import format_diagnostic, format_summary, format_symbol_table, format_token_table
from scopelex.config.loader import CONFIG_FILE_NAME, ConfigError, ScanConfig, load_config, save_config
from scopelex.lexer.export import serialize, to_dict
from scopelex.lexer.scanner import ScanResult, scan

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the scopelex CLI."""
    parser = argparse.ArgumentParser(
        prog="scopelex",
        description="scopelex - lexical analyzer for indentation-sensitive source",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Write a default configuration file",
        description=f"Create a default {CONFIG_FILE_NAME} in a directory.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to write the configuration to (default: current directory)",
    )

    # tokens subcommand
    tokens_parser = subparsers.add_parser(
        "tokens",
        help="Print the token stream of a file",
        description="Scan a file and print its tokens followed by any diagnostics.",
    )
    tokens_parser.add_argument("file", help="Source file to scan")
    _add_scan_options(tokens_parser)

    # symbols subcommand
    symbols_parser = subparsers.add_parser(
        "symbols",
        help="Print the symbol table of a file",
        description="Scan a file and print the identifiers it declares.",
    )
    symbols_parser.add_argument("file", help="Source file to scan")
    _add_scan_options(symbols_parser)

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Report lexical errors",
        description="Scan one or more files and report their diagnostics.",
    )
    check_parser.add_argument("files", nargs="+", help="Source files to check")
    _add_scan_options(check_parser)

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _add_scan_options(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--config",
        default=None,
        help=f"Configuration file (default: {CONFIG_FILE_NAME} in the current directory, if present)",
    )
    subparser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "tokens":
        return _cmd_tokens(args)
    if args.command == "symbols":
        return _cmd_symbols(args)
    if args.command == "check":
        return _cmd_check(args)
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    config_file = directory / CONFIG_FILE_NAME
    if config_file.exists():
        print(f"Error: configuration already exists at '{config_file}'.", file=sys.stderr)
        return 1

    try:
        save_config(ScanConfig(), config_file)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Wrote default configuration to '{config_file}'.")
    return 0


def _cmd_tokens(args: argparse.Namespace) -> int:
    """Handle the tokens subcommand."""
    scanned = _scan_file(args, Path(args.file))
    if scanned is None:
        return 1
    source, result = scanned

    if args.format == "json":
        print(serialize(result, indent=2))
    else:
        print(format_token_table(result.tokens))
        _print_diagnostics(result, source, args.file)
    return 0 if result.ok else 1


def _cmd_symbols(args: argparse.Namespace) -> int:
    """Handle the symbols subcommand."""
    scanned = _scan_file(args, Path(args.file))
    if scanned is None:
        return 1
    source, result = scanned

    if args.format == "json":
        data = to_dict(result)
        print(json.dumps({"symbols": data["symbols"], "scopes": data["scopes"]}, indent=2))
    else:
        print(format_symbol_table(result.symbols, result.scopes))
        _print_diagnostics(result, source, args.file)
    return 0 if result.ok else 1


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    reports: list[dict[str, object]] = []
    has_errors = False

    for name in args.files:
        scanned = _scan_file(args, Path(name))
        if scanned is None:
            return 1
        source, result = scanned
        has_errors = has_errors or not result.ok
        if args.format == "json":
            reports.append({"file": name, "diagnostics": to_dict(result)["diagnostics"]})
            continue
        _print_diagnostics(result, source, name)
        print(format_summary(result.diagnostics, name))

    if args.format == "json":
        print(json.dumps(reports, indent=2))
    return 1 if has_errors else 0


def _scan_file(args: argparse.Namespace, path: Path) -> tuple[str, ScanResult] | None:
    """Load the configuration, read *path* and scan it; print an error and return None on failure."""
    config = _load_scan_config(args)
    if config is None:
        return None

    try:
        source = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"Error: file '{path}' does not exist.", file=sys.stderr)
        return None
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error: cannot read '{path}': {exc}", file=sys.stderr)
        return None

    return source, scan(source, config)


def _load_scan_config(args: argparse.Namespace) -> ScanConfig | None:
    """Return the configuration selected by --config, the local file, or the defaults."""
    if args.config is not None:
        config_path = Path(args.config)
    else:
        config_path = Path.cwd() / CONFIG_FILE_NAME
        if not config_path.exists():
            return ScanConfig()

    try:
        return load_config(config_path)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None


def _print_diagnostics(result: ScanResult, source: str, filename: str) -> None:
    for diagnostic in result.diagnostics:
        print(format_diagnostic(diagnostic, source, filename), file=sys.stderr)
        print(file=sys.stderr)
