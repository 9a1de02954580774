#!/usr/bin/env python3
"""
CLI for the transcript scanner and evaluator.

Usage:
    python -m transcript tokens FILE
    python -m transcript ast FILE
    python -m transcript run FILE [--permissive] [--json]

FILE may be '-' to read from standard input.

Examples:
    # Show the token stream of a template
    python -m transcript tokens page.html

    # Evaluate the script region and print the final value
    python -m transcript run page.html

    # Keep going past failing statements, substituting null
    TRANSCRIPT_PERMISSIVE=1 python -m transcript run page.html
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional


def read_source(path: str) -> str:
    """Read source text from a file path, or stdin for '-'."""
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text()


def cmd_tokens(args, settings) -> int:
    """Print the token stream of a file."""
    from . import Lexer

    lexer = Lexer(read_source(args.file), args.file)
    tokens = lexer.tokenize()

    for token in tokens:
        loc = token.span.start
        print(f"{loc.line:>4}:{loc.column:<4} {token.type.name:<16} {token.value!r}")

    if lexer.aborted:
        print(lexer.diagnostics.format_all(), file=sys.stderr)
        return 1
    return 0


def cmd_ast(args, settings) -> int:
    """Print the syntax tree of a file."""
    from . import tokenize, parse, format_ast, ParserError

    source = read_source(args.file)
    try:
        program = parse(tokenize(source, args.file), args.file)
    except ParserError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_ast(program))
    return 0


def cmd_run(args, settings) -> int:
    """Evaluate the script region of a file."""
    from . import run, format_value

    source = read_source(args.file)
    result = run(source, permissive=settings.permissive, filename=args.file)

    if args.json:
        print(json.dumps({
            "success": result.success,
            "value": result.data,
            "error": result.error_message,
            **result.diagnostics.to_json(),
        }, indent=2))
    else:
        if result.diagnostics.diagnostics:
            print(result.diagnostics.format_all(), file=sys.stderr)
        if result.success or settings.permissive:
            print(format_value(result.value))

    return 0 if result.success else 1


def main(argv: Optional[List[str]] = None) -> int:
    from .config import Settings, configure_logging

    parser = argparse.ArgumentParser(
        prog='python -m transcript',
        description='transcript scanner and evaluator',
    )
    parser.add_argument('--log-level', metavar='LEVEL',
                        help='Logging level (default: $TRANSCRIPT_LOG_LEVEL or WARNING)')

    subparsers = parser.add_subparsers(dest='action', required=True)

    tokens_parser = subparsers.add_parser('tokens', help='Print the token stream')
    tokens_parser.add_argument('file', help="Source file ('-' for stdin)")

    ast_parser = subparsers.add_parser('ast', help='Print the syntax tree')
    ast_parser.add_argument('file', help="Source file ('-' for stdin)")

    run_parser = subparsers.add_parser('run', help='Evaluate the script region')
    run_parser.add_argument('file', help="Source file ('-' for stdin)")
    run_parser.add_argument('--permissive', action='store_true', default=None,
                            help='Report failing statements and continue with null')
    run_parser.add_argument('--json', action='store_true',
                            help='Print the result and diagnostics as JSON')

    args = parser.parse_args(argv)

    settings = Settings.from_env()
    if args.log_level:
        settings.log_level = args.log_level
    if getattr(args, 'permissive', None):
        settings.permissive = True

    try:
        configure_logging(settings.log_level)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        if args.action == 'tokens':
            return cmd_tokens(args, settings)
        elif args.action == 'ast':
            return cmd_ast(args, settings)
        elif args.action == 'run':
            return cmd_run(args, settings)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
