#!/usr/bin/env python3
"""
Command line interface for PLC.

    plc run FILE      interpret FILE; the exit status is main's return value
    plc lex FILE      print the tokens of FILE
    plc parse FILE    print the syntax tree of FILE
    plc check FILE    analyze FILE without running it
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .driver import check, evaluate
from .errors import PlcError
from .lexer import tokenize_file
from .parser import ASTNode, parse_file

logger = logging.getLogger(__name__)


def format_tree(node: ASTNode, depth: int = 0) -> str:
    """Render an AST as an indented outline, one node per line."""
    indent = "  " * depth
    scalars = []
    nested = []
    for name in node._fields:
        value = getattr(node, name)
        if isinstance(value, ASTNode):
            nested.append((name, [value]))
        elif isinstance(value, tuple) and value and isinstance(value[0], ASTNode):
            nested.append((name, list(value)))
        elif not (isinstance(value, tuple) and not value):
            scalars.append(f"{name}={value!r}")

    lines = [f"{indent}{type(node).__name__}({', '.join(scalars)})"]
    for name, children in nested:
        lines.append(f"{indent}  {name}:")
        for child in children:
            lines.append(format_tree(child, depth + 2))
    return "\n".join(lines)


def _read(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _run(args) -> int:
    result = evaluate(_read(args.file), args.file)
    # Process exit statuses are a single byte
    return min(max(result.exit_code, 0), 255)


def _lex(args) -> int:
    for token in tokenize_file(args.file):
        print(f"{token.location}\t{token.type.name}\t{token.lexeme}")
    return 0


def _parse(args) -> int:
    print(format_tree(parse_file(args.file)))
    return 0


def _check(args) -> int:
    source = check(_read(args.file), args.file)
    print(f"{args.file}: OK ({len(source.fields)} fields, {len(source.methods)} methods)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plc",
        description="Lexer, parser, analyzer and interpreter for the PLC language",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    plc run program.plc        # Run main() and exit with its value
    plc check program.plc      # Type check only
    plc -v lex program.plc     # Show tokens with debug logging
        """
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    for name, handler, help_text in (
        ("run", _run, "Interpret a program"),
        ("lex", _lex, "Print the tokens of a program"),
        ("parse", _parse, "Print the syntax tree of a program"),
        ("check", _check, "Analyze a program without running it"),
    ):
        subparser = subparsers.add_parser(name, help=help_text)
        subparser.add_argument("file", help="PLC source file")
        subparser.set_defaults(handler=handler)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    try:
        return args.handler(args)
    except PlcError as error:
        sys.stderr.write(f"{error.phase} error in {args.file}\n{error}")
        return 1
    except OSError as error:
        sys.stderr.write(f"Cannot read {args.file}: {error.strerror}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())
