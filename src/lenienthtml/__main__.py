#!/usr/bin/env python3
"""Command-line interface for LenientHTML."""

import argparse
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from . import LenientHTML
from .scanner import ScannerOpts
from .selector import SelectorError
from .serialize import to_html, to_test_format


def _get_version():
    try:
        return version("lenienthtml")
    except PackageNotFoundError:  # pragma: no cover
        return "dev"


def _parse_args(argv):
    parser = argparse.ArgumentParser(
        prog="lenienthtml",
        description="Parse markup leniently and print its tag tree, markup, or parse errors.",
        epilog=(
            "Examples:\n"
            "  lenienthtml page.html\n"
            "  cat page.html | lenienthtml - --format errors\n"
            "  lenienthtml page.html --query 'h[1-6]' --format html\n"
            "  lenienthtml page.html --raw-text script --raw-text template\n"
            "\n"
            "If you don't have the 'lenienthtml' command available, use:\n"
            "  python -m lenienthtml ...\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "path",
        nargs="?",
        help="File to parse, or '-' to read from stdin",
    )
    parser.add_argument(
        "--format",
        choices=["tree", "html", "errors"],
        default="tree",
        help="Output format (default: tree)",
    )
    parser.add_argument(
        "--query",
        help="Regular expression matched against whole tag names (defaults to the document root)",
    )
    parser.add_argument(
        "--ignore-case",
        action="store_true",
        help="Match --query without regard to case",
    )
    parser.add_argument(
        "--raw-text",
        action="append",
        metavar="TAG",
        help="Treat TAG's body as raw text (repeatable; default: script, style)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print parser trace output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"lenienthtml {_get_version()}",
    )

    args = parser.parse_args(argv)

    if not args.path:
        parser.print_help(sys.stderr)
        raise SystemExit(1)

    return args


def _read_source(path):
    if path == "-":
        return sys.stdin.read()

    return Path(path).read_text(encoding="utf-8")


def main(argv=None):
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    source = _read_source(args.path)
    source_name = "<stdin>" if args.path == "-" else args.path
    doc = LenientHTML(
        source,
        collect_errors=True,
        debug=args.debug,
        scanner_opts=ScannerOpts(raw_text_elements=args.raw_text),
        source_name=source_name,
    )

    if args.format == "errors":
        for error in doc.errors:
            sys.stdout.write(f"{error}\n")
        raise SystemExit(1 if doc.errors else 0)

    try:
        nodes = doc.query(args.query, case_sensitive=not args.ignore_case) if args.query else [doc.root]
    except SelectorError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2) from e

    if not nodes:
        raise SystemExit(1)

    render = to_html if args.format == "html" else to_test_format
    sys.stdout.write("\n".join(render(node) for node in nodes))
    sys.stdout.write("\n")
    return None


if __name__ == "__main__":
    main()
