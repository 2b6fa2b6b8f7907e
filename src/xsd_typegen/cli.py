# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Command-line interface: convert XSD documents to TypeScript declarations.

Usage:
    # Local files, output on stdout
    xsd-typegen main.xsd common.xsd > schema.d.ts

    # From URL, writing to a file
    xsd-typegen https://example.com/xsd/pain.001.001.12.xsd -o pain.ts

    # Strip type name prefixes (first match wins)
    xsd-typegen main.xsd -p Type_ -p Tp

    # Attribute keys as produced by a parser configured with another prefix
    xsd-typegen main.xsd --attribute-prefix '$'

Diagnostics go to stderr; the generated text is only written when every
document was loaded.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .context import Context
from .xml_tree import ATTRIBUTE_PREFIX

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    """Send diagnostics to stderr."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
        root.addHandler(handler)
    root.setLevel(level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xsd-typegen",
        description="Convert XSD schemas to TypeScript type declarations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "sources",
        nargs="+",
        help="XSD file paths or http(s) URLs, loaded in order",
    )
    parser.add_argument(
        "-p",
        "--strip-prefix",
        action="append",
        default=[],
        dest="strip_prefixes",
        help="Prefix to strip from type names (repeatable, first match wins)",
    )
    parser.add_argument(
        "--attribute-prefix",
        default=ATTRIBUTE_PREFIX,
        help=f"Key prefix of attribute fields (default: {ATTRIBUTE_PREFIX})",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output file (default: stdout)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Also log every registered type and element",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the converter. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.WARNING)
    else:
        configure_logging(logging.INFO)

    ctx = Context(strip_prefixes=args.strip_prefixes, attribute_prefix=args.attribute_prefix)
    try:
        for source in args.sources:
            ctx.load_schema(source)
        output = ctx.render()
    except Exception as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output + "\n", encoding="utf-8")
        logger.info("Saved to %s", args.output)
    else:
        sys.stdout.write(output + "\n")
    return 0
