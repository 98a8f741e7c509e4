"""
orgtangle resolve command.

SUMMARY: Print the composite document without tangling it
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from orgtangle.cli import OutputFormatter, add_document_arg, add_json_flag
from orgtangle.core.exceptions import UnsavedDocumentError
from orgtangle.core.resolver import resolve_with_dependencies
from orgtangle.core.utils.io import write_text

SUMMARY = "Print the composite document without tangling it"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_document_arg(parser)
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Write the composite document to this file instead of stdout",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    document = Path(args.document)
    if not document.is_file():
        raise UnsavedDocumentError(document)

    result = resolve_with_dependencies(document)

    if args.output:
        write_text(Path(args.output), result.content)

    if formatter.json_mode:
        payload = {
            "document": str(document),
            "dependencies": [str(p) for p in result.dependencies],
            "output": args.output,
        }
        if not args.output:
            payload["content"] = result.content
        formatter.json_output(payload)
    elif args.output:
        formatter.text(f"Wrote {args.output} ({len(result.dependencies)} includes expanded)")
    else:
        sys.stdout.write(result.content)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
