"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_document_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "document",
        help="Root Org document",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --repo-root to override where project configuration is looked up."""
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Project root holding .orgtangle/config (default: nearest ancestor of the document)",
    )


__all__ = ["add_json_flag", "add_document_arg", "add_repo_root_flag"]
