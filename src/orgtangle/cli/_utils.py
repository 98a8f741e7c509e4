"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
from pathlib import Path

from orgtangle.core.config import find_project_root


def get_repo_root(args: argparse.Namespace) -> Path:
    """Project root from ``--repo-root``, else discovered from the document or cwd."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).expanduser().resolve()
    document = getattr(args, "document", None)
    if document:
        return find_project_root(Path(document))
    return find_project_root(Path.cwd())


__all__ = ["get_repo_root"]
