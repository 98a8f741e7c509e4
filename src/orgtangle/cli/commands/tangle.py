"""
orgtangle tangle command.

SUMMARY: Expand includes and tangle a root Org document

Arguments after ``--`` are passed to the tangler unchanged; supplying any
switches to direct tangling of the unexpanded document.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List

from orgtangle.cli import (
    OutputFormatter,
    add_document_arg,
    add_json_flag,
    add_repo_root_flag,
    get_repo_root,
)
from orgtangle.core.config import ExtractorConfig, TangleConfig, get_cached_config
from orgtangle.core.extractor import EmacsExtractor
from orgtangle.core.orchestrator import Orchestrator, TangleStrategy
from orgtangle.core.utils.merge import deep_merge

SUMMARY = "Expand includes and tangle a root Org document"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_document_arg(parser)
    strategy = parser.add_mutually_exclusive_group()
    strategy.add_argument(
        "--resolve",
        dest="strategy",
        action="store_const",
        const=TangleStrategy.RESOLVE_INCLUDES,
        help="Expand includes before tangling (default when tangle.advice_enabled is true)",
    )
    strategy.add_argument(
        "--direct",
        dest="strategy",
        action="store_const",
        const=TangleStrategy.DIRECT,
        help="Tangle the document as-is, without expanding includes",
    )
    artifact = parser.add_mutually_exclusive_group()
    artifact.add_argument(
        "--delete-artifact",
        dest="delete_artifact",
        action="store_const",
        const=True,
        help="Remove the composite document after tangling",
    )
    artifact.add_argument(
        "--keep-artifact",
        dest="delete_artifact",
        action="store_const",
        const=False,
        help="Keep the composite document after tangling",
    )
    add_json_flag(parser)
    add_repo_root_flag(parser)
    parser.add_argument(
        "extractor_args",
        nargs=argparse.REMAINDER,
        help="Tangler arguments after `--` (options for orgtangle must precede the document)",
    )


def _extractor_args(args: argparse.Namespace) -> List[str]:
    raw = list(getattr(args, "extractor_args", None) or [])
    if raw and raw[0] == "--":
        raw = raw[1:]
    return raw


def _tangle_config(repo_root: Path, delete_artifact: bool | None) -> TangleConfig:
    cfg: Dict[str, Any] = get_cached_config(repo_root=repo_root)
    if delete_artifact is not None:
        cfg = deep_merge(cfg, {"tangle": {"delete_temp_artifact": delete_artifact}})
    return TangleConfig(repo_root=repo_root, config=cfg)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    repo_root = get_repo_root(args)

    orchestrator = Orchestrator(
        extractor=EmacsExtractor(config=ExtractorConfig(repo_root=repo_root)),
        config=_tangle_config(repo_root, getattr(args, "delete_artifact", None)),
        current_document=Path(args.document),
    )
    outcome = orchestrator.tangle_current_document(
        _extractor_args(args),
        strategy=getattr(args, "strategy", None),
    )

    tangled = [str(p) for p in outcome.extraction.tangled_files]
    payload = {
        "document": str(outcome.source),
        "strategy": outcome.strategy.value,
        "artifact": str(outcome.artifact) if outcome.artifact else None,
        "artifact_kept": outcome.artifact_kept,
        "tangled": tangled,
    }
    lines = [f"Tangled {outcome.source} ({outcome.strategy.value})"]
    if outcome.artifact is not None:
        state = "kept" if outcome.artifact_kept else "removed"
        lines.append(f"  composite: {outcome.artifact} ({state})")
    lines.extend(f"  -> {p}" for p in tangled)
    formatter.success(payload, "\n".join(lines))
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
