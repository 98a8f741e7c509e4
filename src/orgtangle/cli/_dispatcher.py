"""
Auto-discovery CLI dispatcher for orgtangle.

Scans ``orgtangle/cli/commands`` and registers every module as a
subcommand. Adding a command = adding a .py file exposing ``SUMMARY``,
``register_args`` and ``main``.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any

from orgtangle.cli._output import OutputFormatter
from orgtangle.cli._utils import get_repo_root
from orgtangle.core.exceptions import OrgTangleError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def discover_commands() -> dict[str, dict[str, Any]]:
    """
    Discover all command modules under cli/commands.

    Returns:
        Dict mapping CLI command name to command info dict
    """
    commands_dir = Path(__file__).parent / "commands"
    commands: dict[str, dict[str, Any]] = {}

    for item in sorted(commands_dir.glob("*.py")):
        if item.name.startswith("_"):
            continue

        module_name = item.stem
        try:
            module = importlib.import_module(f"orgtangle.cli.commands.{module_name}")
        except ImportError as e:
            print(f"Warning: Could not import command {module_name}: {e}", file=sys.stderr)
            continue
        commands[module_name.replace("_", "-")] = {
            "module": module,
            "summary": getattr(module, "SUMMARY", module_name),
            "register_args": getattr(module, "register_args", None),
            "main": getattr(module, "main", None),
        }

    return commands


def _get_version() -> str:
    from orgtangle import __version__

    return __version__


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with auto-discovered commands."""
    parser = argparse.ArgumentParser(
        prog="orgtangle",
        description="Expand #+include: directives and tangle the composite Org document.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-v: INFO, -vv: DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Write log records to this file instead of stderr",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )
    for name, info in discover_commands().items():
        cmd_parser = subparsers.add_parser(
            name,
            help=info["summary"],
            description=info["summary"],
        )
        if info["register_args"]:
            info["register_args"](cmd_parser)
        if info["main"]:
            cmd_parser.set_defaults(_func=info["main"])

    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    from orgtangle.core.config import LoggingConfig
    from orgtangle.core.stdlib_logging import configure_logging, suppress_lastresort_in_json_mode

    json_mode = bool(getattr(args, "json", False))
    log_cfg = LoggingConfig(repo_root=get_repo_root(args))

    if args.verbose >= 2:
        level = "DEBUG"
    elif args.verbose == 1:
        level = "INFO"
    else:
        level = log_cfg.level

    log_path = Path(args.log_file) if args.log_file else log_cfg.file
    if json_mode and log_path is None and not args.verbose:
        # JSON mode must remain machine-readable.
        suppress_lastresort_in_json_mode()
        return
    configure_logging(level=level, log_path=log_path)


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the orgtangle CLI.

    Returns:
        Exit code (0 success, 1 failure, 2 usage error)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "_func", None):
        parser.print_help()
        return 0 if not args.command else 2

    formatter = OutputFormatter(json_mode=bool(getattr(args, "json", False)))
    try:
        _configure_logging(args)
        return int(args._func(args) or 0)
    except OrgTangleError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        formatter.error(exc)
        return 1
    except KeyboardInterrupt:
        formatter.error("Interrupted", error_code="interrupted")
        return 130


__all__ = ["build_parser", "discover_commands", "main"]
