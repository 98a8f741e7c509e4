"""
orgtangle config command.

SUMMARY: Show the merged configuration

Merges bundled defaults, user config, project config and ORGTANGLE_*
environment overrides, then prints the result or a single key.
"""

from __future__ import annotations

import argparse
import json
import sys

from orgtangle.cli import OutputFormatter, add_json_flag, add_repo_root_flag, get_repo_root
from orgtangle.core.config import ConfigManager
from orgtangle.core.utils.io import dump_yaml_string

SUMMARY = "Show the merged configuration"

_MISSING = object()


def _nest_key(key: str, value):
    """Nest a dot-notation key into a YAML/JSON-friendly mapping."""
    parts = [p for p in str(key).split(".") if p]
    out = value
    for part in reversed(parts):
        out = {part: out}
    return out


def _format_value(value, indent: int = 0) -> str:
    """Format a value for table display."""
    prefix = "  " * indent
    if isinstance(value, dict):
        lines = []
        for k, v in value.items():
            formatted = _format_value(v, indent + 1)
            if isinstance(v, dict) and v:
                lines.append(f"{prefix}{k}:")
                lines.append(formatted)
            else:
                lines.append(f"{prefix}{k}: {formatted}")
        return "\n".join(lines)
    if isinstance(value, list):
        if not value:
            return "[]"
        return f"[{', '.join(str(v) for v in value)}]"
    return str(value)


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "key",
        nargs="?",
        help="Specific configuration key to show (e.g., 'tangle.delete_temp_artifact')",
    )
    parser.add_argument(
        "--format",
        choices=["json", "yaml", "table"],
        default="table",
        help="Output format (default: table)",
    )
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    manager = ConfigManager(get_repo_root(args))
    config = manager.load_config()

    output_format = "json" if args.json else args.format

    if args.key:
        value = manager.get(args.key, _MISSING)
        if value is _MISSING:
            formatter.error(f"Key not found: {args.key}", error_code="key_not_found")
            return 1
        data = _nest_key(args.key, value)
    else:
        data = config

    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif output_format == "yaml":
        sys.stdout.write(dump_yaml_string(data))
    elif args.key and not isinstance(value, dict):
        print(f"{args.key}: {_format_value(value)}")
    else:
        print(_format_value(value if args.key else data))
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
