"""
orgtangle CLI package.

Commands are auto-discovered from ``orgtangle.cli.commands``; each module
exposes ``SUMMARY``, ``register_args(parser)`` and ``main(args) -> int``.

Framework utilities for building commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._args import add_document_arg, add_json_flag, add_repo_root_flag
from ._output import OutputFormatter
from ._utils import get_repo_root

__all__ = [
    "OutputFormatter",
    "add_document_arg",
    "add_json_flag",
    "add_repo_root_flag",
    "get_repo_root",
]
