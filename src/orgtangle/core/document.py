"""Document model used by the include resolver."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from orgtangle.core.exceptions import MissingIncludeError
from orgtangle.core.utils.io import read_text


@dataclass(frozen=True)
class Document:
    """A file path together with its raw text and base directory."""

    path: Path
    text: str
    base_dir: Path

    @classmethod
    def load(cls, path: Path, *, included_from: Optional[Path] = None) -> "Document":
        """Read ``path`` from disk.

        Raises:
            MissingIncludeError: When the file cannot be read.
        """
        # Always absolute, so rewritten :tangle values never depend on the cwd.
        path = Path(os.path.abspath(path))
        try:
            text = read_text(path)
        except (FileNotFoundError, IsADirectoryError, PermissionError) as exc:
            raise MissingIncludeError(path, included_from=included_from) from exc
        return cls(path=path, text=text, base_dir=path.parent)

    def resolve_reference(self, raw: str) -> Path:
        """Resolve a path found inside this document against its base directory."""
        return Path(os.path.abspath(self.base_dir / raw))


__all__ = ["Document"]
