from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Sequence


class OrgTangleError(Exception):
    """Base exception for orgtangle."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class CyclicDependencyError(OrgTangleError, RuntimeError):
    """Raised when a document transitively includes itself."""

    def __init__(self, path: Path | str, *, chain: Sequence[Path | str] = ()) -> None:
        self.path = Path(path)
        self.chain = [Path(p) for p in chain]
        trail = " -> ".join(str(p) for p in [*self.chain, self.path])
        message = f"Cyclic include dependency: {self.path}"
        if self.chain:
            message += f" (chain: {trail})"
        ctx = {"path": str(self.path), "chain": [str(p) for p in self.chain]}
        OrgTangleError.__init__(self, message, context=ctx)
        RuntimeError.__init__(self, message)


class UnsavedDocumentError(OrgTangleError, ValueError):
    """Raised when the root document has no file on disk."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else None
        if self.path is None:
            message = "Document must be saved before it can be tangled"
        else:
            message = f"Document must be saved before it can be tangled: {self.path}"
        OrgTangleError.__init__(
            self, message, context={"path": str(self.path) if self.path else None}
        )
        ValueError.__init__(self, message)


class MissingIncludeError(OrgTangleError, FileNotFoundError):
    """Raised when an include target cannot be read."""

    def __init__(self, path: Path | str, *, included_from: Path | str | None = None) -> None:
        self.path = Path(path)
        self.included_from = Path(included_from) if included_from is not None else None
        message = f"Include not found: {self.path}"
        if self.included_from is not None:
            message += f" (from {self.included_from})"
        ctx = {
            "path": str(self.path),
            "included_from": str(self.included_from) if self.included_from else None,
        }
        OrgTangleError.__init__(self, message, context=ctx)
        FileNotFoundError.__init__(self, message)


class ExtractorError(OrgTangleError, RuntimeError):
    """Raised when the external tangler fails or times out."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        OrgTangleError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class ConfigError(OrgTangleError, ValueError):
    """Raised for unreadable, malformed, or schema-invalid configuration."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        OrgTangleError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "OrgTangleError",
    "CyclicDependencyError",
    "UnsavedDocumentError",
    "MissingIncludeError",
    "ExtractorError",
    "ConfigError",
]
