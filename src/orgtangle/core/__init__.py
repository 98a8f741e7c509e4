"""Include resolution and tangle orchestration."""
from __future__ import annotations

from .exceptions import (
    ConfigError,
    CyclicDependencyError,
    ExtractorError,
    MissingIncludeError,
    OrgTangleError,
    UnsavedDocumentError,
)
from .orchestrator import (
    Orchestrator,
    TangleOutcome,
    TangleStrategy,
    artifact_path_for,
    tangle_current_document,
    tangle_file,
)
from .resolver import AncestorChain, IncludeResolver, ResolutionResult, resolve, resolve_with_dependencies
from .tangle_paths import rewrite

__all__ = [
    "AncestorChain",
    "ConfigError",
    "CyclicDependencyError",
    "ExtractorError",
    "IncludeResolver",
    "MissingIncludeError",
    "Orchestrator",
    "OrgTangleError",
    "ResolutionResult",
    "TangleOutcome",
    "TangleStrategy",
    "UnsavedDocumentError",
    "artifact_path_for",
    "resolve",
    "resolve_with_dependencies",
    "rewrite",
    "tangle_current_document",
    "tangle_file",
]
