"""Recursive ``#+include:`` expansion with cycle detection.

Each document is tokenized once into literal and directive segments; the
resolved text is built by concatenation, so directive offsets never shift
while a document is being expanded. Every include target's fully resolved
content is passed through the tangle-path rewriter before it is spliced in.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Tuple, Union

from .document import Document
from .exceptions import CyclicDependencyError
from .scanner import IncludeDirective, LiteralSegment, segment
from .tangle_paths import rewrite

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _identity(path: PathLike) -> Path:
    return Path(os.path.abspath(path))


@dataclass(frozen=True)
class AncestorChain:
    """Immutable chain of documents currently being expanded, root first."""

    paths: Tuple[Path, ...] = ()

    def extend(self, path: PathLike) -> "AncestorChain":
        return AncestorChain(self.paths + (_identity(path),))

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return _identity(path) in self.paths

    def __iter__(self) -> Iterator[Path]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)


@dataclass(frozen=True)
class ResolutionResult:
    content: str
    dependencies: List[Path] = field(default_factory=list)


class IncludeResolver:
    """Expand include directives of a root document, depth-first.

    The same file reached through two unrelated branches is read and
    expanded again each time; only true cycles are rejected.
    """

    def __init__(self, root_path: PathLike) -> None:
        self.root_path = _identity(root_path)
        self.dependencies: List[Path] = []

    def resolve(self) -> str:
        self.dependencies = []
        return self._resolve_document(Document.load(self.root_path), AncestorChain())

    def _resolve_document(self, document: Document, chain: AncestorChain) -> str:
        parts: List[str] = []
        for seg in segment(document.text):
            if isinstance(seg, LiteralSegment):
                parts.append(seg.text)
            else:
                parts.append(self._expand(seg, document, chain))
        parts.append("\n")
        return "".join(parts)

    def _expand(self, directive: IncludeDirective, container: Document, chain: AncestorChain) -> str:
        target = container.resolve_reference(directive.target)
        if target in chain:
            raise CyclicDependencyError(target, chain=list(chain))

        logger.debug(
            "Expanding include %s (%s line %d, depth %d)",
            target,
            container.path,
            directive.line,
            len(chain) + 1,
        )
        included = Document.load(target, included_from=container.path)
        self.dependencies.append(target)
        resolved = self._resolve_document(included, chain.extend(container.path))
        return rewrite(resolved, self.root_path, target)


def resolve_with_dependencies(root_path: PathLike) -> ResolutionResult:
    """Resolve ``root_path`` and report every include expanded along the way."""
    resolver = IncludeResolver(root_path)
    content = resolver.resolve()
    return ResolutionResult(content=content, dependencies=list(resolver.dependencies))


def resolve(root_path: PathLike) -> str:
    """Return the composite text of ``root_path`` with all includes expanded.

    Raises:
        CyclicDependencyError: A document transitively includes itself.
        MissingIncludeError: The root or an include target cannot be read.
    """
    return IncludeResolver(root_path).resolve()


__all__ = [
    "AncestorChain",
    "IncludeResolver",
    "ResolutionResult",
    "resolve",
    "resolve_with_dependencies",
]
