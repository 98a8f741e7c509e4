"""Resolve-then-tangle orchestration.

One run owns one composite artifact: the root document is resolved, the
composite text is written beside it, the tangler runs on that file, and the
artifact is optionally removed. Concurrent runs against the same root are
not supported; callers must serialize them.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

from orgtangle.core.config import ExtractorConfig, TangleConfig, find_project_root
from orgtangle.core.exceptions import ConfigError, UnsavedDocumentError
from orgtangle.core.extractor import EmacsExtractor, ExtractionResult, Extractor
from orgtangle.core.resolver import resolve
from orgtangle.core.utils.io import write_text

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class TangleStrategy(str, enum.Enum):
    """How a tangle request reaches the tangler."""

    RESOLVE_INCLUDES = "resolve"
    DIRECT = "direct"


@dataclass(frozen=True)
class TangleOutcome:
    source: Path
    strategy: TangleStrategy
    artifact: Optional[Path]
    artifact_kept: bool
    extraction: ExtractionResult


def artifact_path_for(root: PathLike, template: str = "{dirname}-composite.org") -> Path:
    """Return the composite artifact path for ``root``.

    The artifact always lives in the root document's directory; ``{dirname}``
    expands to that directory's name.
    """
    root = Path(root)
    directory = root.resolve().parent
    return directory / template.format(dirname=directory.name or "root", stem=root.stem)


def _require_saved(path: Optional[PathLike]) -> Path:
    if path is None:
        raise UnsavedDocumentError()
    path = Path(path)
    if not path.is_file():
        raise UnsavedDocumentError(path)
    return path


class Orchestrator:
    """Entry point for tangling a root document.

    Args:
        extractor: Tangler backend (defaults to batch Emacs)
        config: Tangle settings (defaults to layered configuration)
        current_document: Document the host considers "current", used by
            ``tangle_current_document``
    """

    def __init__(
        self,
        extractor: Optional[Extractor] = None,
        config: Optional[TangleConfig] = None,
        *,
        current_document: Optional[PathLike] = None,
    ) -> None:
        self.extractor: Extractor = extractor if extractor is not None else EmacsExtractor()
        self.config = config if config is not None else TangleConfig()
        self.current_document = Path(current_document) if current_document is not None else None

    @property
    def default_strategy(self) -> TangleStrategy:
        if self.config.advice_enabled:
            return TangleStrategy.RESOLVE_INCLUDES
        return TangleStrategy.DIRECT

    def choose_strategy(
        self,
        extractor_args: Optional[Sequence[str]] = None,
        strategy: Optional[TangleStrategy] = None,
    ) -> TangleStrategy:
        # Tangler-specific arguments target one file or language; resolution
        # only applies to plain whole-document requests.
        if extractor_args:
            return TangleStrategy.DIRECT
        return TangleStrategy(strategy) if strategy is not None else self.default_strategy

    def tangle_file(
        self,
        path: Optional[PathLike],
        extractor_args: Optional[Sequence[str]] = None,
        *,
        strategy: Optional[TangleStrategy] = None,
    ) -> TangleOutcome:
        """Tangle ``path``, expanding includes first unless delegating directly.

        Raises:
            UnsavedDocumentError: ``path`` is not a file on disk.
            CyclicDependencyError: The include graph contains a cycle.
            MissingIncludeError: An include target cannot be read.
            ExtractorError: The tangler failed.
        """
        root = _require_saved(path)
        args = list(extractor_args or [])
        chosen = self.choose_strategy(args, strategy)

        if chosen is TangleStrategy.DIRECT:
            logger.info("Tangling %s directly", root)
            extraction = self.extractor.extract(root, args)
            return TangleOutcome(root, chosen, None, False, extraction)

        composite = resolve(root)
        artifact = artifact_path_for(root, self.config.artifact_template)
        if artifact == root.resolve():
            raise ConfigError(
                f"Composite artifact would overwrite the root document: {artifact}",
                context={"template": self.config.artifact_template},
            )
        write_text(artifact, composite)
        logger.info("Wrote composite document for %s to %s", root, artifact)

        delete = self.config.delete_temp_artifact
        try:
            extraction = self.extractor.extract(artifact, [])
        finally:
            if delete:
                artifact.unlink(missing_ok=True)
                logger.info("Removed composite document %s", artifact)
        return TangleOutcome(root, chosen, artifact, not delete, extraction)

    def tangle_current_document(
        self,
        extractor_args: Optional[Sequence[str]] = None,
        *,
        strategy: Optional[TangleStrategy] = None,
    ) -> TangleOutcome:
        return self.tangle_file(self.current_document, extractor_args, strategy=strategy)


def _default_orchestrator(path: Optional[PathLike], extractor: Optional[Extractor]) -> Orchestrator:
    repo_root = find_project_root(Path(path)) if path is not None else None
    if extractor is None:
        extractor = EmacsExtractor(config=ExtractorConfig(repo_root=repo_root))
    config = TangleConfig(repo_root=repo_root)
    return Orchestrator(extractor=extractor, config=config, current_document=path)


def tangle_file(
    path: Optional[PathLike],
    extractor_args: Optional[Sequence[str]] = None,
    *,
    strategy: Optional[TangleStrategy] = None,
    extractor: Optional[Extractor] = None,
) -> TangleOutcome:
    """Tangle ``path`` using configuration found for its project."""
    _require_saved(path)
    return _default_orchestrator(path, extractor).tangle_file(path, extractor_args, strategy=strategy)


def tangle_current_document(
    current_document: Optional[PathLike],
    extractor_args: Optional[Sequence[str]] = None,
    *,
    strategy: Optional[TangleStrategy] = None,
    extractor: Optional[Extractor] = None,
) -> TangleOutcome:
    _require_saved(current_document)
    orchestrator = _default_orchestrator(current_document, extractor)
    return orchestrator.tangle_current_document(extractor_args, strategy=strategy)


__all__ = [
    "Orchestrator",
    "TangleOutcome",
    "TangleStrategy",
    "artifact_path_for",
    "tangle_file",
    "tangle_current_document",
]
