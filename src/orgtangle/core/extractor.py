"""External tangler integration.

The include resolver only produces a composite document; turning annotated
source blocks into files is delegated to an ``Extractor``. The default
implementation drives Org Babel in a batch Emacs process.
"""
from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from orgtangle.core.config.domains import ExtractorConfig
from orgtangle.core.exceptions import ExtractorError
from orgtangle.core.utils.subprocess import run_with_timeout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionResult:
    path: Path
    args: List[str] = field(default_factory=list)
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""

    @property
    def tangled_files(self) -> List[Path]:
        """Files reported by the tangler, one per stdout line."""
        return [Path(line.strip()) for line in self.stdout.splitlines() if line.strip()]


class Extractor(Protocol):
    def extract(self, path: Path, args: Sequence[str] = ()) -> ExtractionResult:
        """Tangle ``path``; ``args`` are tangler-specific and passed through."""
        ...


def _elisp_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_tangle_form(path: Path, args: Sequence[str] = ()) -> str:
    """Return the elisp form that tangles ``path`` and prints the produced files.

    ``args`` map to the optional TARGET-FILE and LANG-RE arguments of
    ``org-babel-tangle-file``.
    """
    call_args = " ".join(_elisp_string(str(a)) for a in [str(path), *args])
    return (
        "(progn (require 'org) (require 'ob-tangle) "
        f"(princ (mapconcat #'identity (org-babel-tangle-file {call_args}) \"\\n\")))"
    )


class EmacsExtractor:
    """Run ``org-babel-tangle-file`` in a batch Emacs process."""

    def __init__(
        self,
        command: Optional[Sequence[str]] = None,
        timeout: Optional[float] = None,
        *,
        config: Optional[ExtractorConfig] = None,
    ) -> None:
        if command is None or timeout is None:
            config = config or ExtractorConfig()
        self.command = list(command) if command is not None else config.command
        self.timeout = float(timeout) if timeout is not None else config.timeout_seconds

    def extract(self, path: Path, args: Sequence[str] = ()) -> ExtractionResult:
        path = Path(path)
        argv = [*self.command, "--eval", build_tangle_form(path, args)]
        logger.info("Tangling %s with %s", path, self.command[0])
        try:
            completed = run_with_timeout(argv, timeout=self.timeout, cwd=str(path.parent))
        except FileNotFoundError as exc:
            raise ExtractorError(
                f"Tangler executable not found: {self.command[0]}",
                context={"command": self.command},
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ExtractorError(
                f"Tangler timed out after {self.timeout:g}s on {path}",
                context={"path": str(path), "timeout": self.timeout},
            ) from exc

        result = ExtractionResult(
            path=path,
            args=[str(a) for a in args],
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        if completed.returncode != 0:
            raise ExtractorError(
                f"Tangler exited with status {completed.returncode} on {path}: "
                f"{result.stderr.strip() or 'no output'}",
                context={"path": str(path), "returncode": completed.returncode, "stderr": result.stderr},
            )
        return result


__all__ = ["Extractor", "ExtractionResult", "EmacsExtractor", "build_tangle_form"]
