"""Locate include directives and tangle annotations in Org text.

Handles:
- ``#+include: "path"`` - one directive per line, trailing content ignored
- ``:tangle value`` - header argument with a bare or double-quoted value

All functions here are pure: they never touch the filesystem.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Union

# Keyword is case-insensitive like Org itself; the target must be a literal
# quoted path, computed targets are never followed.
INCLUDE_PATTERN = re.compile(
    r'^[ \t]*#\+include:[ \t]*"(?P<target>[^"\n]+)"[^\n]*$',
    re.IGNORECASE | re.MULTILINE,
)

TANGLE_PATTERN = re.compile(r':tangle[ \t]+(?P<value>"[^"\n]*"|[^\s"]+)')


@dataclass(frozen=True)
class IncludeDirective:
    """An include line; ``start``/``end`` span the line without its newline."""

    target: str
    start: int
    end: int
    line: int


@dataclass(frozen=True)
class LiteralSegment:
    text: str
    start: int
    end: int


Segment = Union[LiteralSegment, IncludeDirective]


@dataclass(frozen=True)
class TangleAnnotation:
    """A ``:tangle`` value; the span covers the value only (quotes included)."""

    raw: str
    start: int
    end: int

    @property
    def quoted(self) -> bool:
        return len(self.raw) >= 2 and self.raw.startswith('"') and self.raw.endswith('"')

    @property
    def value(self) -> str:
        return self.raw[1:-1] if self.quoted else self.raw


def scan_includes(text: str, start: int = 0) -> Iterator[IncludeDirective]:
    """Yield include directives whose line starts at or after ``start``.

    The iterator is lazy; calling again with a later ``start`` resumes the
    scan without revisiting earlier text.
    """
    for match in INCLUDE_PATTERN.finditer(text, start):
        yield IncludeDirective(
            target=match.group("target"),
            start=match.start(),
            end=match.end(),
            line=text.count("\n", 0, match.start()) + 1,
        )


def segment(text: str) -> List[Segment]:
    """Split ``text`` into literal spans and include directives, in order.

    Concatenating every literal and directive line reproduces ``text``;
    empty literals are never emitted.
    """
    segments: List[Segment] = []
    cursor = 0
    for directive in scan_includes(text):
        if directive.start > cursor:
            segments.append(LiteralSegment(text[cursor:directive.start], cursor, directive.start))
        segments.append(directive)
        cursor = directive.end
    if cursor < len(text):
        segments.append(LiteralSegment(text[cursor:], cursor, len(text)))
    return segments


def find_tangle_annotations(text: str) -> Iterator[TangleAnnotation]:
    """Yield every ``:tangle`` header value in ``text``, in order."""
    for match in TANGLE_PATTERN.finditer(text):
        yield TangleAnnotation(
            raw=match.group("value"),
            start=match.start("value"),
            end=match.end("value"),
        )


__all__ = [
    "INCLUDE_PATTERN",
    "TANGLE_PATTERN",
    "IncludeDirective",
    "LiteralSegment",
    "Segment",
    "TangleAnnotation",
    "scan_includes",
    "segment",
    "find_tangle_annotations",
]
