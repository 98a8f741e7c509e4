"""Rewrite ``:tangle`` destinations of an included file.

Once an included file is spliced into its parent, relative destinations and
the ``yes`` shorthand would be interpreted against the composite document.
``rewrite`` pins every destination to the file the annotation textually
lives in, while ``root`` always refers to the top-level document.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Union

from .scanner import TangleAnnotation, find_tangle_annotations

PathLike = Union[str, Path]


def strip_extension(path: PathLike) -> str:
    return os.path.splitext(str(path))[0]


def _is_verbatim(value: str) -> bool:
    # Expressions are evaluated later by the tangler; absolute paths need no anchoring.
    # "~" counts as absolute, as in Emacs' file-name-absolute-p.
    return value.startswith("(") or value.startswith("~") or os.path.isabs(value)


def rewrite_value(value: str, root_path: PathLike, file_path: PathLike) -> Optional[str]:
    """Return the replacement for a single annotation value, or None to keep it."""
    if value == "yes":
        return strip_extension(file_path)
    if value == "root":
        return strip_extension(root_path)
    if value == "no" or not value.strip() or _is_verbatim(value):
        return None
    token = value.split()[0]
    if os.path.isabs(token):
        return token
    return os.path.normpath(os.path.join(os.path.dirname(str(file_path)), token))


def _render(annotation: TangleAnnotation, replacement: str) -> str:
    if annotation.quoted:
        return f'"{replacement}"'
    return replacement


def rewrite(text: str, root_path: PathLike, file_path: PathLike) -> str:
    """Rewrite every ``:tangle`` value in ``text``.

    Args:
        text: Fully resolved content of an included file
        root_path: Path of the top-level document being tangled
        file_path: Path of the file ``text`` was read from

    Returns:
        ``text`` with each annotation value replaced; everything around the
        values is left untouched.
    """
    parts: List[str] = []
    cursor = 0
    for annotation in find_tangle_annotations(text):
        replacement = rewrite_value(annotation.value, root_path, file_path)
        if replacement is None:
            continue
        parts.append(text[cursor:annotation.start])
        parts.append(_render(annotation, replacement))
        cursor = annotation.end
    parts.append(text[cursor:])
    return "".join(parts)


__all__ = ["rewrite", "rewrite_value", "strip_extension"]
