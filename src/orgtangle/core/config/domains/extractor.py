"""Domain-specific configuration for the external tangler."""
from __future__ import annotations

from functools import cached_property
from typing import List

from ..base import BaseDomainConfig


class ExtractorConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "extractor"

    @cached_property
    def command(self) -> List[str]:
        raw = self.section.get("command") or ["emacs", "--batch", "-Q"]
        return [str(part) for part in raw]

    @cached_property
    def timeout_seconds(self) -> float:
        return float(self.section.get("timeout_seconds", 120))
