"""Domain-specific configuration for the tangle orchestrator."""
from __future__ import annotations

from functools import cached_property

from ..base import BaseDomainConfig


class TangleConfig(BaseDomainConfig):
    """Accessor for the ``tangle`` section.

    ``advice_enabled`` decides the default strategy: when true, plain tangle
    requests are resolved through the include resolver first.
    """

    def _config_section(self) -> str:
        return "tangle"

    @cached_property
    def advice_enabled(self) -> bool:
        return bool(self.section.get("advice_enabled", True))

    @cached_property
    def delete_temp_artifact(self) -> bool:
        return bool(self.section.get("delete_temp_artifact", False))

    @cached_property
    def artifact_template(self) -> str:
        return str(self.section.get("artifact_template") or "{dirname}-composite.org")
