"""Layered YAML configuration for orgtangle."""
from __future__ import annotations

from .base import BaseDomainConfig
from .cache import clear_all_caches, get_cached_config
from .domains import ExtractorConfig, LoggingConfig, TangleConfig
from .manager import ConfigManager, find_project_root

__all__ = [
    "BaseDomainConfig",
    "ConfigManager",
    "ExtractorConfig",
    "LoggingConfig",
    "TangleConfig",
    "clear_all_caches",
    "find_project_root",
    "get_cached_config",
]
