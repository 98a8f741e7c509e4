"""Centralized configuration caching.

All domain configs share this cache. Cache keys fingerprint the ORGTANGLE_*
environment and the mtimes of user/project config files, so edits made by
long-running processes or tests never return stale configuration.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from orgtangle.core.utils.io import iter_yaml_files

_config_cache: Dict[str, Dict[str, Any]] = {}


def _fingerprint_dir(d: Path) -> List[Tuple[str, int, int]]:
    files: List[Tuple[str, int, int]] = []
    for p in iter_yaml_files(d):
        st = p.stat()
        files.append((p.name, int(st.st_mtime_ns), int(st.st_size)))
    return files


def _cache_key(repo_root: Path) -> str:
    from .manager import ENV_PREFIX, PROJECT_CONFIG_DIRNAME, get_user_config_dir

    env_items = sorted(
        (k, os.environ.get(k, "")) for k in os.environ.keys() if k.startswith(ENV_PREFIX)
    )
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]

    cfg_files = {
        "project": _fingerprint_dir(repo_root / PROJECT_CONFIG_DIRNAME / "config"),
        "user": _fingerprint_dir(get_user_config_dir() / "config"),
    }
    cfg_fp = hashlib.sha256(repr(cfg_files).encode("utf-8")).hexdigest()[:12]
    return f"{repo_root}:env={env_fp}:cfg={cfg_fp}"


def get_cached_config(repo_root: Optional[Path] = None, validate: bool = True) -> Dict[str, Any]:
    """Get configuration with caching.

    NOTE: returns the cached dict instance (treat as immutable).
    """
    from .manager import ConfigManager

    manager = ConfigManager(repo_root=repo_root)
    key = _cache_key(manager.repo_root)
    if key not in _config_cache:
        _config_cache[key] = manager.load_config(validate=validate)
    return _config_cache[key]


def clear_all_caches() -> None:
    """Clear the configuration cache (call after config files change)."""
    _config_cache.clear()


def is_cached(repo_root: Path) -> bool:
    return _cache_key(Path(repo_root).resolve()) in _config_cache


__all__ = ["get_cached_config", "clear_all_caches", "is_cached"]
