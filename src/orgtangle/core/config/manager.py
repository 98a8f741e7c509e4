"""
orgtangle configuration management (layered YAML + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import jsonschema
import yaml

from orgtangle.core.exceptions import ConfigError
from orgtangle.core.utils.io import iter_yaml_files, read_yaml
from orgtangle.core.utils.merge import deep_merge
from orgtangle.data import get_data_path, read_yaml as read_bundled_yaml

# Module logger (warnings are user-visible via CLI log config).
logger = logging.getLogger(__name__)

ENV_PREFIX = "ORGTANGLE_"
PROJECT_CONFIG_DIRNAME = ".orgtangle"
USER_CONFIG_DIR_ENV = "ORGTANGLE_USER_CONFIG_DIR"

# Environment keys that configure the loader itself rather than config values.
_RESERVED_ENV_KEYS = {USER_CONFIG_DIR_ENV}


def find_project_root(start: Path) -> Path:
    """Return the nearest ancestor of ``start`` containing ``.orgtangle/``.

    Falls back to ``start`` (or its directory, when ``start`` is a file).
    """
    start = Path(start).expanduser().resolve()
    base = start if start.is_dir() else start.parent
    for candidate in (base, *base.parents):
        if (candidate / PROJECT_CONFIG_DIRNAME).is_dir():
            return candidate
    return base


def get_user_config_dir() -> Path:
    override = os.environ.get(USER_CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base / "orgtangle"


class ConfigManager:
    """Load, merge, and validate orgtangle configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: ORGTANGLE_<section>__<key>
    2. Project config: <project>/.orgtangle/config/*.yaml (alphabetical order)
    3. User config: ~/.config/orgtangle/config/*.yaml (alphabetical order)
    4. Bundled defaults: orgtangle.data/config/*.yaml (alphabetical order)
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root).resolve() if repo_root else find_project_root(Path.cwd())

        # Bundled defaults from orgtangle.data package (always available)
        self.core_config_dir = get_data_path("config")
        self.user_config_dir = get_user_config_dir() / "config"
        self.project_config_dir = self.repo_root / PROJECT_CONFIG_DIRNAME / "config"
        self.schema_path = get_data_path("schemas", "config.schema.yaml")

    # ========== YAML layers ==========

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        """Merge every YAML file of ``directory`` into ``cfg``; missing dirs are skipped."""
        merged = dict(cfg)
        for path in iter_yaml_files(directory):
            try:
                # Fail closed: configuration must never silently ignore invalid YAML.
                data = read_yaml(path, default={}, raise_on_error=True) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {path}: {exc}", context={"path": str(path)}) from exc
            if not isinstance(data, dict):
                raise ConfigError(
                    f"Config file must contain a mapping: {path}", context={"path": str(path)}
                )
            logger.debug("Merging config layer %s", path)
            merged = deep_merge(merged, data)
        return merged

    # ========== Environment overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        if value.strip().lower() in {"null", "none"}:
            return None
        return value.strip()

    def _parse_env_key(self, raw: str) -> List[str]:
        segs = raw.split("__")
        if any(seg == "" for seg in segs):
            raise ConfigError(
                f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.",
                context={"key": f"{ENV_PREFIX}{raw}"},
            )
        # Normalize to lowercase so env overrides address canonical keys.
        return [seg.lower() for seg in segs]

    def iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX) or key in _RESERVED_ENV_KEYS:
                continue
            raw = key[len(ENV_PREFIX):]
            if not raw:
                raise ConfigError(f"Malformed {ENV_PREFIX}* key", context={"key": key})
            yield self._parse_env_key(raw), self._coerce_type(os.environ[key])

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path, value in self.iter_env_overrides():
            cur = cfg
            for part in path[:-1]:
                nxt = cur.get(part)
                if not isinstance(nxt, dict):
                    nxt = {}
                    cur[part] = nxt
                cur = nxt
            cur[path[-1]] = value
        return cfg

    # ========== Validation ==========

    def validate_schema(self, cfg: Dict[str, Any]) -> None:
        schema = read_bundled_yaml("schemas", self.schema_path.name)
        validator = jsonschema.Draft202012Validator(schema)
        errors = sorted(validator.iter_errors(cfg), key=lambda e: list(e.path))
        if errors:
            first = errors[0]
            location = ".".join(str(p) for p in first.path) or "<root>"
            raise ConfigError(
                f"Invalid configuration at {location}: {first.message}",
                context={"path": location, "errors": [e.message for e in errors]},
            )

    # ========== Loading ==========

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load and merge configuration from all layers (uncached)."""
        cfg: Dict[str, Any] = {}
        cfg = self._load_directory(self.core_config_dir, cfg)
        cfg = self._load_directory(self.user_config_dir, cfg)
        cfg = self._load_directory(self.project_config_dir, cfg)
        cfg = self.apply_env_overrides(cfg)
        if validate:
            self.validate_schema(cfg)
        return cfg

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-notation key.

        Example:
            >>> manager.get('tangle.delete_temp_artifact')
            False
        """
        current: Any = self.load_config(validate=False)
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current


__all__ = [
    "ConfigManager",
    "ENV_PREFIX",
    "PROJECT_CONFIG_DIRNAME",
    "find_project_root",
    "get_user_config_dir",
]
