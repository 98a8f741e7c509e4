from __future__ import annotations

from pathlib import Path

import pytest

from orgtangle.core.config import (
    ConfigManager,
    ExtractorConfig,
    LoggingConfig,
    TangleConfig,
    find_project_root,
    get_cached_config,
)
from orgtangle.core.config.cache import is_cached
from orgtangle.core.exceptions import ConfigError


def test_bundled_defaults(tmp_path: Path) -> None:
    cfg = ConfigManager(repo_root=tmp_path).load_config()

    assert cfg["tangle"] == {
        "advice_enabled": True,
        "delete_temp_artifact": False,
        "artifact_template": "{dirname}-composite.org",
    }
    assert cfg["extractor"]["command"] == ["emacs", "--batch", "-Q"]
    assert cfg["logging"]["level"] == "WARNING"


def test_project_layer_overrides_user_layer_and_defaults(tmp_path: Path, project_config, monkeypatch) -> None:
    user_dir = tmp_path / "user"
    (user_dir / "config").mkdir(parents=True)
    (user_dir / "config" / "prefs.yaml").write_text(
        "tangle:\n  delete_temp_artifact: true\nextractor:\n  timeout_seconds: 30\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("ORGTANGLE_USER_CONFIG_DIR", str(user_dir))
    repo = project_config("extractor:\n  timeout_seconds: 10\n")

    manager = ConfigManager(repo_root=repo)

    assert manager.get("tangle.delete_temp_artifact") is True
    assert manager.get("extractor.timeout_seconds") == 10
    assert manager.get("tangle.advice_enabled") is True
    assert manager.get("tangle.nonexistent", "fallback") == "fallback"


def test_array_append_marker(tmp_path: Path, project_config) -> None:
    repo = project_config("extractor:\n  command: ['+', '--debug-init']\n")
    assert ConfigManager(repo_root=repo).get("extractor.command") == ["emacs", "--batch", "-Q", "--debug-init"]


def test_env_overrides_are_coerced(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("ORGTANGLE_TANGLE__ADVICE_ENABLED", "false")
    monkeypatch.setenv("ORGTANGLE_EXTRACTOR__TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("ORGTANGLE_EXTRACTOR__COMMAND", '["emacs-29", "--batch"]')
    monkeypatch.setenv("ORGTANGLE_LOGGING__FILE", "null")

    cfg = ConfigManager(repo_root=tmp_path).load_config()

    assert cfg["tangle"]["advice_enabled"] is False
    assert cfg["extractor"]["timeout_seconds"] == 2.5
    assert cfg["extractor"]["command"] == ["emacs-29", "--batch"]
    assert cfg["logging"]["file"] is None


def test_malformed_env_key_is_rejected(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("ORGTANGLE_TANGLE____ADVICE_ENABLED", "true")
    with pytest.raises(ConfigError, match="empty segment"):
        ConfigManager(repo_root=tmp_path).load_config()


def test_schema_violation_is_a_config_error(tmp_path: Path, project_config) -> None:
    repo = project_config("tangle:\n  artifact_template: nested/dir.org\n")
    with pytest.raises(ConfigError) as excinfo:
        ConfigManager(repo_root=repo).load_config()
    assert excinfo.value.context["path"] == "tangle.artifact_template"


def test_unknown_section_key_is_rejected(tmp_path: Path, project_config) -> None:
    repo = project_config("tangle:\n  advice-enabled: false\n")
    with pytest.raises(ConfigError):
        ConfigManager(repo_root=repo).load_config()


def test_invalid_yaml_is_a_config_error(tmp_path: Path, project_config) -> None:
    repo = project_config("tangle: [unclosed\n")
    with pytest.raises(ConfigError, match="Invalid YAML"):
        ConfigManager(repo_root=repo).load_config()


def test_non_mapping_file_is_a_config_error(tmp_path: Path, project_config) -> None:
    repo = project_config("- just\n- a list\n")
    with pytest.raises(ConfigError, match="mapping"):
        ConfigManager(repo_root=repo).load_config()


def test_find_project_root_walks_up_from_file(tmp_path: Path, project_config) -> None:
    repo = project_config("{}\n")
    doc = repo / "a" / "b" / "main.org"
    doc.parent.mkdir(parents=True)
    doc.write_text("", encoding="utf-8")

    assert find_project_root(doc) == repo.resolve()


def test_find_project_root_falls_back_to_start_directory(tmp_path: Path) -> None:
    doc = tmp_path / "loose.org"
    doc.write_text("", encoding="utf-8")
    assert find_project_root(doc) == tmp_path.resolve()


def test_cache_is_invalidated_by_config_edits(tmp_path: Path, project_config) -> None:
    repo = project_config("tangle:\n  delete_temp_artifact: false\n")
    first = get_cached_config(repo_root=repo)
    assert is_cached(repo)
    assert get_cached_config(repo_root=repo) is first

    project_config("tangle:\n  delete_temp_artifact: true\n", name="zz-override.yaml")

    assert get_cached_config(repo_root=repo)["tangle"]["delete_temp_artifact"] is True


def test_domain_configs_read_their_sections(tmp_path: Path, project_config) -> None:
    repo = project_config(
        "tangle:\n  artifact_template: '{stem}.full.org'\n"
        "extractor:\n  timeout_seconds: 7\n"
        "logging:\n  level: debug\n  file: ~/orgtangle.log\n"
    )

    assert TangleConfig(repo_root=repo).artifact_template == "{stem}.full.org"
    assert ExtractorConfig(repo_root=repo).timeout_seconds == 7.0
    log_cfg = LoggingConfig(repo_root=repo)
    assert log_cfg.level == "DEBUG"
    assert log_cfg.file == Path("~/orgtangle.log").expanduser()
