import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'orgtangle' and tests/ importable for helpers.
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from helpers.cache_utils import reset_orgtangle_caches
from helpers.extractors import RecordingExtractor


@pytest.fixture(autouse=True)
def _isolate_orgtangle_env(tmp_path_factory, monkeypatch):
    """Strip ORGTANGLE_* overrides and point user config at an empty directory."""
    for key in list(os.environ):
        if key.startswith("ORGTANGLE_"):
            monkeypatch.delenv(key, raising=False)
    user_dir = tmp_path_factory.mktemp("user-config")
    monkeypatch.setenv("ORGTANGLE_USER_CONFIG_DIR", str(user_dir))
    reset_orgtangle_caches()
    yield
    reset_orgtangle_caches()


@pytest.fixture
def write_org(tmp_path):
    """Write an Org file under tmp_path and return its path."""

    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def recording_extractor() -> RecordingExtractor:
    return RecordingExtractor()


@pytest.fixture
def project_config(tmp_path):
    """Write ``<tmp_path>/.orgtangle/config/<name>`` and return the project root."""

    def _write(content: str, name: str = "project.yaml") -> Path:
        cfg_dir = tmp_path / ".orgtangle" / "config"
        cfg_dir.mkdir(parents=True, exist_ok=True)
        (cfg_dir / name).write_text(content, encoding="utf-8")
        return tmp_path

    return _write
