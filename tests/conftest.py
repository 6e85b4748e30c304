"""
Pytest configuration and shared fixtures for test suite.

Provides temporary version files, a clean VISTA_* environment,
and a helper for reading version files back.
"""

import pytest
from unittest.mock import MagicMock
from pathlib import Path

from vista_versioning.engine import COMPONENT_KEYS, env_var_name

SAMPLE_VERSION_FILE = (
    "VERSION_MAJOR=1\n"
    "VERSION_MINOR=2\n"
    "VERSION_PATCH=3\n"
    "BUILD_NUMBER=4\n"
)


@pytest.fixture(autouse=True)
def clean_vista_env(monkeypatch):
    """Remove environment overrides and config variables so tests start clean."""
    for key in COMPONENT_KEYS:
        monkeypatch.delenv(env_var_name(key), raising=False)
    for name in ('VISTA_VERSION_FILE', 'VISTA_ROOT_DIR', 'LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def version_file(tmp_path):
    """Create a version.properties file with version 1.2.3.4."""
    path = tmp_path / "version.properties"
    path.write_text(SAMPLE_VERSION_FILE, encoding='utf-8')
    return path


@pytest.fixture
def missing_version_file(tmp_path):
    """Return a version file path that does not exist yet."""
    return tmp_path / "version.properties"


@pytest.fixture
def mock_config(tmp_path):
    """Create a mock Config object pointing at a temporary directory."""
    config = MagicMock()
    config.version_file = "version.properties"
    config.root_dir = str(tmp_path)
    config.log_level = "INFO"
    config.version_path = tmp_path / "version.properties"
    return config


def read_properties(path: Path) -> str:
    """Read a version file as text."""
    return Path(path).read_text(encoding='utf-8')
