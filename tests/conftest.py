"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from fakes import make_jdk


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fake_jdk(tmp_path: Path) -> Path:
    """A JDK home with jmods and a scripted jlink."""
    return make_jdk(tmp_path / "jdk-17")


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    """Return a fresh JDK cache folder."""
    root = tmp_path / "cache"
    root.mkdir()
    return root


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep the developer's environment out of the tests."""
    for name in (
        "FAKE_JLINK_EXIT",
        "FAKE_JLINK_STDOUT",
        "FAKE_JLINK_STDERR",
        "JAVA_HOME",
        "JLINK_WRAPPER_LOG_LEVEL",
        "JLINK_WRAPPER_LOG_FILE",
        "JLINK_WRAPPER_LOG_FILE_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
