"""
Global test configuration with support for different test types.
"""

from collections.abc import Generator
from contextlib import contextmanager, suppress
import os
from pathlib import Path

import pytest

from pathsift.config import FrozenConfig, make_config
from pathsift.core.interfaces import FileStatInfo


def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "contract: Behavioral contracts of the public API",
        "security: Path safety and message sanitization checks",
        "integration: End-to-end pipeline and CLI tests",
        "allow_env_pollution: Keep the real PATHSIFT_* environment",
        "allow_real_home_config: Read the real home configuration file",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Environment Isolation (Autouse) ---


@pytest.fixture(autouse=True)
def block_dotenv(monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests."""
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_pathsift_env(request, monkeypatch):
    """Ensure a clean PATHSIFT_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the environment.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("PATHSIFT_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def neutral_home_config(request, monkeypatch, tmp_path, isolate_pathsift_env):
    """Point the home-config directory at an isolated temp directory.

    Escape hatch: @pytest.mark.allow_real_home_config uses the real path.
    """
    if request.node.get_closest_marker("allow_real_home_config"):
        return
    fake_home_dir = tmp_path / "home_config_isolated"
    fake_home_dir.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("PATHSIFT_CONFIG_HOME", str(fake_home_dir))


# --- Core Fixtures ---


@pytest.fixture
def config() -> FrozenConfig:
    """Default configuration, independent of files and environment."""
    return make_config()


@pytest.fixture
def make_frozen_config():
    """Factory for configurations with overrides."""
    return make_config


@pytest.fixture
def isolated_config_sources(tmp_path, monkeypatch):
    """Set up specific configuration sources for a resolution test.

    Yields the project root to pass as ``project_root``.
    """

    @contextmanager
    def _setup(
        *,
        pyproject_content: str = "",
        home_content: str = "",
        env_vars: dict[str, str] | None = None,
    ) -> Generator[Path, None, None]:
        project_root = tmp_path / "project"
        project_root.mkdir(exist_ok=True)
        if pyproject_content:
            (project_root / "pyproject.toml").write_text(pyproject_content)
        if home_content:
            home_dir = Path(os.environ["PATHSIFT_CONFIG_HOME"])
            (home_dir / "pathsift.toml").write_text(home_content)
        for key, value in (env_vars or {}).items():
            monkeypatch.setenv(f"PATHSIFT_{key}", value)
        yield project_root

    return _setup


class RecordingNotifier:
    """Notifier that records every call for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, str | None]] = []

    def show_error(self, message: str, details: str | None = None) -> None:
        self.calls.append(("error", message, details))

    def show_warning(self, message: str, details: str | None = None) -> None:
        self.calls.append(("warning", message, details))

    def show_info(self, message: str, details: str | None = None) -> None:
        self.calls.append(("info", message, details))

    def show_progress(self, message: str) -> None:
        self.calls.append(("progress", message, None))

    def kinds(self) -> list[str]:
        return [kind for kind, _, _ in self.calls]


class RecordingSink:
    """Output sink collecting lines."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def append_line(self, line: str) -> None:
        self.lines.append(line)


class FakeFileStat:
    """Stat capability backed by a fixed set of existing paths."""

    def __init__(self, existing: dict[str, FileStatInfo] | None = None) -> None:
        self.existing = existing or {}
        self.calls: list[str] = []

    def stat(self, path: str) -> FileStatInfo:
        self.calls.append(path)
        return self.existing.get(path, FileStatInfo(exists=False))


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def fake_stat():
    return FakeFileStat
