"""
Pytest configuration and shared fixtures.
"""

from pathlib import Path
from typing import List
from unittest.mock import Mock

import pytest

from src.config import AppSettings, reload_settings
from src.environment.manifest import ManifestEntry
from src.logging_utils import LogManager, ProgressTracker


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path_factory, monkeypatch):
    """Keep logs and settings out of the user's real directories."""
    log_dir = tmp_path_factory.mktemp("devbox_logs")
    monkeypatch.setenv("DEVBOX_LOG_DIR", str(log_dir))
    reload_settings()
    yield log_dir
    reload_settings()


@pytest.fixture
def settings(isolated_settings) -> AppSettings:
    """Settings with the isolated log directory."""
    return AppSettings(log_dir=str(isolated_settings))


@pytest.fixture
def log_manager(tmp_path) -> LogManager:
    """Log manager writing into a temporary directory."""
    return LogManager(str(tmp_path / "events"))


@pytest.fixture
def progress_tracker(log_manager) -> ProgressTracker:
    """Progress tracker whose live display is a no-op."""
    tracker = ProgressTracker(log_manager)
    tracker.start_execution_progress = Mock()
    tracker.complete_execution_progress = Mock()
    return tracker


@pytest.fixture
def sample_manifest() -> List[ManifestEntry]:
    """A small manifest with one primary and two source-built images."""
    return [
        ManifestEntry(
            repository="https://github.com/example/shop-platform.git",
            image="shop-platform",
        ),
        ManifestEntry(
            repository="https://github.com/example/shop-api.git", image="shop-api"
        ),
        ManifestEntry(
            repository="https://github.com/example/shop-web.git", image="shop-web"
        ),
    ]


@pytest.fixture
def template_dir(tmp_path) -> Path:
    """Template directory matching ``sample_manifest``."""
    directory = tmp_path / "templates"
    directory.mkdir()
    (directory / "Vagrantfile").write_text('Vagrant.configure("2") do |config|\nend\n')
    (directory / "docker-compose.yml").write_text(
        "services:\n"
        "  platform:\n"
        "    image: shop-platform:2.0\n"
        "  api:\n"
        "    image: shop-api:latest\n"
        "  web:\n"
        "    image: shop-web:latest\n"
        "  db:\n"
        "    image: postgres:15\n"
    )
    return directory


@pytest.fixture
def environment_root(tmp_path) -> Path:
    """A directory holding the environment marker."""
    root = tmp_path / "env"
    root.mkdir()
    (root / ".devbox").touch()
    return root

