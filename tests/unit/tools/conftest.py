"""
Tool-specific fixtures for unit testing.
"""

import pytest

from src.tools.base import ToolConfig


@pytest.fixture
def git_config() -> ToolConfig:
    """Create Git tool configuration for testing."""
    return ToolConfig(name="git", version="1.0.0")


@pytest.fixture
def vagrant_config() -> ToolConfig:
    """Create Vagrant tool configuration for testing."""
    return ToolConfig(name="vagrant", version="1.0.0")


@pytest.fixture
def sed_config() -> ToolConfig:
    """Create stream editor tool configuration for testing."""
    return ToolConfig(name="sed", version="1.0.0", executable="sed")


@pytest.fixture
def filesystem_config() -> ToolConfig:
    """Create Filesystem tool configuration for testing."""
    return ToolConfig(name="filesystem", version="1.0.0")
