"""
Tests for the dependency preflight.
"""

import pytest

from src.environment.errors import MissingDependencyError, StreamEditorNotFoundError
from src.environment.preflight import (
    REQUIRED_TOOLS,
    check_dependencies,
    find_missing_dependencies,
    resolve_stream_editor,
)


def which_only(*available):
    return lambda name: f"/usr/bin/{name}" if name in available else None


class TestCheckDependencies:
    """Test required tool detection."""

    def test_required_tools(self):
        assert set(REQUIRED_TOOLS) == {"git", "VBoxManage", "vagrant"}

    def test_all_present(self):
        check_dependencies(which=which_only("git", "VBoxManage", "vagrant"))

    def test_reports_every_missing_tool(self):
        with pytest.raises(MissingDependencyError) as exc_info:
            check_dependencies(which=which_only("git"))

        error = exc_info.value
        assert error.missing == ["VBoxManage", "vagrant"]
        message = str(error)
        assert "virtualbox.org" in message
        assert "vagrant/install" in message
        assert "git-scm.com" not in message

    def test_find_missing_preserves_order(self):
        assert find_missing_dependencies(which=which_only()) == [
            "git",
            "VBoxManage",
            "vagrant",
        ]

    def test_custom_tool_table(self):
        tools = {"docker": "install Docker"}
        with pytest.raises(MissingDependencyError, match="install Docker"):
            check_dependencies(tools, which=which_only("git"))


class TestResolveStreamEditor:
    """Test the platform-specific sed lookup."""

    def test_linux_uses_sed(self):
        assert resolve_stream_editor("linux", which=which_only("sed")) == "sed"

    def test_macos_uses_gsed(self):
        which = which_only("sed", "gsed")
        assert resolve_stream_editor("darwin", which=which) == "gsed"

    def test_macos_without_gsed_is_fatal(self):
        with pytest.raises(StreamEditorNotFoundError, match="brew install gnu-sed"):
            resolve_stream_editor("darwin", which=which_only("sed"))

    def test_missing_sed_elsewhere(self):
        with pytest.raises(StreamEditorNotFoundError):
            resolve_stream_editor("linux", which=which_only())
