"""
Tests for File System tool implementation.
"""

import pytest

from src.tools.filesystem import FileSystemTool


class TestFileSystemTool:
    """Test file system tool functionality."""

    @pytest.fixture
    def fs_tool(self, filesystem_config):
        return FileSystemTool(filesystem_config)

    @pytest.mark.asyncio
    async def test_get_schema(self, fs_tool):
        schema = await fs_tool.get_schema()

        assert schema.name == "filesystem"
        assert set(schema.actions) == {
            "list_directory",
            "copy_file",
            "touch_file",
            "read_file",
        }

    @pytest.mark.asyncio
    async def test_list_empty_directory(self, fs_tool, tmp_path):
        result = await fs_tool.execute("list_directory", {"path": str(tmp_path)})

        assert result.success is True
        assert result.output["entries"] == []
        assert result.output["count"] == 0

    @pytest.mark.asyncio
    async def test_list_includes_hidden_by_default(self, fs_tool, tmp_path):
        (tmp_path / ".hidden").touch()
        (tmp_path / "visible").mkdir()

        result = await fs_tool.execute("list_directory", {"path": str(tmp_path)})
        assert result.output["entries"] == [".hidden", "visible"]

        result = await fs_tool.execute(
            "list_directory", {"path": str(tmp_path), "include_hidden": False}
        )
        assert result.output["entries"] == ["visible"]

    @pytest.mark.asyncio
    async def test_list_missing_directory(self, fs_tool, tmp_path):
        result = await fs_tool.execute(
            "list_directory", {"path": str(tmp_path / "missing")}
        )

        assert result.success is False
        assert "Directory not found" in result.error

    @pytest.mark.asyncio
    async def test_copy_file(self, fs_tool, tmp_path):
        source = tmp_path / "Vagrantfile"
        source.write_text("Vagrant.configure('2')\n")
        source.chmod(0o640)
        destination = tmp_path / "out"
        destination.mkdir()

        result = await fs_tool.execute(
            "copy_file",
            {"source": str(source), "destination": str(destination / "Vagrantfile")},
        )

        assert result.success is True
        copied = destination / "Vagrantfile"
        assert copied.read_text() == "Vagrant.configure('2')\n"
        assert copied.stat().st_mode & 0o777 == 0o640

    @pytest.mark.asyncio
    async def test_copy_refuses_to_overwrite(self, fs_tool, tmp_path):
        source = tmp_path / "a"
        source.write_text("new")
        destination = tmp_path / "b"
        destination.write_text("old")

        result = await fs_tool.execute(
            "copy_file", {"source": str(source), "destination": str(destination)}
        )

        assert result.success is False
        assert "already exists" in result.error
        assert destination.read_text() == "old"

    @pytest.mark.asyncio
    async def test_copy_missing_source(self, fs_tool, tmp_path):
        result = await fs_tool.execute(
            "copy_file",
            {"source": str(tmp_path / "nope"), "destination": str(tmp_path / "x")},
        )

        assert result.success is False
        assert "Source file not found" in result.error

    @pytest.mark.asyncio
    async def test_touch_creates_zero_byte_file(self, fs_tool, tmp_path):
        marker = tmp_path / ".devbox"

        result = await fs_tool.execute("touch_file", {"path": str(marker)})

        assert result.success is True
        assert marker.is_file()
        assert marker.stat().st_size == 0

    @pytest.mark.asyncio
    async def test_touch_existing_file_fails(self, fs_tool, tmp_path):
        marker = tmp_path / ".devbox"
        marker.touch()

        result = await fs_tool.execute("touch_file", {"path": str(marker)})
        assert result.success is False

        result = await fs_tool.execute(
            "touch_file", {"path": str(marker), "exist_ok": True}
        )
        assert result.success is True

    @pytest.mark.asyncio
    async def test_read_file(self, fs_tool, tmp_path):
        path = tmp_path / "docker-compose.yml"
        path.write_text("services: {}\n")

        result = await fs_tool.execute("read_file", {"path": str(path)})

        assert result.success is True
        assert result.output["content"] == "services: {}\n"
        assert result.output["size"] == len("services: {}\n")

    @pytest.mark.asyncio
    async def test_path_required(self, fs_tool):
        result = await fs_tool.execute("touch_file", {})

        assert result.success is False
        assert "path is required for touch_file" in result.error
