"""
File System tool for file and directory operations.

This module provides a concrete implementation of the Tool interface for the
local file operations performed while setting up an environment: inspecting
the target directory, copying bundled templates and writing the marker.
"""

import os
import shutil
from pathlib import Path
from typing import Any, Dict, List

import aiofiles

from .base import Tool, ToolConfig, ToolError, ToolSchema, ValidationResult


class FileSystemTool(Tool):
    """
    File System tool for local file and directory operations.

    Provides functionality for:
    - Directory listing (including hidden entries)
    - Template copying
    - Marker file creation
    - Text file reading
    """

    def __init__(self, config: ToolConfig):
        super().__init__(config)

    async def get_schema(self) -> ToolSchema:
        """Return the File System tool schema."""
        return ToolSchema(
            name="filesystem",
            description="Local file system operations tool",
            version=self.config.version,
            actions={
                "list_directory": {
                    "description": "List directory contents",
                    "parameters": {
                        "path": {"type": "string", "required": True},
                        "include_hidden": {"type": "boolean", "default": True},
                    },
                },
                "copy_file": {
                    "description": "Copy a file",
                    "parameters": {
                        "source": {"type": "string", "required": True},
                        "destination": {"type": "string", "required": True},
                        "overwrite": {"type": "boolean", "default": False},
                    },
                },
                "touch_file": {
                    "description": "Create an empty file",
                    "parameters": {
                        "path": {"type": "string", "required": True},
                        "exist_ok": {"type": "boolean", "default": False},
                    },
                },
                "read_file": {
                    "description": "Read content from a text file",
                    "parameters": {
                        "path": {"type": "string", "required": True},
                        "encoding": {"type": "string", "default": "utf-8"},
                    },
                },
            },
            dependencies=[],
        )

    async def _create_client(self) -> Any:
        """File system access needs no client."""
        return {"filesystem_available": True}

    async def _create_validator(self) -> Any:
        """Create parameter validator."""

        class FileSystemValidator:
            def validate(self, action: str, params: Dict[str, Any]) -> ValidationResult:
                errors = []
                normalized_params = params.copy()

                if action in ["list_directory", "touch_file", "read_file"]:
                    if not params.get("path"):
                        errors.append(f"path is required for {action}")
                    elif "\x00" in str(params["path"]):
                        errors.append(f"Invalid path format: {params['path']!r}")

                if action == "copy_file":
                    for name in ("source", "destination"):
                        if not params.get(name):
                            errors.append(f"{name} is required for copy_file")

                return ValidationResult(
                    valid=len(errors) == 0,
                    errors=errors,
                    normalized_params=normalized_params,
                )

        return FileSystemValidator()

    async def _execute_action(
        self, action: str, params: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Execute file system action."""
        if action == "list_directory":
            return await self._list_directory(params)
        elif action == "copy_file":
            return await self._copy_file(params)
        elif action == "touch_file":
            return await self._touch_file(params)
        elif action == "read_file":
            return await self._read_file(params)
        else:
            raise ToolError(f"Unknown action: {action}")

    async def _list_directory(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """List directory contents."""
        try:
            path = Path(params["path"])
            include_hidden = params.get("include_hidden", True)

            if not path.exists():
                raise FileNotFoundError(f"Directory not found: {path}")

            if not path.is_dir():
                raise NotADirectoryError(f"Path is not a directory: {path}")

            entries = sorted(
                item.name
                for item in path.iterdir()
                if include_hidden or not item.name.startswith(".")
            )

            return {
                "path": str(path),
                "entries": entries,
                "count": len(entries),
                "success": True,
            }

        except OSError as e:
            return {
                "path": params["path"],
                "entries": [],
                "success": False,
                "error": str(e),
            }

    async def _copy_file(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Copy a file, keeping its permission bits."""
        try:
            source = Path(params["source"])
            destination = Path(params["destination"])

            if not source.is_file():
                raise FileNotFoundError(f"Source file not found: {source}")

            if destination.exists() and not params.get("overwrite", False):
                raise FileExistsError(f"Destination already exists: {destination}")

            shutil.copy2(source, destination)

            return {
                "source": str(source),
                "destination": str(destination),
                "size": destination.stat().st_size,
                "success": True,
            }

        except OSError as e:
            return {
                "source": params["source"],
                "destination": params["destination"],
                "success": False,
                "error": str(e),
            }

    async def _touch_file(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Create a zero-byte file."""
        try:
            path = Path(params["path"])
            path.touch(exist_ok=params.get("exist_ok", False))

            return {
                "path": str(path),
                "size": path.stat().st_size,
                "success": True,
            }

        except OSError as e:
            return {
                "path": params["path"],
                "success": False,
                "error": str(e),
            }

    async def _read_file(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Read content from a text file."""
        try:
            path = Path(params["path"])
            encoding = params.get("encoding", "utf-8")

            if not path.is_file():
                raise FileNotFoundError(f"File not found: {path}")

            async with aiofiles.open(path, "r", encoding=encoding) as f:
                content = await f.read()

            return {
                "path": str(path),
                "content": content,
                "size": os.path.getsize(path),
                "success": True,
            }

        except (OSError, UnicodeDecodeError) as e:
            return {
                "path": params["path"],
                "success": False,
                "error": str(e),
            }

    async def _get_supported_actions(self) -> List[str]:
        """Get list of supported actions."""
        return ["list_directory", "copy_file", "touch_file", "read_file"]
