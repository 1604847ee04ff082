"""
Tools package for Devbox.

This package wraps the external programs a development environment depends
on: git for the application repositories, Vagrant for the virtual machine,
GNU sed for config patching, and the local file system.
"""

from .base import (
    Tool,
    ToolConfig,
    ToolError,
    ToolResult,
    ToolSchema,
    ToolStatus,
    ValidationResult,
)
from .filesystem import FileSystemTool
from .git import GitTool
from .sed import StreamEditorTool, stream_editor_name
from .vagrant import VagrantTool

__all__ = [
    # Base classes
    "Tool",
    "ToolConfig",
    "ToolError",
    "ToolResult",
    "ToolSchema",
    "ToolStatus",
    "ValidationResult",
    # Version control
    "GitTool",
    # Virtual machine
    "VagrantTool",
    # System tools
    "FileSystemTool",
    "StreamEditorTool",
    "stream_editor_name",
]
