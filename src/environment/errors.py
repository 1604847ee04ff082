"""
Exceptions raised by environment preconditions and workflows.

Every one of them is terminal: the CLI reports the message and exits 1.
"""

from typing import Dict, List


class DevboxError(Exception):
    """Base exception for environment-related errors."""


class MissingDependencyError(DevboxError):
    """Required external programs are not on the execution path."""

    def __init__(self, missing: List[str], guidance: Dict[str, str]):
        self.missing = missing
        self.guidance = guidance
        lines = [f"Missing required tools: {', '.join(missing)}"]
        lines.extend(f"  {name}: {guidance.get(name, '')}" for name in missing)
        super().__init__("\n".join(lines))


class StreamEditorNotFoundError(DevboxError):
    """GNU sed is not available under the platform-specific name."""


class EnvironmentNotFoundError(DevboxError):
    """No environment marker exists in the directory or any ancestor."""


class DirectoryNotEmptyError(DevboxError):
    """``init`` was invoked in a directory that already has content."""


class InitializationError(DevboxError):
    """A step of ``init`` failed."""
