"""
Environment management for Devbox.

Marker detection, the repository manifest, in-VM command requests,
orchestration config patching and the workflows built from them.
"""

from .errors import (
    DevboxError,
    DirectoryNotEmptyError,
    EnvironmentNotFoundError,
    InitializationError,
    MissingDependencyError,
    StreamEditorNotFoundError,
)
from .manager import DevEnvironment
from .manifest import REPOSITORY_MANIFEST, ManifestEntry
from .marker import EnvironmentLocation, find_environment_root, require_environment_root
from .preflight import check_dependencies, resolve_stream_editor
from .remote import RemoteCommand

__all__ = [
    "DevEnvironment",
    "DevboxError",
    "DirectoryNotEmptyError",
    "EnvironmentLocation",
    "EnvironmentNotFoundError",
    "InitializationError",
    "ManifestEntry",
    "MissingDependencyError",
    "REPOSITORY_MANIFEST",
    "RemoteCommand",
    "StreamEditorNotFoundError",
    "check_dependencies",
    "find_environment_root",
    "require_environment_root",
    "resolve_stream_editor",
]
