"""
Dependency preflight.

Checks that the external programs Devbox delegates to can be found on the
execution path before any command runs.
"""

import shutil
import sys
from typing import Callable, Dict, List, Optional

from ..tools.sed import stream_editor_name
from .errors import MissingDependencyError, StreamEditorNotFoundError

# Executable name -> install guidance
REQUIRED_TOOLS: Dict[str, str] = {
    "git": "install Git from https://git-scm.com/downloads",
    "VBoxManage": "install VirtualBox from https://www.virtualbox.org/wiki/Downloads",
    "vagrant": "install Vagrant from https://developer.hashicorp.com/vagrant/install",
}

Which = Callable[[str], Optional[str]]


def find_missing_dependencies(
    tools: Optional[Dict[str, str]] = None, which: Which = shutil.which
) -> List[str]:
    """Names of required executables that cannot be resolved."""
    tools = REQUIRED_TOOLS if tools is None else tools
    return [name for name in tools if which(name) is None]


def check_dependencies(
    tools: Optional[Dict[str, str]] = None, which: Which = shutil.which
) -> None:
    """Raise ``MissingDependencyError`` listing every missing executable."""
    tools = REQUIRED_TOOLS if tools is None else tools
    missing = find_missing_dependencies(tools, which)
    if missing:
        raise MissingDependencyError(missing, tools)


def resolve_stream_editor(
    platform: Optional[str] = None, which: Which = shutil.which
) -> str:
    """Return the GNU sed executable name for this platform or raise."""
    platform = platform or sys.platform
    name = stream_editor_name(platform)
    if which(name) is None:
        if platform == "darwin":
            raise StreamEditorNotFoundError(
                "GNU sed is required on macOS but 'gsed' was not found. "
                "Install it with: brew install gnu-sed"
            )
        raise StreamEditorNotFoundError(f"'{name}' was not found on PATH")
    return name
