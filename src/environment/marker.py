"""
Environment root detection.

A directory tree is a managed environment when one of its ancestors holds
the zero-byte marker file created by ``init``.
"""

import os
from pathlib import Path
from typing import Iterator, Optional, Union

from pydantic import BaseModel

from .errors import EnvironmentNotFoundError


class EnvironmentLocation(BaseModel):
    """Outcome of searching for the environment marker."""

    found: bool
    root: Optional[Path] = None
    marker_name: str


def iter_ancestors(start: Path) -> Iterator[Path]:
    """Yield ``start`` and each parent directory up to the filesystem root."""
    current = Path(os.path.abspath(start))
    while True:
        yield current
        parent = current.parent
        if parent == current:
            return
        current = parent


def find_environment_root(
    start: Union[str, Path], marker_name: str
) -> EnvironmentLocation:
    """Walk upward from ``start`` looking for ``marker_name``."""
    for directory in iter_ancestors(Path(start)):
        if (directory / marker_name).is_file():
            return EnvironmentLocation(
                found=True, root=directory, marker_name=marker_name
            )
    return EnvironmentLocation(found=False, marker_name=marker_name)


def require_environment_root(start: Union[str, Path], marker_name: str) -> Path:
    """Return the environment root above ``start`` or raise."""
    location = find_environment_root(start, marker_name)
    if not location.found or location.root is None:
        raise EnvironmentNotFoundError(
            f"Not inside a devbox environment: no {marker_name} file found in "
            f"{os.path.abspath(start)} or any parent directory. "
            "Run 'devbox init' in an empty directory first."
        )
    return location.root
