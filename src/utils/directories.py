"""
Directory utilities.

Per-user application directories for Devbox's own files (logs and event
history), plus resolution of the directory the program is installed in.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

# Upper bound on symlink hops, matching the kernel's ELOOP limit.
MAX_SYMLINK_HOPS = 40


def get_secure_app_directory(
    app_name: str = "devbox",
    subdirectory: Optional[str] = None,
) -> Path:
    """
    Get a writable per-user application directory.

    - Windows: ``%LOCALAPPDATA%/app_name``
    - Unix: ``$XDG_DATA_HOME/app_name`` or ``~/.local/share/app_name``
    - Fallback: a fresh temporary directory with owner-only permissions

    Args:
        app_name: Name of the application
        subdirectory: Optional subdirectory within the app directory

    Returns:
        Path: Writable directory path
    """
    base_dir = _get_platform_specific_directory(app_name)
    app_dir = base_dir / subdirectory if subdirectory else base_dir

    try:
        app_dir.mkdir(parents=True, exist_ok=True)
        _test_directory_writable(app_dir)
        return app_dir

    except OSError:
        return _create_secure_temp_directory(f"{app_name}_", "_data")


def _get_platform_specific_directory(app_name: str) -> Path:
    """Get platform-appropriate application directory."""
    if os.name == "nt":
        local_app_data = os.environ.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data) / app_name
        return Path(tempfile.gettempdir()) / app_name

    xdg_data_home = os.environ.get("XDG_DATA_HOME")
    if xdg_data_home:
        return Path(xdg_data_home) / app_name
    return Path.home() / ".local" / "share" / app_name


def _test_directory_writable(directory: Path) -> None:
    """Raise OSError unless a file can be created in ``directory``."""
    test_file = directory / ".write_test"
    test_file.touch()
    test_file.unlink()


def _create_secure_temp_directory(prefix: str, suffix: str) -> Path:
    """Create a temporary directory readable only by its owner."""
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix, suffix=suffix))
    os.chmod(temp_dir, 0o700)
    return temp_dir


def resolve_symlinks(path: Path, max_hops: int = MAX_SYMLINK_HOPS) -> Path:
    """
    Follow ``path`` through every symlink hop to the real file.

    Each link target is read with ``os.readlink`` and, when relative,
    interpreted against the directory containing the link. Links in parent
    directories are resolved as well, so the result is fully real.

    Raises:
        OSError: If more than ``max_hops`` links are followed (a cycle).
    """
    current = Path(os.path.abspath(path))
    hops = 0

    while current.is_symlink():
        if hops >= max_hops:
            raise OSError(f"Too many levels of symbolic links: {path}")
        target = Path(os.readlink(current))
        if not target.is_absolute():
            target = current.parent / target
        current = Path(os.path.abspath(target))
        hops += 1

    return Path(os.path.realpath(current.parent)) / current.name


def get_install_directory() -> Path:
    """Real directory of the installed package, whatever links lead to it."""
    # <package>/utils/directories.py -> <package>
    return resolve_symlinks(Path(__file__)).parent.parent


def resolve_log_directory(log_dir: Optional[str] = None) -> Path:
    """
    Absolute directory for Devbox's log files.

    Unset means the per-user ``devbox/logs`` directory. A relative path is
    taken relative to the per-user ``devbox`` directory, never the current
    working directory.
    """
    if not log_dir:
        return get_secure_app_directory("devbox", "logs")

    path = Path(log_dir).expanduser()
    if not path.is_absolute():
        path = get_secure_app_directory("devbox") / path
    return Path(os.path.abspath(path))
