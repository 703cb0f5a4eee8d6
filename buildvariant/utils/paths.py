# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Path utilities for buildvariant.

Every path a declaration or credential file mentions is interpreted relative
to the project root, never the current working directory, so the same build
resolves the same way no matter where the orchestrator launches it from.
"""

from pathlib import Path

from buildvariant.config.defaults import DEFAULT_DECLARATIONS_FILE


def find_project_root(start: Path, marker: str = DEFAULT_DECLARATIONS_FILE) -> Path:
    """
    Walk up from `start` to the first directory that contains `marker`.

    Args:
        start: File or directory to begin the search from.
        marker: File name identifying the project root.

    Returns:
        Absolute path to the project root directory.

    Raises:
        FileNotFoundError: If no ancestor contains the marker file.
    """
    current = start.resolve()
    if current.is_file():
        current = current.parent
    while True:
        if (current / marker).is_file():
            return current
        if current == current.parent:
            break
        current = current.parent
    raise FileNotFoundError(
        f"Cannot find project root. No {marker} found in {start} or any ancestor directory."
    )


def resolve_project_path(project_root: Path, value: str | Path) -> Path:
    """
    Resolve `value` against the project root unless it is already absolute.

    `~` is expanded first so a credential file can point at a keystore in the
    user's home directory.
    """
    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return project_root / path
