"""Path validation utilities for file operations."""

import os
from pathlib import Path
from typing import Union


def _check_null_bytes(path: Union[str, Path]) -> None:
    if '\0' in str(path):
        raise ValueError("Path contains null bytes")


def validate_safe_path(path: Union[str, Path], must_exist: bool = True) -> Path:
    """
    Validate a path and resolve it to its canonical absolute form.

    Args:
        path: Path to validate
        must_exist: Whether the path must exist

    Returns:
        Resolved absolute path (symlinks followed)

    Raises:
        ValueError: If path contains null bytes
        FileNotFoundError: If path doesn't exist and must_exist is True
    """
    _check_null_bytes(path)

    # resolve() canonicalizes the path, removing .. and . components
    resolved_path = Path(path).expanduser().resolve()

    if must_exist and not resolved_path.exists():
        raise FileNotFoundError(f"Path does not exist: {resolved_path}")

    return resolved_path


def absolute_entry_path(path: Union[str, Path]) -> Path:
    """
    Make a user-supplied entry path absolute without following a final symlink.

    A symlink given as a source is an entry in its own right: moving it must
    move the link, not the file it points to. The parent directory is
    resolved by the OS, so ``linkdir/../x`` names the same entry the kernel
    would open.

    Raises:
        ValueError: If path contains null bytes
    """
    _check_null_bytes(path)
    entry = Path(path).expanduser()
    if not entry.is_absolute():
        entry = Path.cwd() / entry
    if entry.name in ("", ".", ".."):
        # Names a directory through its parent chain, no final link to keep
        return entry.resolve()
    return entry.parent.resolve() / entry.name


def entry_exists(path: Path) -> bool:
    """True if ``path`` names an entry, including a dangling symlink."""
    return os.path.lexists(path)
