"""
Exception hierarchy for the PARA organizer.

Every predictable, user-facing failure raises a subclass of ParaError. The CLI
catches ParaError and prints a short message instead of a stack trace.
"""

from pathlib import Path
from typing import Optional


class ParaError(Exception):
    """Base class for all known, user-facing errors."""

    hint: Optional[str] = None


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigError(ParaError):
    """Raised when the persisted configuration is unreadable or malformed."""


class ConfigMismatchError(ParaError):
    """Raised when an unforced init runs outside the configured root directory."""

    hint = "Use `--force` to set this directory as the PARA root and create new PARA folders."

    def __init__(self, configured_root: Path, current_dir: Path):
        self.configured_root = configured_root
        self.current_dir = current_dir
        super().__init__(
            f"Existing config directory {configured_root} does not match "
            f"current directory {current_dir}"
        )


# ---------------------------------------------------------------------------
# Filesystem layout errors
# ---------------------------------------------------------------------------

class NotInitializedError(ParaError):
    """Raised when a category directory is needed but does not exist yet."""

    hint = "Try running `para init` first to create the PARA folders."

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Path {path} does not exist")


class FilesystemError(ParaError):
    """Wraps an OS-level failure together with the path that caused it."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None, message: Optional[str] = None):
        self.path = path
        self.cause = cause
        if message is None:
            message = f"Could not process {path}"
            if cause is not None:
                message += f": {cause}"
        super().__init__(message)


# ---------------------------------------------------------------------------
# Transfer errors (move / copy / archive)
# ---------------------------------------------------------------------------

class TransferError(FilesystemError):
    """Base class for per-item failures during a transfer."""


class SourceNotFoundError(TransferError):
    """Raised when a source entry does not exist."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        super().__init__(path, cause, f"Source not found: {path}")


class DestinationMissingError(TransferError):
    """Raised when the destination directory is missing or not a directory."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        super().__init__(path, cause, f"Destination is not a directory: {path}")


class PermissionDeniedError(TransferError):
    """Raised when the OS refuses access to a source or destination."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        super().__init__(path, cause, f"Permission denied: {path}")


class NameCollisionError(TransferError):
    """Raised when the destination already holds an entry with the same name."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        super().__init__(path, cause, f"Destination already exists: {path}")
