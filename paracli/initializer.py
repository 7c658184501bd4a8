"""Creation of the PARA category directories."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from paracli.errors import FilesystemError
from paracli.layout import Category, Layout

logger = logging.getLogger(__name__)


@dataclass
class InitResult:
    """Directories created and skipped by one ``init_layout`` call."""

    created: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)


def init_layout(layout: Layout) -> InitResult:
    """
    Create the four category directories of ``layout``.

    Existing directories are skipped with a warning, so running this twice is
    harmless. Creation is not recursive: the root must already exist. The
    first failure stops the run; directories created before it are kept.

    Args:
        layout: Resolved PARA layout

    Returns:
        InitResult listing created and skipped directories

    Raises:
        FilesystemError: If a category path is occupied by a non-directory or
            cannot be created
    """
    result = InitResult()

    for category in Category:
        path = layout.paths[category]

        if path.is_dir():
            logger.warning(f"Directory at {path} already exists! Skipping...")
            result.skipped.append(path)
            continue

        if path.exists():
            raise FilesystemError(path, message=f"Could not create {path}: a non-directory entry is in the way")

        try:
            path.mkdir()
        except OSError as e:
            raise FilesystemError(path, e, f"Could not create {path}: {e}") from e

        logger.debug(f"Created new directory: {path}")
        result.created.append(path)

    return result
