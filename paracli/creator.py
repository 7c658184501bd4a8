"""Creation of new items inside a PARA category."""

import logging
from pathlib import Path
from typing import Union

from paracli.errors import FilesystemError, NotInitializedError
from paracli.layout import Category, Layout, lookup

logger = logging.getLogger(__name__)


def create_item(
    layout: Layout,
    category: Category,
    name: Union[str, Path],
    as_file: bool = False
) -> Path:
    """
    Create a new file or directory in a category.

    Args:
        layout: Resolved PARA layout
        category: Category that receives the item
        name: Relative name, may contain several segments (``a/b/c``)
        as_file: Create an empty file instead of a directory

    Returns:
        Path of the created item

    Raises:
        NotInitializedError: If the category directory does not exist
        FilesystemError: If the item cannot be created. Files need all their
            parent directories to exist already; directories are created
            together with missing parents.
    """
    base_path = lookup(layout, category)
    if not base_path.exists():
        raise NotInitializedError(base_path)

    new_path = base_path / name
    if Path(name).is_absolute() or ".." in Path(name).parts:
        raise FilesystemError(new_path, message=f"Item name must stay inside {base_path}: {name}")

    try:
        if as_file:
            # An existing file is truncated
            with open(new_path, "w"):
                pass
        else:
            new_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(new_path, e) from e

    logger.info(f"Created {'file' if as_file else 'directory'}: {new_path}")
    return new_path
