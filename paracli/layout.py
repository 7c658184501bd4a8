"""PARA category directories and their resolution from a root path."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Union


class Category(Enum):
    """The four PARA categories, in their fixed order."""

    PROJECTS = "Projects"
    AREAS = "Areas"
    RESOURCES = "Resources"
    ARCHIVES = "Archives"

    @property
    def ordinal(self) -> int:
        """0-based position of the category in the fixed order."""
        return _ORDER.index(self)

    def directory_name(self, indexed: bool = False) -> str:
        """
        Name of the category directory.

        Args:
            indexed: Prefix the name with the category ordinal, e.g. ``0_Projects``

        Returns:
            Directory name (not a path)
        """
        if indexed:
            return f"{self.ordinal}_{self.value}"
        return self.value

    @classmethod
    def parse(cls, name: str) -> "Category":
        """Parse a case-insensitive category name such as ``areas``."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            choices = ", ".join(c.name.lower() for c in cls)
            raise ValueError(f"Unknown category '{name}' (choose from {choices})") from None


_ORDER = tuple(Category)


@dataclass(frozen=True)
class Layout:
    """
    Resolved category directories under a root.

    A layout holds exactly one path per category, each a direct child of
    ``root``. The directories may or may not exist on disk.
    """

    root: Path
    indexed: bool
    paths: Mapping[Category, Path] = field(compare=False)

    def __post_init__(self):
        object.__setattr__(self, "paths", MappingProxyType(dict(self.paths)))

    def __str__(self):
        lines = [f"{'Root:':<11}{self.root}"]
        for category in _ORDER:
            lines.append(f"{category.value + ':':<11}{self.paths[category]}")
        return "\n".join(lines)


def resolve(root: Union[str, Path], indexed: bool = False) -> Layout:
    """
    Build the layout of the four category directories under ``root``.

    Pure function: no filesystem access, identical inputs give identical
    layouts.

    Args:
        root: Absolute root directory
        indexed: Use ordinal-prefixed names (``0_Projects``, ``1_Areas``, ...)

    Returns:
        The resolved Layout
    """
    root = Path(root)
    paths = {category: root / category.directory_name(indexed) for category in _ORDER}
    return Layout(root, indexed, paths)


def lookup(layout: Layout, category: Category) -> Path:
    """Return the directory of ``category`` in ``layout``."""
    return layout.paths[category]
