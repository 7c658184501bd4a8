"""Tests for creating items in PARA categories."""

import pytest
from paracli.creator import create_item
from paracli.errors import FilesystemError, NotInitializedError
from paracli.initializer import init_layout
from paracli.layout import Category, resolve


@pytest.fixture
def layout(tmp_path):
    """Create an initialized PARA layout."""
    layout = resolve(tmp_path / "para")
    (tmp_path / "para").mkdir()
    init_layout(layout)
    return layout


def test_create_directory(layout):
    """Test creating a project folder."""
    path = create_item(layout, Category.PROJECTS, "p1")

    assert path == layout.root / "Projects" / "p1"
    assert path.is_dir()


def test_create_nested_directories(layout):
    """Test missing parents are created for directories."""
    path = create_item(layout, Category.AREAS, "a/b/c", as_file=False)

    assert (layout.root / "Areas" / "a").is_dir()
    assert (layout.root / "Areas" / "a" / "b").is_dir()
    assert path.is_dir()


def test_create_existing_directory(layout):
    """Test creating an existing directory succeeds."""
    create_item(layout, Category.RESOURCES, "docs")
    path = create_item(layout, Category.RESOURCES, "docs")

    assert path.is_dir()


def test_create_file(layout):
    """Test creating an empty file."""
    path = create_item(layout, Category.AREAS, "notes.md", as_file=True)

    assert path.is_file()
    assert path.read_text() == ""


def test_create_file_without_parent(layout):
    """Test files need their parent directories to exist."""
    with pytest.raises(FilesystemError) as exc_info:
        create_item(layout, Category.AREAS, "missing/notes.md", as_file=True)

    assert isinstance(exc_info.value.cause, FileNotFoundError)
    assert not (layout.root / "Areas" / "missing").exists()


def test_create_file_not_initialized(tmp_path):
    """Test creating a file before init fails."""
    layout = resolve(tmp_path)

    with pytest.raises(NotInitializedError) as exc_info:
        create_item(layout, Category.PROJECTS, "todo.txt", as_file=True)

    assert exc_info.value.path == tmp_path / "Projects"
    assert "init" in exc_info.value.hint


def test_create_directory_not_initialized(tmp_path):
    """Test creating a directory before init fails without creating anything."""
    layout = resolve(tmp_path)

    with pytest.raises(NotInitializedError):
        create_item(layout, Category.AREAS, "a/b")

    assert not (tmp_path / "Areas").exists()


@pytest.mark.parametrize("name", ["../escape", "/absolute/path"])
def test_create_rejects_names_outside_category(layout, name):
    """Test names cannot leave the category directory."""
    with pytest.raises(FilesystemError, match="must stay inside"):
        create_item(layout, Category.PROJECTS, name)
