"""Tests for PARA directory initialization."""

import pytest
from unittest.mock import patch
from paracli.errors import FilesystemError
from paracli.initializer import init_layout
from paracli.layout import Category, resolve


def test_init_creates_all_directories(tmp_path):
    """Test init creates the four category directories."""
    layout = resolve(tmp_path)

    result = init_layout(layout)

    for category in Category:
        assert layout.paths[category].is_dir()
    assert result.created == [layout.paths[c] for c in Category]
    assert result.skipped == []


def test_init_indexed_directories(tmp_path):
    """Test init with numbered names."""
    init_layout(resolve(tmp_path, indexed=True))

    assert sorted(p.name for p in tmp_path.iterdir()) == [
        "0_Projects", "1_Areas", "2_Resources", "3_Archives"
    ]


def test_init_is_idempotent(tmp_path):
    """Test running init twice skips everything the second time."""
    layout = resolve(tmp_path)
    init_layout(layout)
    (layout.paths[Category.PROJECTS] / "keep.txt").write_text("content")

    result = init_layout(layout)

    assert result.created == []
    assert len(result.skipped) == 4
    assert sorted(p.name for p in tmp_path.iterdir()) == ["Archives", "Areas", "Projects", "Resources"]
    assert (layout.paths[Category.PROJECTS] / "keep.txt").read_text() == "content"


def test_init_skips_existing_and_creates_rest(tmp_path, caplog):
    """Test a partially initialized root is completed."""
    layout = resolve(tmp_path)
    layout.paths[Category.AREAS].mkdir()

    result = init_layout(layout)

    assert result.skipped == [layout.paths[Category.AREAS]]
    assert len(result.created) == 3
    assert "already exists" in caplog.text


def test_init_fails_on_file_in_the_way(tmp_path):
    """Test a regular file with a category name is a hard error."""
    layout = resolve(tmp_path)
    layout.paths[Category.AREAS].write_text("not a directory")

    with pytest.raises(FilesystemError) as exc_info:
        init_layout(layout)

    assert exc_info.value.path == layout.paths[Category.AREAS]
    # Directories before the failure are kept, later ones are not attempted
    assert layout.paths[Category.PROJECTS].is_dir()
    assert not layout.paths[Category.RESOURCES].exists()


def test_init_requires_existing_root(tmp_path):
    """Test creation is not recursive."""
    layout = resolve(tmp_path / "missing")

    with pytest.raises(FilesystemError) as exc_info:
        init_layout(layout)

    assert exc_info.value.path == layout.paths[Category.PROJECTS]
    assert isinstance(exc_info.value.cause, FileNotFoundError)
    assert not (tmp_path / "missing").exists()


def test_init_wraps_os_errors(tmp_path):
    """Test OS errors carry the offending path and cause."""
    layout = resolve(tmp_path)

    with patch("pathlib.Path.mkdir", side_effect=PermissionError("denied")):
        with pytest.raises(FilesystemError) as exc_info:
            init_layout(layout)

    assert exc_info.value.path == layout.paths[Category.PROJECTS]
    assert isinstance(exc_info.value.cause, PermissionError)
