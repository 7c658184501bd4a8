"""Tests for command-line interface."""

import logging
from pathlib import Path
from unittest.mock import patch
import pytest
import yaml

from paracli.cli import build_parser, main, setup_logging
from paracli.layout import Category
from paracli.transfer import TransferOutcome


def test_setup_logging_default():
    """Test logging setup with default verbosity."""
    with patch('logging.basicConfig') as mock_config:
        setup_logging()

    mock_config.assert_called_once()
    call_kwargs = mock_config.call_args.kwargs
    assert call_kwargs['level'] == logging.INFO


@pytest.mark.parametrize("verbose,quiet,level", [
    (1, 0, logging.DEBUG),
    (3, 0, logging.DEBUG),
    (0, 1, logging.WARNING),
    (0, 2, logging.ERROR),
    (0, 5, logging.CRITICAL),
    (1, 1, logging.INFO),
])
def test_setup_logging_levels(verbose, quiet, level):
    """Test -v and -q move the level one step each."""
    with patch('logging.basicConfig') as mock_config:
        setup_logging(verbose=verbose, quiet=quiet)

    assert mock_config.call_args.kwargs['level'] == level


def test_setup_logging_format():
    """Test logging format configuration."""
    with patch('logging.basicConfig') as mock_config:
        setup_logging()

    call_kwargs = mock_config.call_args.kwargs
    assert '%(levelname)s' in call_kwargs['format']
    assert '%(message)s' in call_kwargs['format']


def test_parser_defaults():
    """Test default categories for new, mv and cp."""
    parser = build_parser()

    assert parser.parse_args(["new", "x"]).category is Category.PROJECTS
    assert parser.parse_args(["mv", "a"]).destination is Category.PROJECTS
    assert parser.parse_args(["cp", "a"]).destination is Category.PROJECTS
    assert parser.parse_args(["path"]).category is None


def test_parser_aliases_and_options():
    """Test long command aliases and transfer options."""
    args = build_parser().parse_args(["move", "-d", "Areas", "-s", "health", "a", "b"])

    assert args.destination is Category.AREAS
    assert args.subfolder == Path("health")
    assert args.sources == [Path("a"), Path("b")]

    args = build_parser().parse_args(["copy", "--destination", "resources", "a"])
    assert args.destination is Category.RESOURCES


def test_parser_rejects_unknown_category():
    """Test an unknown category is an argument error."""
    with pytest.raises(SystemExit) as exc_info:
        build_parser().parse_args(["new", "-t", "inbox", "x"])

    assert exc_info.value.code == 2


def test_main_without_command():
    """Test running without a command prints help and fails."""
    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 2


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Run the CLI in a fresh root with an isolated config file."""
    root = tmp_path / "root"
    root.mkdir()
    monkeypatch.chdir(root)
    config_file = tmp_path / "config" / "para.yaml"
    with patch('paracli.cli.setup_logging'):
        yield root, config_file


def run(config_file, *argv):
    main(["-c", str(config_file), *argv])


def test_init_creates_folders_and_config(workspace):
    """Test init creates the folders and stores the configuration."""
    root, config_file = workspace

    run(config_file, "init")

    assert sorted(p.name for p in root.iterdir()) == ["Archives", "Areas", "Projects", "Resources"]
    stored = yaml.safe_load(config_file.read_text())
    assert Path(stored["root_dir"]) == Path.cwd()
    assert stored["use_prefix"] is False


def test_init_numbered(workspace):
    """Test init --numbered uses indexed names."""
    root, config_file = workspace

    run(config_file, "init", "--numbered")

    assert (root / "0_Projects").is_dir()
    assert (root / "3_Archives").is_dir()


def test_init_twice_is_harmless(workspace):
    """Test re-running init in the same root."""
    root, config_file = workspace

    run(config_file, "init")
    run(config_file, "init")

    assert len(list(root.iterdir())) == 4


def test_init_in_other_directory_requires_force(workspace, tmp_path, monkeypatch):
    """Test the config mismatch policy."""
    root, config_file = workspace
    run(config_file, "init")
    other = tmp_path / "other"
    other.mkdir()
    monkeypatch.chdir(other)

    with pytest.raises(SystemExit) as exc_info:
        run(config_file, "init")

    assert exc_info.value.code == 1
    assert list(other.iterdir()) == []
    assert Path(yaml.safe_load(config_file.read_text())["root_dir"]) == root.resolve()

    run(config_file, "init", "--force", "--numbered")

    assert (other / "0_Projects").is_dir()
    stored = yaml.safe_load(config_file.read_text())
    assert Path(stored["root_dir"]) == Path.cwd()
    assert stored["use_prefix"] is True


def test_new_before_init_fails(workspace):
    """Test new reports a missing category directory."""
    _, config_file = workspace

    with pytest.raises(SystemExit) as exc_info:
        run(config_file, "new", "website")

    assert exc_info.value.code == 1


def test_end_to_end(workspace, capsys):
    """Test init, new, move into Archives, and path."""
    root, config_file = workspace

    run(config_file, "init")
    run(config_file, "new", "p1")
    run(config_file, "new", "-t", "areas", "notes.md", "--file")
    assert (root / "Projects" / "p1").is_dir()
    assert (root / "Areas" / "notes.md").is_file()

    run(config_file, "mv", "-d", "archives", str(root / "Projects" / "p1"))
    assert (root / "Archives" / "p1").is_dir()
    assert not (root / "Projects" / "p1").exists()

    capsys.readouterr()
    run(config_file, "path", "archives")
    assert capsys.readouterr().out.strip() == str(Path.cwd() / "Archives")

    run(config_file, "path")
    out = capsys.readouterr().out
    assert "Projects" in out and "Resources" in out


def test_copy_command(workspace, tmp_path):
    """Test cp into a subfolder keeps the source."""
    root, config_file = workspace
    run(config_file, "init")
    source = tmp_path / "paper.pdf"
    source.write_text("pdf")

    run(config_file, "cp", "-d", "resources", "-s", "papers", str(source))

    assert source.exists()
    assert (root / "Resources" / "papers" / "paper.pdf").read_text() == "pdf"


def test_archive_command(workspace, tmp_path):
    """Test archive moves items into the Archives folder."""
    root, config_file = workspace
    run(config_file, "init")
    done = tmp_path / "done"
    done.mkdir()
    (done / "file.txt").write_text("content")

    run(config_file, "archive", str(done))

    assert (root / "Archives" / "done" / "file.txt").read_text() == "content"
    assert not done.exists()


def test_archive_command_without_init(workspace, tmp_path):
    """Test archive fails before init."""
    _, config_file = workspace
    item = tmp_path / "item.txt"
    item.write_text("x")

    with pytest.raises(SystemExit) as exc_info:
        run(config_file, "archive", str(item))

    assert exc_info.value.code == 1
    assert item.exists()


def test_archive_command_aborted(workspace, tmp_path):
    """Test an aborted archive exits like an interrupt."""
    _, config_file = workspace
    run(config_file, "init")
    item = tmp_path / "item.txt"
    item.write_text("x")

    with patch('paracli.cli.archive', return_value=TransferOutcome.ABORTED):
        with pytest.raises(SystemExit) as exc_info:
            run(config_file, "archive", str(item))

    assert exc_info.value.code == 130


def test_move_collision_fails(workspace, tmp_path):
    """Test a name collision is reported with exit code 1."""
    root, config_file = workspace
    run(config_file, "init")
    (root / "Projects" / "a.txt").write_text("old")
    source = tmp_path / "a.txt"
    source.write_text("new")

    with pytest.raises(SystemExit) as exc_info:
        run(config_file, "mv", str(source))

    assert exc_info.value.code == 1
    assert (root / "Projects" / "a.txt").read_text() == "old"
    assert source.exists()


def test_keyboard_interrupt(workspace):
    """Test Ctrl-C outside an archive exits with 130."""
    _, config_file = workspace

    with patch('paracli.cli.init_layout', side_effect=KeyboardInterrupt):
        with pytest.raises(SystemExit) as exc_info:
            run(config_file, "init")

    assert exc_info.value.code == 130
