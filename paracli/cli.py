"""Command-line interface for the PARA organizer."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from paracli import __version__
from paracli.config import load_config, prepare_init_config, save_config
from paracli.creator import create_item
from paracli.errors import ParaError
from paracli.initializer import init_layout
from paracli.layout import Category, Layout, lookup, resolve
from paracli.progress import RichProgressSink
from paracli.transfer import TransferOutcome, archive, copy_items, move_items

EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def setup_logging(verbose: int = 0, quiet: int = 0):
    """
    Configure logging for the application.

    Args:
        verbose: Number of ``-v`` flags, each one step more detail
        quiet: Number of ``-q`` flags, each one step less detail
    """
    log_level = logging.INFO + 10 * (quiet - verbose)
    log_level = max(logging.DEBUG, min(logging.CRITICAL, log_level))
    logging.basicConfig(
        level=log_level,
        format='%(levelname)s: %(message)s'
    )


def _category(value: str) -> Category:
    try:
        return Category.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _load_layout(args, logger) -> Layout:
    """Resolve the PARA layout from the stored configuration."""
    config = load_config(args.config)
    layout = resolve(config["root_dir"], config["use_prefix"])
    logger.debug(f"Using the following PARA paths: {layout!r}")
    return layout


def _run_init(args, logger) -> None:
    config = load_config(args.config)
    # Update the config before creating paths if using init in a new directory
    config = prepare_init_config(config, Path.cwd(), force=args.force, numbered=args.numbered)
    save_config(config, args.config)

    layout = resolve(config["root_dir"], config["use_prefix"])
    result = init_layout(layout)
    logger.info(
        f"PARA folders ready in {layout.root} "
        f"({len(result.created)} created, {len(result.skipped)} already present)"
    )


def _run_new(args, logger) -> None:
    layout = _load_layout(args, logger)
    create_item(layout, args.category, args.name, as_file=args.file)


def _run_archive(args, logger) -> None:
    layout = _load_layout(args, logger)
    with RichProgressSink() as sink:
        outcome = archive(lookup(layout, Category.ARCHIVES), args.paths, progress=sink)

    if outcome is TransferOutcome.ABORTED:
        logger.warning("Archive aborted; items already moved stay in the archive")
        sys.exit(EXIT_INTERRUPTED)
    logger.info(f"Archived {len(args.paths)} item(s)")


def _run_move(args, logger) -> None:
    layout = _load_layout(args, logger)
    moved = move_items(layout, args.destination, args.subfolder, args.sources)
    logger.info(f"Moved {len(moved)} item(s) to {lookup(layout, args.destination)}")


def _run_copy(args, logger) -> None:
    layout = _load_layout(args, logger)
    copied = copy_items(layout, args.destination, args.subfolder, args.sources)
    logger.info(f"Copied {len(copied)} item(s) to {lookup(layout, args.destination)}")


def _run_path(args, logger) -> None:
    layout = _load_layout(args, logger)
    if args.category is None:
        print(layout)
    else:
        print(lookup(layout, args.category))


def _add_transfer_arguments(parser: argparse.ArgumentParser, verb: str) -> None:
    parser.add_argument(
        "-d", "--destination",
        type=_category,
        default=Category.PROJECTS,
        metavar="CATEGORY",
        help="Which PARA folder to use as destination (default: projects)"
    )
    parser.add_argument(
        "-s", "--sub",
        dest="subfolder",
        type=Path,
        default=None,
        help="Subfolder within the PARA folder to add to the destination path"
    )
    parser.add_argument(
        "sources",
        nargs="+",
        type=Path,
        metavar="SRC",
        help=f"Files/folders to {verb}"
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="para",
        description="Organize files and folders with the PARA method (Projects, Areas, Resources, Archives)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create the PARA folders in the current directory
  para init

  # Use numbered folder names (0_Projects, 1_Areas, ...)
  para init --numbered --force

  # Create a new project folder and a note file in Areas
  para new website
  para new -t areas health/notes.md --file

  # Move a download into Resources/papers
  para mv -d resources -s papers ~/Downloads/paper.pdf

  # Archive a finished project
  para archive ~/PARA/Projects/website

  # Show where the PARA folders live
  para path
        """
    )

    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: $PARA_CONFIG or ~/.config/para/config.yaml)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (repeatable)"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="count",
        default=0,
        help="Decrease logging verbosity (repeatable)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    init_parser = subparsers.add_parser(
        "init",
        help="Initialize the PARA directories in the current working directory"
    )
    init_parser.add_argument(
        "-f", "--force",
        action="store_true",
        help="Use the current directory as PARA root even if another one is configured"
    )
    init_parser.add_argument(
        "-n", "--numbered",
        action="store_true",
        help="Prepend numbers to the PARA folders to maintain order"
    )
    init_parser.set_defaults(handler=_run_init)

    new_parser = subparsers.add_parser(
        "new",
        help="Create a new folder (or file) in one of the PARA folders"
    )
    new_parser.add_argument(
        "-t", "--type",
        dest="category",
        type=_category,
        default=Category.PROJECTS,
        metavar="CATEGORY",
        help="Which PARA folder to create the item in (default: projects)"
    )
    new_parser.add_argument(
        "name",
        type=Path,
        help="Name of the file/folder to create"
    )
    new_parser.add_argument(
        "-f", "--file",
        action="store_true",
        help="Create a new file instead of a directory"
    )
    new_parser.set_defaults(handler=_run_new)

    archive_parser = subparsers.add_parser(
        "archive",
        help="Send the files/folders at the provided paths to the Archives"
    )
    archive_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Files/folders to archive"
    )
    archive_parser.set_defaults(handler=_run_archive)

    move_parser = subparsers.add_parser(
        "mv",
        aliases=["move"],
        help="Move items into PARA folders"
    )
    _add_transfer_arguments(move_parser, "move")
    move_parser.set_defaults(handler=_run_move)

    copy_parser = subparsers.add_parser(
        "cp",
        aliases=["copy"],
        help="Copy items into PARA folders"
    )
    _add_transfer_arguments(copy_parser, "copy")
    copy_parser.set_defaults(handler=_run_copy)

    path_parser = subparsers.add_parser(
        "path",
        help="List paths to PARA folders"
    )
    path_parser.add_argument(
        "category",
        nargs="?",
        type=_category,
        default=None,
        help="Only print the path of this PARA folder"
    )
    path_parser.set_defaults(handler=_run_path)

    return parser


def main(argv: Optional[Sequence[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help(sys.stderr)
        sys.exit(2)

    # Setup logging
    setup_logging(args.verbose, args.quiet)
    logger = logging.getLogger(__name__)
    logger.debug(f"Parsed args: {args}")

    try:
        args.handler(args, logger)
    except ParaError as e:
        logger.error(str(e))
        if e.hint:
            logger.error(e.hint)
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(EXIT_ERROR)
    except KeyboardInterrupt:
        logger.info("\n\nOperation cancelled by user")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as e:
        logger.error(f"\nError: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(EXIT_ERROR)


if __name__ == "__main__":
    main()
