"""Moving, copying and archiving entries into PARA categories."""

import errno
import logging
import os
import shutil
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from paracli.errors import (
    DestinationMissingError,
    FilesystemError,
    NameCollisionError,
    NotInitializedError,
    PermissionDeniedError,
    SourceNotFoundError,
)
from paracli.layout import Category, Layout, lookup
from paracli.path_utils import absolute_entry_path, entry_exists

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class TransferOutcome(Enum):
    """Terminal state of a transfer, delivered to the progress sink."""

    COMPLETED = "completed"
    ABORTED = "aborted"
    FAILED = "failed"


class ProgressAction(Enum):
    """Answer of a progress sink to an update."""

    CONTINUE = "continue"
    ABORT = "abort"


class ProgressSink:
    """
    Receiver of archive progress.

    ``update`` gets the aggregate percentage of bytes transferred so far
    (0-100, never decreasing) and may ask to abort. ``finish`` is called
    exactly once, after the last update, whatever the outcome.
    """

    def update(self, percent: int) -> ProgressAction:
        return ProgressAction.CONTINUE

    def finish(self, outcome: TransferOutcome) -> None:
        pass


class _ByteCounter:
    """Turns byte increments into monotonic percentages for a sink."""

    def __init__(self, total: int, sink: ProgressSink):
        self.total = total
        self.copied = 0
        self.sink = sink
        self.last_percent = 0
        self.abort_requested = False

    def advance(self, nbytes: int) -> None:
        self.copied += nbytes
        self._report()

    def advance_to(self, copied: int) -> None:
        """Move the counter forward to ``copied`` bytes, never backwards."""
        if copied > self.copied:
            self.copied = copied
        self._report()

    def complete(self) -> None:
        self.copied = self.total
        self._report(force_full=True)

    def _report(self, force_full: bool = False) -> None:
        if self.total > 0:
            percent = min(100, self.copied * 100 // self.total)
        else:
            percent = 100 if force_full else 0
        percent = max(percent, self.last_percent)
        self.last_percent = percent
        if self.sink.update(percent) is ProgressAction.ABORT:
            self.abort_requested = True


def entry_size(path: Path) -> int:
    """Total size in bytes of a file, or of all files below a directory."""
    if path.is_symlink() or not path.is_dir():
        return path.lstat().st_size

    total = 0
    for dirpath, _dirnames, filenames in os.walk(path):
        for filename in filenames:
            try:
                total += os.lstat(os.path.join(dirpath, filename)).st_size
            except OSError:
                # Vanished or unreadable files surface during the transfer itself
                continue
    return total


def _batch_entry_size(source: PathLike) -> int:
    """Size of a source for progress purposes; 0 when it cannot be measured."""
    try:
        path = absolute_entry_path(source)
        if not entry_exists(path):
            return 0
        return entry_size(path)
    except (OSError, ValueError):
        # The transfer itself reports the failure for this source
        return 0


def _destination_path(layout: Layout, category: Category, subfolder: Optional[PathLike]) -> Path:
    base = lookup(layout, category)
    if subfolder is None:
        return base
    if Path(subfolder).is_absolute() or ".." in Path(subfolder).parts:
        raise FilesystemError(base / subfolder, message=f"Subfolder must stay inside {base}: {subfolder}")
    return base / subfolder


def _ensure_destination(destination: Path) -> None:
    """Create ``destination`` with its missing parents."""
    try:
        destination.mkdir(parents=True, exist_ok=True)
    except FileExistsError as e:
        raise DestinationMissingError(destination, e) from e
    except PermissionError as e:
        raise PermissionDeniedError(destination, e) from e
    except OSError as e:
        raise FilesystemError(destination, e) from e
    logger.debug(f"Using destination directory: {destination}")


def _check_destination(destination: Path) -> None:
    if not destination.is_dir():
        raise DestinationMissingError(destination)


def _prepare_item(source: PathLike, destination: Path) -> Tuple[Path, Path]:
    """Validate one source and compute where it lands inside ``destination``."""
    try:
        source_path = absolute_entry_path(source)
    except ValueError as e:
        raise SourceNotFoundError(Path(source), e) from e

    if not entry_exists(source_path):
        raise SourceNotFoundError(source_path)

    real_destination = destination.resolve()
    if source_path == real_destination or source_path in real_destination.parents:
        raise FilesystemError(
            source_path,
            message=f"Cannot transfer {source_path} into itself ({destination})"
        )

    target = destination / source_path.name
    if entry_exists(target):
        raise NameCollisionError(target)

    return source_path, target


def _translate_os_error(error: OSError, source: Path, target: Path) -> FilesystemError:
    """Map an OS error raised while transferring ``source`` to the transfer taxonomy."""
    if isinstance(error, PermissionError):
        return PermissionDeniedError(Path(error.filename) if error.filename else source, error)
    if isinstance(error, FileExistsError) or error.errno in (errno.EEXIST, errno.ENOTEMPTY):
        return NameCollisionError(target, error)
    if isinstance(error, FileNotFoundError):
        if error.filename and Path(error.filename) == source:
            return SourceNotFoundError(source, error)
        if not target.parent.is_dir():
            return DestinationMissingError(target.parent, error)
        return SourceNotFoundError(source, error)
    if isinstance(error, NotADirectoryError) and not target.parent.is_dir():
        return DestinationMissingError(target.parent, error)
    return FilesystemError(source, error, f"Could not transfer {source} to {target}: {error}")


_PERMISSION_MARKERS = (f"[Errno {errno.EACCES}]", f"[Errno {errno.EPERM}]")


def _translate_tree_error(
    error: shutil.Error,
    source: Path,
    target: Path,
    copier: "_RecordingCopier"
) -> FilesystemError:
    """
    Map a ``shutil.Error`` from a directory copy to the transfer taxonomy.

    ``copytree`` collects per-file failures as ``(src, dst, reason)`` tuples
    with the reason already turned into a string. Failures of the copy
    function itself are kept as exceptions by ``copier``; anything else
    (unreadable subdirectories, copystat) is recognised from the errno text.
    """
    if copier.errors:
        return _translate_os_error(copier.errors[0], source, target)

    failures = error.args[0] if error.args and isinstance(error.args[0], list) else []
    for failure in failures:
        failed_path, reason = failure[0], str(failure[-1])
        if any(marker in reason for marker in _PERMISSION_MARKERS):
            return PermissionDeniedError(Path(failed_path), error)

    return FilesystemError(source, error, f"Could not transfer {source} to {target}: {error}")


class _RecordingCopier:
    """``copy2`` wrapper that keeps the OS errors ``copytree`` would stringify."""

    def __init__(self, counter: Optional[_ByteCounter] = None):
        self.counter = counter
        self.errors: List[OSError] = []

    def __call__(self, src, dst, *, follow_symlinks=True):
        try:
            result = shutil.copy2(src, dst, follow_symlinks=follow_symlinks)
        except OSError as e:
            self.errors.append(e)
            raise
        if self.counter is not None:
            self.counter.advance(os.lstat(src).st_size)
        return result


def _remove_partial(target: Path) -> None:
    """Delete what a failed copy left at ``target``."""
    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target, ignore_errors=True)
    elif entry_exists(target):
        try:
            target.unlink()
        except OSError as e:
            logger.warning(f"Could not remove partial copy {target}: {e}")
            return
    logger.debug(f"Removed partial copy: {target}")


def _is_tree_failure(error: shutil.Error) -> bool:
    """True for the per-file failure list ``copytree`` raises after copying."""
    return bool(error.args) and isinstance(error.args[0], list)


def _move_entry(source: Path, target: Path, counter: Optional[_ByteCounter] = None) -> None:
    """Move one entry; rename in place when possible, copy then delete across devices."""
    copier = _RecordingCopier(counter)

    try:
        shutil.move(str(source), str(target), copy_function=copier)
    except shutil.Error as e:
        # The source is only deleted after a complete copy
        if _is_tree_failure(e) and entry_exists(source):
            _remove_partial(target)
        raise _translate_tree_error(e, source, target, copier) from e
    except OSError as e:
        if copier.errors and entry_exists(source):
            _remove_partial(target)
        raise _translate_os_error(e, source, target) from e


def _copy_entry(source: Path, target: Path) -> None:
    copier = _RecordingCopier()
    try:
        if source.is_dir() and not source.is_symlink():
            shutil.copytree(source, target, symlinks=True, copy_function=copier)
        else:
            copier(source, target, follow_symlinks=False)
    except shutil.Error as e:
        if _is_tree_failure(e):
            _remove_partial(target)
        raise _translate_tree_error(e, source, target, copier) from e
    except OSError as e:
        if copier.errors:
            _remove_partial(target)
        raise _translate_os_error(e, source, target) from e


def archive(
    archive_dir: PathLike,
    sources: Sequence[PathLike],
    progress: Optional[ProgressSink] = None
) -> TransferOutcome:
    """
    Move entries into the archive directory, reporting progress.

    Sources are moved in the given order. Progress is the percentage of bytes
    moved across the whole batch. When the sink asks to abort, the item in
    flight completes and no further item is started.

    Args:
        archive_dir: Existing archive directory
        sources: Files or directories to archive
        progress: Optional progress sink

    Returns:
        TransferOutcome.COMPLETED, or TransferOutcome.ABORTED when the sink
        aborted the batch

    Raises:
        NotInitializedError: If ``archive_dir`` does not exist
        TransferError: On the first failing item; items moved before it stay
            in the archive
    """
    archive_dir = Path(archive_dir)
    sources = list(sources)
    if not archive_dir.exists():
        raise NotInitializedError(archive_dir)

    sink = progress if progress is not None else ProgressSink()
    outcome = TransferOutcome.FAILED
    try:
        _check_destination(archive_dir)

        # Sizes are measured up front so the percentage covers the whole batch
        sizes = [_batch_entry_size(source) for source in sources]
        counter = _ByteCounter(sum(sizes), sink)

        for source, size in zip(sources, sizes):
            if counter.abort_requested:
                logger.info("Archive aborted before all items were moved")
                outcome = TransferOutcome.ABORTED
                return outcome

            source_path, target = _prepare_item(source, archive_dir)
            start = counter.copied
            _move_entry(source_path, target, counter)
            counter.advance_to(start + size)
            logger.debug(f"Archived {source_path} -> {target}")

        counter.complete()
        outcome = TransferOutcome.COMPLETED
        return outcome
    finally:
        sink.finish(outcome)


def move_items(
    layout: Layout,
    category: Category,
    subfolder: Optional[PathLike],
    sources: Iterable[PathLike]
) -> List[Path]:
    """
    Move entries into a category, optionally inside a subfolder.

    The destination directory is created with its parents when missing.

    Returns:
        Destination paths of the moved entries, in source order

    Raises:
        TransferError: On the first failing item; items moved before it stay
            at the destination
    """
    destination = _destination_path(layout, category, subfolder)
    _ensure_destination(destination)

    moved = []
    for source in sources:
        source_path, target = _prepare_item(source, destination)
        _move_entry(source_path, target)
        logger.debug(f"Moved {source_path} -> {target}")
        moved.append(target)
    return moved


def copy_items(
    layout: Layout,
    category: Category,
    subfolder: Optional[PathLike],
    sources: Iterable[PathLike]
) -> List[Path]:
    """
    Copy entries into a category, optionally inside a subfolder.

    Sources are never modified. The destination directory is created with its
    parents when missing, as for ``move_items``.

    Returns:
        Destination paths of the copies, in source order

    Raises:
        TransferError: On the first failing item; copies made before it stay
            at the destination
    """
    destination = _destination_path(layout, category, subfolder)
    _ensure_destination(destination)

    copied = []
    for source in sources:
        source_path, target = _prepare_item(source, destination)
        _copy_entry(source_path, target)
        logger.debug(f"Copied {source_path} -> {target}")
        copied.append(target)
    return copied
