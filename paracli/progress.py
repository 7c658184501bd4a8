"""Rich progress bar for archive transfers."""

import logging
import signal
import threading
from typing import Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from paracli.transfer import ProgressAction, ProgressSink, TransferOutcome

logger = logging.getLogger(__name__)


class RichProgressSink(ProgressSink):
    """
    Shows archive progress as a transient Rich progress bar.

    While used as a context manager, Ctrl-C requests an abort instead of
    interrupting the process: the item being moved completes, then the
    archive stops.
    """

    def __init__(self, description: str = "Archiving", console: Optional[Console] = None):
        self.console = console or Console(stderr=True)
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=self.console,
            transient=True
        )
        self.task_id = self.progress.add_task(description, total=100)
        self.abort_requested = False
        self._previous_handler = None
        self._started = False

    def __enter__(self):
        if threading.current_thread() is threading.main_thread():
            self._previous_handler = signal.signal(signal.SIGINT, self._request_abort)
        self.progress.start()
        self._started = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self._stop()
        if self._previous_handler is not None:
            signal.signal(signal.SIGINT, self._previous_handler)
            self._previous_handler = None
        return False

    def _request_abort(self, signum, frame):
        if not self.abort_requested:
            logger.warning("Abort requested, finishing the current item...")
        self.abort_requested = True

    def _stop(self):
        if self._started:
            self.progress.stop()
            self._started = False

    def update(self, percent: int) -> ProgressAction:
        self.progress.update(self.task_id, completed=percent)
        if self.abort_requested:
            return ProgressAction.ABORT
        return ProgressAction.CONTINUE

    def finish(self, outcome: TransferOutcome) -> None:
        if outcome is TransferOutcome.COMPLETED:
            self.progress.update(self.task_id, completed=100)
        self._stop()
