"""CLI progress display for file transfers.

Each transfer gets its own short-lived Rich progress bar, so confirmation
prompts between transfers are never drawn over.
"""

from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TransferSpeedColumn,
)

ProgressCallback = Callable[[int, int], None]


class TransferProgressDisplay:
    """Rich-based progress bar for single uploads and downloads."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console

    @contextmanager
    def transfer(self, description: str) -> Iterator[ProgressCallback]:
        """Show a progress bar for the duration of one transfer.

        Args:
            description: Text shown next to the bar

        Yields:
            Callback function(bytes_done, total_bytes) for the API client
        """
        progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            "[progress.percentage]{task.percentage:>3.0f}%",
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
            refresh_per_second=10,
        )
        task = progress.add_task(escape(description), total=None)

        def update(bytes_done: int, total_bytes: int) -> None:
            # total is 0 when the server sent no Content-Length
            progress.update(task, completed=bytes_done, total=total_bytes or None)

        with progress:
            yield update
