"""Rich progress display for filtered walks.

Adapts the ``(message, fraction)`` progress callback of the operations
to a Rich progress bar on the error console.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from vsclean.filesystem.models import ProgressCallback
from vsclean.utils.formatting import err_console


def _discard(message: str, fraction: float) -> None:
    """Progress callback that ignores all notifications."""


@contextmanager
def progress_reporter(enabled: bool = True) -> Iterator[ProgressCallback]:
    """Provide a progress callback bound to a transient progress bar.

    Args:
        enabled: When False, a callback that discards notifications is
            provided and nothing is displayed.

    Yields:
        Callback to pass to an operation.
    """
    if not enabled:
        yield _discard
        return

    with Progress(
        SpinnerColumn(),
        TaskProgressColumn(),
        BarColumn(),
        TextColumn("{task.description}", markup=True),
        console=err_console,
        transient=True,
    ) as progress:
        task = progress.add_task("Starting", total=1.0)

        def report(message: str, fraction: float) -> None:
            progress.update(task, completed=fraction, description=escape(message.strip()))

        yield report
