"""Rich activity spinner shown while a native call is in flight.

The native library reports no progress, so the CLI can only show that
something is happening.  The spinner renders on stderr, is transient,
and stays silent when stderr is not a terminal or Rich is missing.
"""

from __future__ import annotations

from typing import Any

from krfiles.cli.console import get_rich_console
from krfiles.exceptions import EnvironmentError


class ActivitySpinner:
    """Context manager wrapping a Rich :class:`~rich.progress.Progress` spinner.

    Usage::

        with ActivitySpinner("Listing /"):
            text = await offloader.run(bridge.boundary, bridge.list_directory, "/")
    """

    def __init__(self, description: str) -> None:
        self._description = description
        self._progress: Any = None
        self._started: bool = False

        try:
            from rich.progress import Progress, SpinnerColumn, TextColumn

            rich_console = get_rich_console(stderr=True)
        except (ModuleNotFoundError, EnvironmentError):
            return

        if not rich_console.is_terminal:
            return

        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            console=rich_console,
            transient=True,
        )

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> ActivitySpinner:
        self.start()
        return self

    def __exit__(self, *_args: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._progress is not None

    def start(self) -> None:
        """Start the spinner (no-op when disabled)."""
        if self._progress is not None and not self._started:
            self._progress.start()
            self._progress.add_task(self._description, total=None)
            self._started = True

    def stop(self) -> None:
        """Stop the spinner (idempotent)."""
        if self._started:
            self._progress.stop()
            self._started = False
