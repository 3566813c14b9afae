"""Line-oriented console output for BackBrace."""

from typing import Optional

from rich.console import Console


class OutputFormatter:
    """Writes human-readable progress lines to the terminal.

    Informational lines go to stdout and are suppressed in quiet mode.
    Warnings and errors always go to stderr.
    """

    def __init__(self, quiet: bool = False, no_color: bool = False):
        """Initialize output formatter.

        Args:
            quiet: Suppress informational output
            no_color: Disable colored output
        """
        self.quiet = quiet
        self.console = Console(
            no_color=no_color, highlight=False, emoji=False, soft_wrap=True
        )
        self.err_console = Console(
            stderr=True, no_color=no_color, highlight=False, emoji=False, soft_wrap=True
        )

    def _write(self, console: Console, message: str, style: Optional[str]) -> None:
        console.print(message, style=style, markup=False)

    def print(self, message: str = "") -> None:
        """Print a plain line."""
        if not self.quiet:
            self._write(self.console, message, None)

    def info(self, message: str) -> None:
        """Print an informational line."""
        if not self.quiet:
            self._write(self.console, message, None)

    def success(self, message: str) -> None:
        """Print a success line."""
        if not self.quiet:
            self._write(self.console, message, "green")

    def warning(self, message: str) -> None:
        """Print a warning line to stderr."""
        self._write(self.err_console, message, "yellow")

    def error(self, message: str) -> None:
        """Print an error line to stderr."""
        self._write(self.err_console, f"Error: {message}", "bold red")

    def header(self, title: str) -> None:
        """Print a section title followed by a rule line."""
        self.print("")
        self.info(title)
        self.info("-" * 43)

    def print_summary(self, title: str, lines: list[tuple[str, str]]) -> None:
        """Print a titled block of label/value pairs.

        Args:
            title: Block title
            lines: List of (label, value) tuples
        """
        if self.quiet:
            return
        self.header(title)
        for label, value in lines:
            self.info(f"{label} {value}")
