"""Status bar widget for the file browser."""

from typing import Any

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import Label


class StatusBar(Horizontal):
    """A thin bottom bar with the result count and skipped patterns."""

    def __init__(self, *args: Any, **kwargs: Any):
        """Initialize the status bar."""
        super().__init__(*args, **kwargs)
        self.warning_text = Label("", id="warning_text")
        self.spacer = Container(id="status_spacer")
        self.status_text = Label("", id="status_text")

    def compose(self) -> ComposeResult:
        """Create child widgets."""
        yield self.warning_text
        yield self.spacer
        yield self.status_text

    def on_mount(self) -> None:
        """Set up the status bar when mounted."""
        self.warning_text.display = False

    def show(self, file_count: int | None, rejected_patterns: list[str]) -> None:
        """Show the number of files and any patterns that were skipped."""
        if rejected_patterns:
            self.warning_text.update("Skipped invalid patterns: " + ", ".join(rejected_patterns))
        self.warning_text.display = bool(rejected_patterns)
        if file_count is None:
            self.status_text.update("")
        elif file_count == 1:
            self.status_text.update("1 file")
        else:
            self.status_text.update(f"{file_count} files")
