"""File browser application."""

from typing import ClassVar

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Header, Label
from textual.worker import WorkerCancelled

from ..common.diagnostics import LogDiagnostics
from .app_config import AppConfig
from .browser_controller import BrowserController, BrowserState, ViewMode
from .commands.browser_commands import BrowserCommands
from .screens.directory_chooser import DirectoryChooser
from .widgets.results_table import ResultsTable
from .widgets.search_bar import SearchBar
from .widgets.status_bar import StatusBar


def truncate_path(path: str, width: int = 50) -> str:
    """Keep the end of ``path`` so it fits in ``width`` characters."""
    if len(path) <= width:
        return path
    return "..." + path[len(path) - (width - 3) :]


class NotifyingDiagnostics(LogDiagnostics):
    """Logs problems and also shows them to the user once the app is running."""

    def __init__(self, app: App | None = None):
        """Initialize the diagnostics sink."""
        self.app = app

    def warn(self, message: str) -> None:
        """Log a warning and show a warning toast."""
        super().warn(message)
        if self.app is not None and self.app.is_running:
            self.app.notify(message, severity="warning")

    def error(self, message: str) -> None:
        """Log an error and show an error toast."""
        super().error(message)
        if self.app is not None and self.app.is_running:
            self.app.notify(message, title="Error", severity="error")


class FileBrowserApp(App):
    """Browse a directory by pattern and name, and open files."""

    TITLE = "File Browser"
    COMMANDS: ClassVar = {BrowserCommands}
    BINDINGS: ClassVar = [
        Binding("ctrl+c", "close_app", "Close application", priority=True),
        Binding("ctrl+o", "change_directory", "Change directory"),
        Binding("f5", "refresh", "Refresh"),
    ]

    CSS = """
    #toolbar {
        height: 1;
        margin: 1 1 0 1;
    }

    #toolbar Label {
        margin-right: 1;
    }

    #current_dir {
        width: 1fr;
        color: $text-muted;
    }

    #toolbar Button {
        margin-left: 1;
    }

    SearchBar {
        height: auto;
        margin: 1;
    }

    .search-row {
        height: 3;
    }

    .search-label {
        width: 10;
        height: 3;
        content-align: left middle;
    }

    .search-input {
        width: 1fr;
        border: solid $accent;
    }

    .search-row Button {
        height: 3;
        margin-left: 1;
    }

    #placeholder {
        height: 1fr;
        padding: 1 2;
    }

    #placeholder_title {
        text-style: bold;
        margin-bottom: 1;
    }

    #placeholder Button {
        margin-top: 1;
        min-width: 30;
    }

    DataTable {
        height: 1fr;
        width: 1fr;
        margin: 0 1;
    }

    #empty_text {
        width: 1fr;
        content-align: center middle;
        color: $text-muted;
    }

    StatusBar {
        dock: bottom;
        height: 1;
        padding: 0 1;
    }

    #status_spacer {
        width: 1fr;
    }

    #warning_text {
        width: auto;
        color: yellow;
        text-style: bold;
        margin-right: 1;
    }

    #status_text {
        width: 25;
        content-align: right middle;
        min-width: 25;
    }
    """

    def __init__(self, config: AppConfig, controller: BrowserController):
        """Initialize the app."""
        super().__init__()
        self._config = config
        self.controller = controller

    def compose(self) -> ComposeResult:
        """Create child widgets for the app."""
        yield Header()
        with Horizontal(id="toolbar"):
            yield Label("Directory:")
            yield Label("", id="current_dir")
            yield Button("Change directory", id="change_dir", compact=True)
            yield Button("Refresh", id="refresh", compact=True)
        yield SearchBar(presets=self._config.pattern_presets)
        with Vertical(id="placeholder"):
            yield Label("", id="placeholder_title")
            yield Label("", id="placeholder_text")
            yield Button("Select directory", id="choose_dir")
            yield Button("Clear saved path", id="clear_saved")
        yield ResultsTable()
        yield Label("No matching files", id="empty_text")
        yield StatusBar()

    def on_mount(self) -> None:
        """Load the saved settings and show the first results."""
        self.controller.subscribe(self.render_state)
        state = self.controller.load()
        if state.view is ViewMode.NO_DIRECTORY:
            self.notify("Please select a directory to browse")

    def render_state(self, state: BrowserState) -> None:
        """Show ``state``; called by the controller after every change."""
        view = state.view
        showing_results = view is ViewMode.RESULTS
        width = self._config.path_display_width

        self.query_one("#current_dir", Label).update(truncate_path(state.root_directory, width))
        self.query_one("#refresh", Button).display = showing_results
        self.query_one("#placeholder", Vertical).display = not showing_results
        self.query_one("#clear_saved", Button).display = view is ViewMode.INVALID_DIRECTORY
        if view is ViewMode.NO_DIRECTORY:
            self.query_one("#placeholder_title", Label).update("No directory selected")
            self.query_one("#placeholder_text", Label).update("Select the directory you want to browse.")
            self.query_one("#choose_dir", Button).label = "Select directory"
        elif view is ViewMode.INVALID_DIRECTORY:
            self.query_one("#placeholder_title", Label).update("Directory is invalid or does not exist")
            self.query_one("#placeholder_text", Label).update(f"Current path: {state.root_directory}")
            self.query_one("#choose_dir", Button).label = "Select another directory"

        search_bar = self.query_one(SearchBar)
        search_bar.display = showing_results
        search_bar.sync(state.name_filter, state.pattern_string)

        table = self.query_one(ResultsTable)
        with self.batch_update():
            table.update_results(state.records)
        table.display = showing_results and bool(state.records)
        self.query_one("#empty_text", Label).display = showing_results and not state.records
        self.query_one(StatusBar).show(
            len(state.records) if showing_results else None,
            state.rejected_patterns,
        )

    def on_search_bar_filter_changed(self, message: SearchBar.FilterChanged) -> None:
        """Search again with the new name filter."""
        self.controller.set_name_filter(message.value)

    def on_search_bar_pattern_changed(self, message: SearchBar.PatternChanged) -> None:
        """Search again with the new patterns."""
        self.controller.set_pattern_string(message.value)

    def on_results_table_open_requested(self, message: ResultsTable.OpenRequested) -> None:
        """Open the activated file."""
        self.controller.open_file(message.record)

    @on(Button.Pressed, "#change_dir, #choose_dir")
    def _on_change_dir_pressed(self) -> None:
        self.action_change_directory()

    @on(Button.Pressed, "#refresh")
    def _on_refresh_pressed(self) -> None:
        self.action_refresh()

    @on(Button.Pressed, "#clear_saved")
    def _on_clear_saved_pressed(self) -> None:
        self.action_clear_directory()

    @work(exclusive=True)
    async def action_change_directory(self) -> None:
        """Open the directory chooser and browse the chosen directory."""
        try:
            chosen = await self.push_screen_wait(DirectoryChooser(default_path=self.controller.default_browse_path()))
        except WorkerCancelled:
            return
        if chosen is not None:
            self.controller.change_directory(chosen)

    def action_refresh(self) -> None:
        """Search the current directory again."""
        self.controller.refresh()

    def action_clear_search(self) -> None:
        """Reset the name filter and patterns."""
        self.controller.clear_search_settings()

    def action_clear_directory(self) -> None:
        """Forget the saved directory."""
        self.controller.clear_directory_path()

    def action_close_app(self) -> None:
        """Close the application."""
        self.exit()

    def dump_config(self) -> AppConfig:
        """Dump the app config."""
        return self._config.model_copy()
