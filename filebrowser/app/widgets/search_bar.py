"""Search bar with the name filter, the pattern string and pattern presets."""

from typing import Any

from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Input, Label


class SearchBar(Vertical):
    """Edits the name filter and pattern string and reports every change."""

    class FilterChanged(Message):
        """Message emitted when the name filter changes."""

        def __init__(self, value: str) -> None:
            """Initialize the filter changed message."""
            super().__init__()
            self.value = value

    class PatternChanged(Message):
        """Message emitted when the pattern string changes."""

        def __init__(self, value: str) -> None:
            """Initialize the pattern changed message."""
            super().__init__()
            self.value = value

    def __init__(self, presets: dict[str, str] | None = None, **kwargs: Any):
        """Initialize the search bar."""
        super().__init__(**kwargs)
        self.presets = dict(presets or {})
        self.filter_input = Input(placeholder="Name contains...", classes="search-input", id="search_input")
        self.pattern_input = Input(placeholder="*.png;*.jpg", classes="search-input", id="pattern_input")
        self.clear_button = Button("Clear", id="clear_filter", compact=True)

    def compose(self) -> ComposeResult:
        """Compose the search bar."""
        with Horizontal(classes="search-row"):
            yield Label("Search:", classes="search-label")
            yield self.filter_input
            yield self.clear_button
        with Horizontal(classes="search-row"):
            yield Label("Patterns:", classes="search-label")
            yield self.pattern_input
            for i, label in enumerate(self.presets):
                yield Button(label, id=f"preset_{i}", classes="preset", compact=True)

    def on_mount(self) -> None:
        """Mount the search bar."""
        self.clear_button.display = bool(self.filter_input.value)
        self.filter_input.focus()

    def sync(self, name_filter: str, pattern_string: str) -> None:
        """Show the given values without emitting change messages."""
        for widget, value in ((self.filter_input, name_filter), (self.pattern_input, pattern_string)):
            if widget.value != value:
                with widget.prevent(Input.Changed):
                    widget.value = value
        self.clear_button.display = bool(name_filter)

    @on(Input.Changed, "#search_input")
    def _on_filter_changed(self, message: Input.Changed) -> None:
        message.stop()
        self.clear_button.display = bool(message.value)
        self.post_message(self.FilterChanged(message.value))

    @on(Input.Changed, "#pattern_input")
    def _on_pattern_changed(self, message: Input.Changed) -> None:
        message.stop()
        self.post_message(self.PatternChanged(message.value))

    @on(Button.Pressed, "#clear_filter")
    def _on_clear(self, message: Button.Pressed) -> None:
        message.stop()
        self.filter_input.value = ""

    @on(Button.Pressed, ".preset")
    def _on_preset(self, message: Button.Pressed) -> None:
        message.stop()
        index = int((message.button.id or "preset_0").removeprefix("preset_"))
        self.pattern_input.value = list(self.presets.values())[index]
