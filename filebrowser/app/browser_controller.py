"""Browser state, persisted settings and file actions."""

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from loguru import logger

from ..common.diagnostics import Diagnostics, LogDiagnostics
from ..common.pydantic import CATCH_ALL_PATTERN, BrowserSettings, FileRecord
from ..core.file_search import FileSearchEngine
from ..core.path_validator import is_valid_directory
from ..prefs.store import PreferenceStore
from .launcher import Launcher, open_with_default_app

DIRECTORY_KEY = "FileBrowser_DirectoryPath"
SEARCH_TERM_KEY = "FileBrowser_SearchTerm"
SEARCH_PATTERN_KEY = "FileBrowser_SearchPattern"


class ViewMode(StrEnum):
    """What the browser can show."""

    NO_DIRECTORY = "no_directory"
    INVALID_DIRECTORY = "invalid_directory"
    RESULTS = "results"


@dataclass
class BrowserState:
    """Everything the UI renders."""

    root_directory: str = ""
    name_filter: str = ""
    pattern_string: str = CATCH_ALL_PATTERN
    records: list[FileRecord] = field(default_factory=list)
    rejected_patterns: list[str] = field(default_factory=list)

    @property
    def view(self) -> ViewMode:
        """View mode derived from the root directory."""
        if not self.root_directory:
            return ViewMode.NO_DIRECTORY
        if not Path(self.root_directory).is_dir():
            return ViewMode.INVALID_DIRECTORY
        return ViewMode.RESULTS


class BrowserController:
    """Keeps the browser state in sync with the preference store and the filesystem.

    Every mutating method persists what changed, reruns the search and notifies
    subscribers once. None of them raise: failures go to ``diagnostics``.
    """

    def __init__(
        self,
        store: PreferenceStore,
        diagnostics: Diagnostics | None = None,
        engine: FileSearchEngine | None = None,
        launcher: Launcher = open_with_default_app,
    ):
        """Initialize the browser controller."""
        self.store = store
        self.diagnostics = diagnostics if diagnostics is not None else LogDiagnostics()
        self.engine = engine if engine is not None else FileSearchEngine(self.diagnostics)
        self.launcher = launcher
        self.state = BrowserState()
        self._subscribers: list[Callable[[BrowserState], None]] = []

    def subscribe(self, callback: Callable[[BrowserState], None]) -> None:
        """Call ``callback`` with the new state after every change."""
        self._subscribers.append(callback)

    def _notify(self) -> None:
        for callback in self._subscribers:
            callback(self.state)

    def _persist(self, updates: dict[str, str] | None = None, deletions: tuple[str, ...] = ()) -> bool:
        try:
            for key, value in (updates or {}).items():
                self.store.set(key, value)
            for key in deletions:
                self.store.delete(key)
            self.store.flush()
        except Exception as e:
            self.diagnostics.error(f"Failed to save preferences: {e}")
            return False
        return True

    @property
    def settings(self) -> BrowserSettings:
        """Settings as currently stored."""
        return BrowserSettings(
            root_directory=self.store.get(DIRECTORY_KEY, ""),
            name_filter=self.store.get(SEARCH_TERM_KEY, ""),
            pattern_string=self.store.get(SEARCH_PATTERN_KEY, CATCH_ALL_PATTERN),
        )

    def load(self) -> BrowserState:
        """Read stored settings, repair them if needed and run the first search."""
        settings = self.settings
        pattern_string = settings.pattern_string
        if not pattern_string.strip():
            logger.warning("Stored search pattern is empty, resetting it to '*'")
            pattern_string = CATCH_ALL_PATTERN
            self._persist({SEARCH_PATTERN_KEY: pattern_string})

        self.state = BrowserState(
            root_directory=settings.root_directory,
            name_filter=settings.name_filter,
            pattern_string=pattern_string,
        )
        return self.refresh()

    def has_directory_path(self) -> bool:
        """Whether a root directory has been saved."""
        return bool(self.get_directory_path())

    def get_directory_path(self) -> str:
        """Saved root directory, or an empty string."""
        return self.store.get(DIRECTORY_KEY, "")

    def default_browse_path(self) -> Path | None:
        """Where the directory chooser should start."""
        saved = self.get_directory_path()
        return Path(saved) if saved and is_valid_directory(saved) else None

    def save_directory_path(self, path: str | Path) -> bool:
        """Persist ``path`` as the root directory if it is a valid directory.

        Relative paths are stored made absolute against the working directory.
        """
        if not is_valid_directory(path):
            self.diagnostics.error(f"Invalid directory path: {path}")
            return False
        return self._persist({DIRECTORY_KEY: os.path.abspath(path)})

    def clear_directory_path(self) -> None:
        """Forget the saved root directory."""
        self._persist(deletions=(DIRECTORY_KEY,))
        self.state.root_directory = ""
        self.refresh()

    def change_directory(self, path: str | Path | None) -> bool:
        """Switch the browser to ``path``; an empty choice is ignored."""
        if not path:
            return False
        if not self.save_directory_path(path):
            return False
        self.state.root_directory = os.path.abspath(path)
        logger.info(f"Browsing {self.state.root_directory}")
        self.refresh()
        return True

    def set_name_filter(self, name_filter: str) -> None:
        """Update and persist the name filter."""
        if name_filter == self.state.name_filter:
            return
        self.state.name_filter = name_filter
        self._persist({SEARCH_TERM_KEY: name_filter})
        self.refresh()

    def set_pattern_string(self, pattern_string: str) -> None:
        """Update and persist the pattern string; blank is stored as ``*``."""
        if pattern_string == self.state.pattern_string:
            return
        self.state.pattern_string = pattern_string
        self._persist({SEARCH_PATTERN_KEY: pattern_string if pattern_string.strip() else CATCH_ALL_PATTERN})
        self.refresh()

    def clear_search_settings(self) -> None:
        """Reset the filter and pattern and drop them from the store."""
        self.state.name_filter = ""
        self.state.pattern_string = CATCH_ALL_PATTERN
        self._persist(deletions=(SEARCH_TERM_KEY, SEARCH_PATTERN_KEY))
        self.refresh()

    def refresh(self) -> BrowserState:
        """Rerun the search for the current state."""
        state = self.state
        if state.view is ViewMode.RESULTS:
            report = self.engine.search_report(state.root_directory, state.name_filter, state.pattern_string)
            state.records = report.records
            state.rejected_patterns = report.rejected_patterns
        else:
            state.records = []
            state.rejected_patterns = []
        self._notify()
        return state

    def open_file(self, record: FileRecord | None) -> bool:
        """Open ``record`` with the default application."""
        if record is None or not record.absolute_path.is_file():
            self.diagnostics.error("File does not exist or has been deleted")
            return False
        try:
            self.launcher(record.absolute_path)
        except Exception as e:
            self.diagnostics.error(f"Failed to open file: {e}")
            return False
        logger.info(f"Opened file: {record.absolute_path}")
        return True
