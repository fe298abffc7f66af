"""Results table widget."""

from typing import Any

from rich.text import Text
from textual.message import Message
from textual.widgets import DataTable

from ...common.pydantic import FileRecord


def format_size(n: int | None) -> str:
    """Human readable file size."""
    if n is None:
        return ""
    units = ["B", "KB", "MB", "GB"]
    i, s = 0, float(n)
    while s >= 1024 and i < len(units) - 1:
        s /= 1024
        i += 1
    if i == 0:
        return f"{int(s)} {units[i]}"
    else:
        return f"{s:.1f} {units[i]}"


class ResultsTable(DataTable):
    """File list; selecting a row asks the app to open the file."""

    class OpenRequested(Message):
        """Message emitted when the user activates a row."""

        def __init__(self, record: FileRecord) -> None:
            """Initialize the open requested message."""
            super().__init__()
            self.record = record

    def __init__(self, **kwargs: Any):
        """Initialize the results table."""
        super().__init__(cursor_type="row", zebra_stripes=True, **kwargs)
        self._records: dict[str, FileRecord] = {}

    def on_mount(self) -> None:
        """Set up the table when mounted."""
        self.add_columns("Name", "Size", "Path")

    def update_results(self, records: list[FileRecord]) -> None:
        """Replace the rows with ``records``, keeping their order."""
        self.clear()
        self._records = {}
        for record in records:
            key = str(record.absolute_path)
            self._records[key] = record
            self.add_row(
                record.display_name,
                Text(format_size(record.size_bytes), justify="right"),
                str(record.absolute_path.parent),
                key=key,
            )

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Open the selected file."""
        record = self._records.get(event.row_key.value or "")
        if record is not None:
            event.stop()
            self.post_message(self.OpenRequested(record))
