"""Pydantic models shared by the search core and the app."""

from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, Field

CATCH_ALL_PATTERN = "*"
PATTERN_SEPARATOR = ";"


class FrozenBaseModel(BaseModel):
    """Pydantic frozen base model."""

    model_config = ConfigDict(frozen=True, strict=True)


def parse_patterns(pattern_string: str | None) -> tuple[str, ...]:
    """Split a ``;``-separated pattern string into trimmed, non-empty patterns.

    Falls back to the catch-all pattern when nothing usable remains, so
    ``""``, ``" ; "`` and ``"*"`` all select every file.
    """
    tokens = (token.strip() for token in (pattern_string or "").split(PATTERN_SEPARATOR))
    patterns = tuple(token for token in tokens if token)
    return patterns or (CATCH_ALL_PATTERN,)


class SearchQuery(FrozenBaseModel):
    """Search query."""

    root_directory: Path
    patterns: tuple[str, ...] = (CATCH_ALL_PATTERN,)
    name_filter: str = ""

    @classmethod
    def build(cls, root_directory: Path | str, name_filter: str | None, pattern_string: str | None) -> Self:
        """Build a query from the raw values the user edits."""
        return cls(
            root_directory=Path(root_directory),
            patterns=parse_patterns(pattern_string),
            name_filter=name_filter or "",
        )


class FileRecord(FrozenBaseModel):
    """Snapshot of a matched file, true when read."""

    absolute_path: Path
    display_name: str
    size_bytes: int = Field(ge=0)
    exists: bool

    @classmethod
    def from_path(cls, path: Path) -> Self:
        """Read a record for ``path`` from the filesystem."""
        absolute = Path(path).absolute()
        try:
            size = absolute.stat().st_size
            exists = absolute.is_file()
        except OSError:
            size, exists = 0, False
        return cls(absolute_path=absolute, display_name=absolute.name, size_bytes=size, exists=exists)


class SearchReport(FrozenBaseModel):
    """Search results together with the patterns that could not be used."""

    records: list[FileRecord] = Field(default_factory=list)
    rejected_patterns: list[str] = Field(default_factory=list)


class BrowserSettings(FrozenBaseModel):
    """Settings persisted in the preference store."""

    root_directory: str = ""
    name_filter: str = ""
    pattern_string: str = CATCH_ALL_PATTERN
