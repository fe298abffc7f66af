"""Recursive multi-pattern file search."""

import os
import re
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path

from loguru import logger
from more_itertools import flatten

from ..common.diagnostics import Diagnostics, LogDiagnostics
from ..common.pydantic import FileRecord, SearchQuery, SearchReport
from .path_validator import INVALID_FILE_NAME_CHARS, is_valid_directory, is_valid_file

WILDCARDS = frozenset("*?")


class InvalidPatternError(ValueError):
    """Wildcard pattern that cannot be matched against file names."""


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a file-name wildcard into a case-insensitive regex.

    ``*`` matches any run of characters and ``?`` exactly one. Every other
    character, ``[`` included, is literal. The whole name must match.
    """
    separators = {"/", os.sep, os.altsep} - {None}
    if pattern in {".", ".."} or any(sep in pattern for sep in separators):
        raise InvalidPatternError(f"pattern must name files, not paths: {pattern!r}")
    reserved = sorted(set(pattern) & (INVALID_FILE_NAME_CHARS - WILDCARDS))
    if reserved:
        raise InvalidPatternError(f"pattern contains reserved characters {reserved!r}: {pattern!r}")

    regex = "".join(".*" if ch == "*" else "." if ch == "?" else re.escape(ch) for ch in pattern)
    return re.compile(regex, re.IGNORECASE | re.DOTALL)


def walk_files(root: Path) -> Iterable[Path]:
    """Walk all files below ``root``, skipping unreadable subdirectories.

    Failing to read ``root`` itself raises.
    """
    top = os.fspath(root)

    def _on_error(error: OSError) -> None:
        if error.filename == top:
            raise error
        logger.warning(f"Skipping unreadable directory {error.filename}: {error.strerror}")

    for dirpath, _, filenames in os.walk(top, onerror=_on_error):
        for name in filenames:
            yield Path(dirpath) / name


def filter_by_name(records: Iterable[FileRecord], name_filter: str) -> list[FileRecord]:
    """Keep records whose display name contains ``name_filter``, ignoring case."""
    if not name_filter:
        return list(records)
    needle = name_filter.casefold()
    return [r for r in records if needle in r.display_name.casefold()]


def sort_records(records: Iterable[FileRecord]) -> list[FileRecord]:
    """Order records by upper-cased display name, compared ordinally; the path breaks ties."""
    return sorted(records, key=lambda r: (r.display_name.upper(), str(r.absolute_path)))


class FileSearchEngine:
    """Finds files under a root directory by wildcard patterns and a name filter.

    Nothing is kept between calls. Problems are reported to ``diagnostics`` and
    turn into an empty result, never into an exception.
    """

    def __init__(self, diagnostics: Diagnostics | None = None):
        """Initialize the search engine."""
        self.diagnostics = diagnostics if diagnostics is not None else LogDiagnostics()

    def search(
        self, root_directory: str | Path | None, name_filter: str | None, pattern_string: str | None
    ) -> list[FileRecord]:
        """Search ``root_directory`` recursively; see :meth:`search_report`."""
        return self.search_report(root_directory, name_filter, pattern_string).records

    def search_report(
        self, root_directory: str | Path | None, name_filter: str | None, pattern_string: str | None
    ) -> SearchReport:
        """Search ``root_directory`` and report the patterns that were skipped."""
        if not is_valid_directory(root_directory):
            self.diagnostics.warn(f"Invalid directory path: {root_directory}")
            return SearchReport()

        query = SearchQuery.build(Path(root_directory), name_filter, pattern_string)  # type: ignore[arg-type]
        try:
            return self._run(query)
        except Exception as e:
            self.diagnostics.error(f"Failed to list files: {e}")
            return SearchReport()

    def _compile(self, patterns: Iterable[str]) -> tuple[list[re.Pattern[str]], list[str]]:
        matchers: list[re.Pattern[str]] = []
        rejected: list[str] = []
        for pattern in patterns:
            try:
                matchers.append(compile_pattern(pattern))
            except InvalidPatternError as e:
                logger.warning(f"Invalid search pattern '{pattern}': {e}")
                rejected.append(pattern)
        return matchers, rejected

    def _run(self, query: SearchQuery) -> SearchReport:
        matchers, rejected = self._compile(query.patterns)
        files = list(walk_files(query.root_directory)) if matchers else []

        # One entry per file, however many patterns match it
        matched = set(flatten([p for p in files if m.fullmatch(p.name)] for m in matchers))

        records = [FileRecord.from_path(p) for p in matched if is_valid_file(p)]
        records = filter_by_name(records, query.name_filter)
        logger.debug(
            f"Found {len(records)} files in {query.root_directory} for patterns {list(query.patterns)}"
        )
        return SearchReport(records=sort_records(records), rejected_patterns=rejected)
