"""Test suite for the recursive multi-pattern file search."""

import os
from pathlib import Path

import pytest

from filebrowser.common.pydantic import parse_patterns
from filebrowser.core import file_search
from filebrowser.core.file_search import FileSearchEngine, InvalidPatternError, compile_pattern, walk_files
from tests.test_utils import RecordingDiagnostics, make_files


def names(records) -> list[str]:
    return [r.display_name for r in records]


class TestParsePatterns:
    """Test pattern string parsing."""

    @pytest.mark.parametrize("value", ["", None, " ", ";", " ; ;  "])
    def test_blank_means_everything(self, value: str | None):
        """Nothing usable falls back to the catch-all pattern."""
        assert parse_patterns(value) == ("*",)

    def test_splits_and_trims(self):
        """Tokens are trimmed and empties dropped, order kept."""
        assert parse_patterns(" *.png ;;*.jpg; ") == ("*.png", "*.jpg")


class TestCompilePattern:
    """Test wildcard compilation."""

    def test_star_and_question_mark(self):
        """Star matches any run, question mark one character."""
        assert compile_pattern("*.txt").fullmatch("notes.txt")
        assert compile_pattern("file?.md").fullmatch("file1.md")
        assert not compile_pattern("file?.md").fullmatch("file12.md")

    def test_case_insensitive(self):
        """Matching ignores case."""
        assert compile_pattern("*.txt").fullmatch("B.TXT")

    def test_brackets_are_literal(self):
        """Square brackets are not character classes."""
        assert compile_pattern("[a].txt").fullmatch("[a].txt")
        assert not compile_pattern("[a].txt").fullmatch("a.txt")

    @pytest.mark.parametrize("pattern", ["sub/*.txt", "..", ".", "bad\0*"])
    def test_rejects_invalid_patterns(self, pattern: str):
        """Paths, dot entries and reserved characters are rejected."""
        with pytest.raises(InvalidPatternError):
            compile_pattern(pattern)


class TestFileSearchEngine:
    """Test FileSearchEngine.search."""

    @pytest.fixture
    def diagnostics(self) -> RecordingDiagnostics:
        """Diagnostics fixture."""
        return RecordingDiagnostics()

    @pytest.fixture
    def engine(self, diagnostics: RecordingDiagnostics) -> FileSearchEngine:
        """Engine fixture."""
        return FileSearchEngine(diagnostics)

    def test_pattern_with_case_insensitive_sort(self, engine: FileSearchEngine, temp_workspace: Path):
        """Only matching files, sorted ignoring case."""
        make_files(temp_workspace, ["a.txt", "B.TXT", "note.md"])

        results = engine.search(temp_workspace, "", "*.txt")

        assert names(results) == ["a.txt", "B.TXT"]

    def test_multiple_patterns_with_filter(self, engine: FileSearchEngine, temp_workspace: Path):
        """Several patterns combined with a name filter."""
        make_files(temp_workspace, ["photo.png", "photo.jpg", "doc.pdf"])

        results = engine.search(temp_workspace, "photo", "*.png;*.jpg")

        assert names(results) == ["photo.jpg", "photo.png"]

    def test_missing_root_returns_empty_and_warns(
        self, engine: FileSearchEngine, diagnostics: RecordingDiagnostics, temp_workspace: Path
    ):
        """A root that does not exist gives no results and a warning."""
        results = engine.search(temp_workspace / "missing", "", "*")

        assert results == []
        assert len(diagnostics.warnings) == 1
        assert diagnostics.errors == []

    @pytest.mark.parametrize("pattern_string", ["", "  ", ";;"])
    def test_blank_pattern_string_matches_everything(
        self, engine: FileSearchEngine, temp_workspace: Path, pattern_string: str
    ):
        """Blank pattern strings behave exactly like '*'."""
        make_files(temp_workspace, ["a.txt", "b.md", "sub/c.py"])

        assert engine.search(temp_workspace, "", pattern_string) == engine.search(temp_workspace, "", "*")
        assert names(engine.search(temp_workspace, "", pattern_string)) == ["a.txt", "b.md", "c.py"]

    def test_blank_pattern_respects_filter(self, engine: FileSearchEngine, temp_workspace: Path):
        """The filter still applies when the pattern is blank."""
        make_files(temp_workspace, ["report.txt", "notes.md"])

        assert names(engine.search(temp_workspace, "REP", "")) == ["report.txt"]

    def test_overlapping_patterns_do_not_duplicate(self, engine: FileSearchEngine, temp_workspace: Path):
        """A file matched by two patterns appears once."""
        make_files(temp_workspace, ["photo.png", "other.png"])

        results = engine.search(temp_workspace, "", "*.png;photo.*;*")

        paths = [r.absolute_path for r in results]
        assert len(paths) == len(set(paths)) == 2

    def test_searches_subdirectories(self, engine: FileSearchEngine, temp_workspace: Path):
        """The search is recursive."""
        make_files(temp_workspace, ["top.txt", "a/mid.txt", "a/b/deep.txt", "a/b/deep.md"])

        results = engine.search(temp_workspace, "", "*.txt")

        assert names(results) == ["deep.txt", "mid.txt", "top.txt"]
        assert all(r.absolute_path.is_absolute() for r in results)

    def test_same_name_in_different_directories(self, engine: FileSearchEngine, temp_workspace: Path):
        """Files sharing a name are all kept, in a deterministic order."""
        make_files(temp_workspace, ["x/readme.md", "y/README.md"])

        first = engine.search(temp_workspace, "", "*.md")
        second = engine.search(temp_workspace, "", "*.md")

        assert len(first) == 2
        assert first == second

    def test_results_sorted_case_insensitively(self, engine: FileSearchEngine, temp_workspace: Path):
        """Adjacent results are in case-insensitive order."""
        make_files(temp_workspace, ["Zeta.txt", "alpha.txt", "Beta.txt", "gamma.TXT", "_under.txt"])

        results = engine.search(temp_workspace, "", "*")

        keys = [r.display_name.upper() for r in results]
        assert keys == sorted(keys)

    def test_punctuation_sorts_after_letters(self, engine: FileSearchEngine, temp_workspace: Path):
        """Names compare on their upper-cased code points, so '[' and '_' follow 'Z'."""
        make_files(temp_workspace, ["_a.txt", "b.txt", "Z.txt", "[x].txt"])

        results = engine.search(temp_workspace, "", "*")

        assert names(results) == ["b.txt", "Z.txt", "[x].txt", "_a.txt"]

    def test_filter_is_case_insensitive_substring(self, engine: FileSearchEngine, temp_workspace: Path):
        """Every returned name contains the filter, ignoring case."""
        make_files(temp_workspace, ["MyPhoto.png", "photograph.jpg", "doc.pdf"])

        results = engine.search(temp_workspace, "PHOTO", "*")

        assert names(results) == ["MyPhoto.png", "photograph.jpg"]
        assert all("photo" in r.display_name.lower() for r in results)

    def test_empty_filter_keeps_everything(self, engine: FileSearchEngine, temp_workspace: Path):
        """Empty and missing filters are the same as no filter."""
        make_files(temp_workspace, ["a.txt", "b.txt"])

        assert engine.search(temp_workspace, "", "*") == engine.search(temp_workspace, None, "*")

    def test_invalid_pattern_is_skipped(
        self, engine: FileSearchEngine, temp_workspace: Path, log_messages: list[str]
    ):
        """A bad pattern is logged and the others still run."""
        make_files(temp_workspace, ["a.txt", "b.md"])

        report = engine.search_report(temp_workspace, "", "sub/*.txt;*.md")

        assert names(report.records) == ["b.md"]
        assert report.rejected_patterns == ["sub/*.txt"]
        assert any("sub/*.txt" in m for m in log_messages)

    def test_only_invalid_patterns_give_no_results(self, engine: FileSearchEngine, temp_workspace: Path):
        """All patterns rejected means nothing matches."""
        make_files(temp_workspace, ["a.txt"])

        report = engine.search_report(temp_workspace, "", "..;a/b")

        assert report.records == []
        assert report.rejected_patterns == ["..", "a/b"]

    def test_records_carry_size(self, engine: FileSearchEngine, temp_workspace: Path):
        """Records are snapshots of existing files."""
        path = temp_workspace / "data.bin"
        path.write_bytes(b"12345")

        [record] = engine.search(temp_workspace, "", "*.bin")

        assert record.size_bytes == 5
        assert record.exists
        assert record.absolute_path == path.absolute()

    def test_unexpected_error_is_reported_once(
        self,
        engine: FileSearchEngine,
        diagnostics: RecordingDiagnostics,
        temp_workspace: Path,
        monkeypatch: pytest.MonkeyPatch,
    ):
        """Faults during the walk become an empty result and one error."""

        def _broken_walk(root: Path):
            raise PermissionError(f"denied: {root}")

        monkeypatch.setattr(file_search, "walk_files", _broken_walk)

        assert engine.search(temp_workspace, "", "*") == []
        assert len(diagnostics.errors) == 1
        assert "denied" in diagnostics.errors[0]

    def test_unreadable_root_is_reported_once(
        self,
        engine: FileSearchEngine,
        diagnostics: RecordingDiagnostics,
        temp_workspace: Path,
        monkeypatch: pytest.MonkeyPatch,
    ):
        """Permission denied on the root itself gives no results and one error."""
        make_files(temp_workspace, ["a.txt", "sub/b.txt"])
        original_scandir = os.scandir

        def _scandir(path):
            if os.fspath(path) == str(temp_workspace):
                raise PermissionError(13, "Permission denied", os.fspath(path))
            return original_scandir(path)

        monkeypatch.setattr(os, "scandir", _scandir)

        assert engine.search(temp_workspace, "", "*") == []
        assert len(diagnostics.errors) == 1
        assert "Permission denied" in diagnostics.errors[0]

    def test_unreadable_subdirectory_is_skipped(
        self,
        engine: FileSearchEngine,
        diagnostics: RecordingDiagnostics,
        temp_workspace: Path,
        monkeypatch: pytest.MonkeyPatch,
        log_messages: list[str],
    ):
        """A subdirectory that cannot be read is logged and its siblings still searched."""
        make_files(temp_workspace, ["ok.txt", "good/a.txt", "locked/b.txt"])
        locked = str(temp_workspace / "locked")
        original_scandir = os.scandir

        def _scandir(path):
            if os.fspath(path) == locked:
                raise PermissionError(13, "Permission denied", os.fspath(path))
            return original_scandir(path)

        monkeypatch.setattr(os, "scandir", _scandir)

        assert names(engine.search(temp_workspace, "", "*")) == ["a.txt", "ok.txt"]
        assert sorted(p.name for p in walk_files(temp_workspace)) == ["a.txt", "ok.txt"]
        assert diagnostics.errors == []
        assert any(m.startswith(f"Skipping unreadable directory {locked}") for m in log_messages)

    def test_walk_raises_for_unreadable_root(self, temp_workspace: Path, monkeypatch: pytest.MonkeyPatch):
        """Walking an unreadable root raises instead of yielding nothing."""
        original_scandir = os.scandir

        def _scandir(path):
            if os.fspath(path) == str(temp_workspace):
                raise PermissionError(13, "Permission denied", os.fspath(path))
            return original_scandir(path)

        monkeypatch.setattr(os, "scandir", _scandir)

        with pytest.raises(PermissionError):
            list(walk_files(temp_workspace))

    def test_vanished_files_are_dropped(
        self, engine: FileSearchEngine, temp_workspace: Path, monkeypatch: pytest.MonkeyPatch
    ):
        """Files that disappear after enumeration are left out."""
        kept, gone = make_files(temp_workspace, ["kept.txt", "gone.txt"])
        original_walk = file_search.walk_files

        def _walk_then_delete(root: Path):
            files = list(original_walk(root))
            gone.unlink()
            return files

        monkeypatch.setattr(file_search, "walk_files", _walk_then_delete)

        assert names(engine.search(temp_workspace, "", "*")) == ["kept.txt"]

    def test_root_that_is_a_file(
        self, engine: FileSearchEngine, diagnostics: RecordingDiagnostics, temp_workspace: Path
    ):
        """A file given as root is an invalid directory."""
        [path] = make_files(temp_workspace, ["a.txt"])

        assert engine.search(path, "", "*") == []
        assert diagnostics.warnings
